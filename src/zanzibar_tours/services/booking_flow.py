"""Client-held state machine for booking an activity."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import StrEnum

from zanzibar_tours.domain.errors import DomainError
from zanzibar_tours.domain.models import BookingDraft
from zanzibar_tours.services.bookings import BookingService
from zanzibar_tours.services.notifications import Notifier
from zanzibar_tours.services.session_store import SessionReader

logger = logging.getLogger(__name__)

MISSING_NAME_MESSAGE = "Please enter your full name."
BOOKING_SENT_MESSAGE = "Booking sent!"


class FlowState(StrEnum):
    """States of the booking flow."""

    IDLE = "idle"
    SELECTING = "selecting"
    SUBMITTING = "submitting"


@dataclass
class BookingForm:
    """Fields the tourist fills in before submitting."""

    full_name: str = ""
    notes: str = ""


@dataclass
class Selection:
    """The activity being booked."""

    location_id: int
    activity_id: int
    activity_name: str = ""


@dataclass
class BookingFlow:
    """Drives select -> fill form -> submit -> refresh.

    Failures keep the form so the user can correct it; success clears the
    selection and asks the owner to refetch its booking list.
    """

    booking_service: BookingService
    session: SessionReader
    notifier: Notifier
    on_booked: Callable[[], Awaitable[None]]
    state: FlowState = FlowState.IDLE
    selection: Selection | None = None
    form: BookingForm = field(default_factory=BookingForm)
    history: list[FlowState] = field(default_factory=list)

    def select(self, location_id: int, activity_id: int, activity_name: str = "") -> None:
        """Start booking an activity, resetting the form."""
        if self.state is FlowState.SUBMITTING:
            return
        self.selection = Selection(location_id, activity_id, activity_name)
        self.form = BookingForm()
        self._move(FlowState.SELECTING)

    def update_form(self, full_name: str | None = None, notes: str | None = None) -> None:
        """Edit the form while an activity is selected."""
        if self.state is not FlowState.SELECTING:
            return
        if full_name is not None:
            self.form.full_name = full_name
        if notes is not None:
            self.form.notes = notes

    def cancel(self) -> None:
        """Dismiss the form without side effects."""
        if self.state is not FlowState.SELECTING:
            return
        self.selection = None
        self.form = BookingForm()
        self._move(FlowState.IDLE)

    async def submit(self) -> bool:
        """Submit the form; return True when the booking was created."""
        if self.state is not FlowState.SELECTING or self.selection is None:
            return False
        if not self.form.full_name.strip():
            self.notifier.error(MISSING_NAME_MESSAGE)
            return False

        draft = BookingDraft(
            location_id=self.selection.location_id,
            activity_id=self.selection.activity_id,
            user_id=self.session.current.user_id,
            full_name=self.form.full_name.strip(),
            notes=self.form.notes.strip(),
        )
        self._move(FlowState.SUBMITTING)
        try:
            await self.booking_service.create(draft)
        except DomainError as exc:
            logger.info("Booking submission failed: %s", exc.message)
            self.notifier.error(exc.message)
            self._move(FlowState.SELECTING)
            return False

        self.notifier.success(BOOKING_SENT_MESSAGE)
        self.selection = None
        self.form = BookingForm()
        self._move(FlowState.IDLE)
        await self.on_booked()
        return True

    def _move(self, state: FlowState) -> None:
        self.state = state
        self.history.append(state)
