"""Role-specific dashboards.

Each dashboard keeps a cached snapshot of the server's collections and
refetches after every local mutation. Failures are caught here and turned
into notifications; nothing propagates past a dashboard.
"""

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass, field

from zanzibar_tours.domain.errors import DomainError
from zanzibar_tours.domain.models import (
    Activity,
    Booking,
    Location,
    UserRecord,
)
from zanzibar_tours.services.booking_flow import BookingFlow
from zanzibar_tours.services.bookings import (
    BookingService,
    count_by_status,
    filter_by_status,
)
from zanzibar_tours.services.cancellation import RefreshGuard
from zanzibar_tours.services.catalog import ActivityForm, CatalogService, LocationForm
from zanzibar_tours.services.map_browser import MapBrowser, MapView
from zanzibar_tours.services.notifications import Notifier
from zanzibar_tours.services.session_store import SessionReader
from zanzibar_tours.services.users import UserService, filter_users

logger = logging.getLogger(__name__)


async def _run_action(
    notifier: Notifier, action: Awaitable[object], success_message: str
) -> bool:
    try:
        await action
    except DomainError as exc:
        notifier.error(exc.message)
        return False
    notifier.success(success_message)
    return True


@dataclass
class HomePage:
    """Public landing page listing locations."""

    catalog_service: CatalogService
    notifier: Notifier
    locations: list[Location] = field(default_factory=list)
    _guard: RefreshGuard = field(default_factory=RefreshGuard)

    async def refresh(self) -> None:
        """Reload the locations."""
        token = self._guard.begin()
        try:
            locations = await self.catalog_service.list_locations()
        except DomainError as exc:
            if token.active:
                self.notifier.error(f"Failed to load locations: {exc.message}")
            return
        if token.active:
            self.locations = locations


@dataclass
class TouristDashboard:
    """Map of bookable activities plus the tourist's own bookings."""

    session: SessionReader
    catalog_service: CatalogService
    booking_service: BookingService
    notifier: Notifier
    map_browser: MapBrowser
    locations: list[Location] = field(default_factory=list)
    activities: list[Activity] = field(default_factory=list)
    bookings: list[Booking] = field(default_factory=list)
    status_filter: str = "All"
    flow: BookingFlow = field(init=False)
    _locations_guard: RefreshGuard = field(default_factory=RefreshGuard)
    _bookings_guard: RefreshGuard = field(default_factory=RefreshGuard)

    def __post_init__(self) -> None:
        self.flow = BookingFlow(
            booking_service=self.booking_service,
            session=self.session,
            notifier=self.notifier,
            on_booked=self.load_bookings,
        )

    async def refresh(self) -> None:
        """Reload locations, activities and bookings."""
        await asyncio.gather(self.load_locations(), self.load_bookings())

    async def load_locations(self) -> None:
        """Reload locations together with every location's activities."""
        token = self._locations_guard.begin()
        try:
            locations = await self.catalog_service.list_locations()
        except DomainError as exc:
            if token.active:
                self.notifier.error(f"Failed to load locations: {exc.message}")
            return
        if not token.active:
            logger.debug("Discarding stale location list")
            return
        self.locations = locations

        activities, failures = await self.catalog_service.list_all_activities(locations)
        if not token.active:
            logger.debug("Discarding stale activity list")
            return
        for location, exc in failures:
            logger.warning("Activities for location %s failed: %s", location.id, exc.message)
            self.notifier.error(
                f"Failed to load activities for {location.name}: {exc.message}"
            )
        self.activities = activities

    async def load_bookings(self) -> None:
        """Reload the current user's bookings."""
        token = self._bookings_guard.begin()
        try:
            bookings = await self.booking_service.list_for_user(
                self.session.current.user_id
            )
        except DomainError as exc:
            if token.active:
                self.notifier.error(f"Failed to load bookings: {exc.message}")
            return
        if not token.active:
            logger.debug("Discarding stale booking list")
            return
        self.bookings = bookings

    def unmount(self) -> None:
        """Discard the results of fetches still in flight."""
        self._locations_guard.cancel()
        self._bookings_guard.cancel()

    @property
    def visible_bookings(self) -> list[Booking]:
        """Bookings matching the status filter."""
        return filter_by_status(self.bookings, self.status_filter)

    def map_view(self, category: str | None = None, search: str | None = None) -> MapView:
        """Build the map with client-side filters applied."""
        return self.map_browser.build(self.locations, self.activities, category, search)

    def book(self, location_id: int, activity_id: int) -> None:
        """Open the booking form for an activity."""
        name = next(
            (activity.name for activity in self.activities if activity.id == activity_id),
            "",
        )
        self.flow.select(location_id, activity_id, name)


@dataclass
class OperatorDashboard:
    """Adds activities to locations and reviews bookings."""

    catalog_service: CatalogService
    booking_service: BookingService
    notifier: Notifier
    locations: list[Location] = field(default_factory=list)
    bookings: list[Booking] = field(default_factory=list)
    status_filter: str = "all"
    _locations_guard: RefreshGuard = field(default_factory=RefreshGuard)
    _bookings_guard: RefreshGuard = field(default_factory=RefreshGuard)

    async def refresh(self) -> None:
        """Reload locations and bookings."""
        await asyncio.gather(self._load_locations(), self._load_bookings())

    async def add_activity(self, location_id: int, form: ActivityForm) -> bool:
        """Create an activity under a location."""
        created = await _run_action(
            self.notifier,
            self.catalog_service.create_activity(location_id, form),
            "Activity created!",
        )
        if created:
            await self.refresh()
        return created

    async def update_booking(self, booking_id: int, status: str) -> bool:
        """Approve or reject a booking."""
        try:
            resolved = await self.booking_service.set_status(booking_id, status)
        except DomainError as exc:
            self.notifier.error(exc.message)
            return False
        self.notifier.success(f"Booking {resolved.value}!")
        await self._load_bookings()
        return True

    def unmount(self) -> None:
        """Discard the results of fetches still in flight."""
        self._locations_guard.cancel()
        self._bookings_guard.cancel()

    @property
    def visible_bookings(self) -> list[Booking]:
        """Bookings matching the status filter."""
        return filter_by_status(self.bookings, self.status_filter)

    async def _load_locations(self) -> None:
        token = self._locations_guard.begin()
        try:
            locations = await self.catalog_service.list_locations()
        except DomainError as exc:
            if token.active:
                self.notifier.error(f"Failed to load locations: {exc.message}")
            return
        if token.active:
            self.locations = locations

    async def _load_bookings(self) -> None:
        token = self._bookings_guard.begin()
        try:
            bookings = await self.booking_service.list_all()
        except DomainError as exc:
            if token.active:
                self.notifier.error(f"Failed to load bookings: {exc.message}")
            return
        if token.active:
            self.bookings = bookings


@dataclass
class AdminDashboard:
    """Manages locations, bookings and user accounts."""

    catalog_service: CatalogService
    booking_service: BookingService
    user_service: UserService
    notifier: Notifier
    locations: list[Location] = field(default_factory=list)
    bookings: list[Booking] = field(default_factory=list)
    users: list[UserRecord] = field(default_factory=list)
    _locations_guard: RefreshGuard = field(default_factory=RefreshGuard)
    _bookings_guard: RefreshGuard = field(default_factory=RefreshGuard)
    _users_guard: RefreshGuard = field(default_factory=RefreshGuard)

    async def refresh(self) -> None:
        """Reload locations, bookings and users."""
        await asyncio.gather(
            self._load_locations(), self._load_bookings(), self.load_users()
        )

    async def save_location(
        self, form: LocationForm, location_id: int | None = None
    ) -> bool:
        """Create a location, or update the one with location_id."""
        existing = None
        if location_id is not None:
            existing = self._find_location(location_id)
            if existing is None:
                await self._load_locations()
                existing = self._find_location(location_id)
            if existing is None:
                self.notifier.error("Location not found.")
                return False
        saved = await _run_action(
            self.notifier,
            self.catalog_service.save_location(form, existing),
            "Location updated!" if existing else "Location created!",
        )
        if saved:
            await self._load_locations()
        return saved

    async def delete_location(self, location_id: int) -> bool:
        """Delete a location."""
        deleted = await _run_action(
            self.notifier,
            self.catalog_service.delete_location(location_id),
            "Location deleted.",
        )
        if deleted:
            await self._load_locations()
        return deleted

    async def approve_booking(self, booking_id: int) -> bool:
        """Approve a booking."""
        return await self._booking_action(
            self.booking_service.approve(booking_id),
            "Booking approved!",
        )

    async def reject_booking(self, booking_id: int) -> bool:
        """Reject a booking."""
        return await self._booking_action(
            self.booking_service.reject(booking_id),
            "Booking rejected!",
        )

    async def delete_booking(self, booking_id: int) -> bool:
        """Delete a booking."""
        return await self._booking_action(
            self.booking_service.delete(booking_id), "Booking deleted."
        )

    async def load_users(self) -> None:
        """Reload the user accounts."""
        token = self._users_guard.begin()
        try:
            users = await self.user_service.list_users()
        except DomainError as exc:
            if token.active:
                self.notifier.error(f"Failed to load users: {exc.message}")
            return
        if token.active:
            self.users = users

    async def delete_user(self, user_id: int) -> bool:
        """Delete a user account."""
        deleted = await _run_action(
            self.notifier, self.user_service.delete_user(user_id), "User deleted."
        )
        if deleted:
            await self.load_users()
        return deleted

    def find_users(
        self, search: str | None = None, role: str | None = None
    ) -> list[UserRecord]:
        """Filter the cached users by search text and role."""
        return filter_users(self.users, search, role)

    def stats(self) -> dict[str, int]:
        """Summary counts for the dashboard cards."""
        return {
            "locations": len(self.locations),
            "bookings": len(self.bookings),
            "users": len(self.users),
            **count_by_status(self.bookings),
        }

    def unmount(self) -> None:
        """Discard the results of fetches still in flight."""
        self._locations_guard.cancel()
        self._bookings_guard.cancel()
        self._users_guard.cancel()

    def _find_location(self, location_id: int) -> Location | None:
        return next((loc for loc in self.locations if loc.id == location_id), None)

    async def _booking_action(self, action: Awaitable[object], message: str) -> bool:
        done = await _run_action(self.notifier, action, message)
        if done:
            await self._load_bookings()
        return done

    async def _load_locations(self) -> None:
        token = self._locations_guard.begin()
        try:
            locations = await self.catalog_service.list_locations()
        except DomainError as exc:
            if token.active:
                self.notifier.error(f"Failed to load locations: {exc.message}")
            return
        if token.active:
            self.locations = locations

    async def _load_bookings(self) -> None:
        token = self._bookings_guard.begin()
        try:
            bookings = await self.booking_service.list_all()
        except DomainError as exc:
            if token.active:
                self.notifier.error(f"Failed to load bookings: {exc.message}")
            return
        if token.active:
            self.bookings = bookings
