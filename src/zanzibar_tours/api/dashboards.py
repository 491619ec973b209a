"""Role-guarded dashboard routes."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi import status as http_status

from zanzibar_tours.api.request_models import (
    ActivityRequest,
    BookingFormRequest,
    SelectActivityRequest,
    StatusRequest,
)
from zanzibar_tours.domain.models import ImageUpload, Role
from zanzibar_tours.domain.sessions import Session
from zanzibar_tours.services.auth_gate import AccessOutcome, check_access
from zanzibar_tours.services.catalog import ActivityForm, LocationForm

if TYPE_CHECKING:
    from zanzibar_tours.containers import AppContainer
    from zanzibar_tours.services.booking_flow import BookingFlow


def require_roles(*roles: Role) -> Callable[[Request], Awaitable[Session]]:
    """Build a dependency that runs the auth gate before a route renders."""
    allowed = frozenset(roles)

    async def dependency(request: Request) -> Session:
        container: AppContainer = request.app.state.container
        session = container.session_store.current
        decision = check_access(session, allowed, request.url.path)
        if decision.outcome is AccessOutcome.REDIRECT_LOGIN:
            query = urlencode({"next": decision.remembered_path or ""})
            raise HTTPException(
                status_code=http_status.HTTP_303_SEE_OTHER,
                headers={"Location": f"{decision.redirect_to}?{query}"},
            )
        if decision.outcome is AccessOutcome.REDIRECT_HOME:
            raise HTTPException(
                status_code=http_status.HTTP_303_SEE_OTHER,
                headers={"Location": decision.redirect_to or "/"},
            )
        return session

    return dependency


tourist_router = APIRouter(
    prefix="/tourist",
    tags=["tourist"],
    dependencies=[Depends(require_roles(Role.TOURIST))],
)
operator_router = APIRouter(
    prefix="/operator",
    tags=["operator"],
    dependencies=[Depends(require_roles(Role.OPERATOR))],
)
admin_router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_roles(Role.ADMIN))],
)


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _outcome(container: AppContainer, ok: bool) -> dict[str, object]:
    return {"ok": ok, "notifications": container.notifications.active()}


def _flow_snapshot(flow: BookingFlow) -> dict[str, object]:
    return {
        "state": flow.state.value,
        "selection": flow.selection,
        "form": flow.form,
    }


@tourist_router.get("/dashboard")
async def tourist_dashboard(
    request: Request, category: str | None = None, search: str | None = None
) -> dict[str, object]:
    """Map of activities and the tourist's bookings."""
    container = _container(request)
    view = container.tourist_dashboard
    await view.refresh()
    return {
        "map": view.map_view(category, search),
        "bookings": view.visible_bookings,
        "booking_flow": _flow_snapshot(view.flow),
        "notifications": container.notifications.active(),
    }


@tourist_router.get("/bookings")
async def tourist_bookings(request: Request, status: str = "All") -> dict[str, object]:
    """The tourist's bookings filtered by status."""
    view = _container(request).tourist_dashboard
    view.status_filter = status
    await view.load_bookings()
    return {"status": status, "bookings": view.visible_bookings}


@tourist_router.post("/booking/select")
async def select_activity(
    body: SelectActivityRequest, request: Request
) -> dict[str, object]:
    """Open the booking form for an activity."""
    view = _container(request).tourist_dashboard
    view.book(body.location_id, body.activity_id)
    return _flow_snapshot(view.flow)


@tourist_router.post("/booking/form")
async def update_booking_form(
    body: BookingFormRequest, request: Request
) -> dict[str, object]:
    """Edit the booking form."""
    view = _container(request).tourist_dashboard
    view.flow.update_form(full_name=body.full_name, notes=body.notes)
    return _flow_snapshot(view.flow)


@tourist_router.post("/booking/submit")
async def submit_booking(request: Request) -> dict[str, object]:
    """Submit the booking form."""
    container = _container(request)
    view = container.tourist_dashboard
    created = await view.flow.submit()
    return {
        **_outcome(container, created),
        "booking_flow": _flow_snapshot(view.flow),
        "bookings": view.visible_bookings,
    }


@tourist_router.post("/booking/cancel")
async def cancel_booking_form(request: Request) -> dict[str, object]:
    """Dismiss the booking form."""
    view = _container(request).tourist_dashboard
    view.flow.cancel()
    return _flow_snapshot(view.flow)


@operator_router.get("/dashboard")
async def operator_dashboard(request: Request, status: str = "all") -> dict[str, object]:
    """Locations and bookings for the operator."""
    container = _container(request)
    view = container.operator_dashboard
    view.status_filter = status
    await view.refresh()
    return {
        "locations": view.locations,
        "bookings": view.visible_bookings,
        "notifications": container.notifications.active(),
    }


@operator_router.post("/locations/{location_id}/activities")
async def add_activity(
    location_id: int, body: ActivityRequest, request: Request
) -> dict[str, object]:
    """Add an activity under a location."""
    container = _container(request)
    ok = await container.operator_dashboard.add_activity(
        location_id,
        ActivityForm(name=body.name, description=body.description, price=body.price),
    )
    return _outcome(container, ok)


@operator_router.post("/bookings/{booking_id}/status")
async def operator_booking_status(
    booking_id: int, body: StatusRequest, request: Request
) -> dict[str, object]:
    """Approve or reject a booking."""
    container = _container(request)
    ok = await container.operator_dashboard.update_booking(booking_id, body.status)
    return _outcome(container, ok)


@admin_router.get("/dashboard")
async def admin_dashboard(request: Request) -> dict[str, object]:
    """Locations, bookings and summary counts."""
    container = _container(request)
    view = container.admin_dashboard
    await view.refresh()
    return {
        "stats": view.stats(),
        "locations": view.locations,
        "bookings": view.bookings,
        "notifications": container.notifications.active(),
    }


@admin_router.get("/dashboard/users")
async def admin_users(
    request: Request, search: str | None = None, role: str | None = None
) -> dict[str, object]:
    """User accounts filtered by search text and role."""
    view = _container(request).admin_dashboard
    await view.load_users()
    return {"users": view.find_users(search, role)}


@admin_router.delete("/users/{user_id}")
async def delete_user(user_id: int, request: Request) -> dict[str, object]:
    """Delete a user account."""
    container = _container(request)
    ok = await container.admin_dashboard.delete_user(user_id)
    return _outcome(container, ok)


@admin_router.post("/locations")
async def create_location(  # noqa: PLR0913
    request: Request,
    name: str = Form(...),
    category: str = Form(""),
    description: str = Form(""),
    lat: str | None = Form(None),
    lng: str | None = Form(None),
    image: UploadFile | None = File(None),
) -> dict[str, object]:
    """Create a location."""
    container = _container(request)
    form = LocationForm(
        name=name,
        category=category,
        description=description,
        lat=lat,
        lng=lng,
        image=await _read_upload(image),
    )
    ok = await container.admin_dashboard.save_location(form)
    return _outcome(container, ok)


@admin_router.put("/locations/{location_id}")
async def update_location(  # noqa: PLR0913
    location_id: int,
    request: Request,
    name: str = Form(...),
    category: str = Form(""),
    description: str = Form(""),
    image: UploadFile | None = File(None),
) -> dict[str, object]:
    """Update a location."""
    container = _container(request)
    form = LocationForm(
        name=name,
        category=category,
        description=description,
        image=await _read_upload(image),
    )
    ok = await container.admin_dashboard.save_location(form, location_id)
    return _outcome(container, ok)


@admin_router.delete("/locations/{location_id}")
async def delete_location(location_id: int, request: Request) -> dict[str, object]:
    """Delete a location."""
    container = _container(request)
    ok = await container.admin_dashboard.delete_location(location_id)
    return _outcome(container, ok)


@admin_router.post("/bookings/{booking_id}/status")
async def admin_booking_status(
    booking_id: int, body: StatusRequest, request: Request
) -> dict[str, object]:
    """Approve or reject a booking."""
    container = _container(request)
    view = container.admin_dashboard
    if body.status.strip().lower() == "approved":
        ok = await view.approve_booking(booking_id)
    elif body.status.strip().lower() == "rejected":
        ok = await view.reject_booking(booking_id)
    else:
        container.notifications.error(f"Unknown booking status: {body.status}")
        ok = False
    return _outcome(container, ok)


@admin_router.delete("/bookings/{booking_id}")
async def delete_booking(booking_id: int, request: Request) -> dict[str, object]:
    """Delete a booking."""
    container = _container(request)
    ok = await container.admin_dashboard.delete_booking(booking_id)
    return _outcome(container, ok)


async def _read_upload(upload: UploadFile | None) -> ImageUpload | None:
    if upload is None or not upload.filename:
        return None
    return ImageUpload(
        filename=upload.filename,
        content=await upload.read(),
        content_type=upload.content_type or "application/octet-stream",
    )
