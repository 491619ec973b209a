"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from zanzibar_tours.api.dashboards import admin_router, operator_router, tourist_router
from zanzibar_tours.api.request_models import LoginRequest, SignupRequest
from zanzibar_tours.app_logging import configure_logging
from zanzibar_tours.containers import AppContainer
from zanzibar_tours.domain.errors import DomainError
from zanzibar_tours.domain.sessions import Session
from zanzibar_tours.services.auth_gate import (
    LOGIN_PATH,
    check_access,
    dashboard_path,
    find_route,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(tourist_router)
    app.include_router(operator_router)
    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/")
    async def home(request: Request) -> dict[str, object]:
        """Public landing page with every location."""
        state_container: AppContainer = request.app.state.container
        await state_container.home_page.refresh()
        return {
            "locations": state_container.home_page.locations,
            "notifications": state_container.notifications.active(),
        }

    @app.get(LOGIN_PATH)
    async def login_page(next: str | None = None) -> dict[str, object]:
        """Login page; remembers where the user was heading."""
        return {"next": next}

    @app.post(LOGIN_PATH)
    async def login(body: LoginRequest, request: Request) -> JSONResponse:
        """Log in as a tourist or operator."""
        return await _login(request.app.state.container, body, admin=False)

    @app.post("/admin/login")
    async def admin_login(body: LoginRequest, request: Request) -> JSONResponse:
        """Log in through the admin endpoint."""
        return await _login(request.app.state.container, body, admin=True)

    @app.post("/signup")
    async def signup(body: SignupRequest, request: Request) -> JSONResponse:
        """Create a tourist or operator account and log in."""
        return await _signup(request.app.state.container, body, is_admin_signup=False)

    @app.post("/admin/signup")
    async def admin_signup(body: SignupRequest, request: Request) -> JSONResponse:
        """Create any account, including admins, and log in."""
        return await _signup(request.app.state.container, body, is_admin_signup=True)

    @app.post("/logout")
    async def logout(request: Request) -> dict[str, str]:
        """End the session and reset the per-user dashboard state."""
        state_container: AppContainer = request.app.state.container
        state_container.auth_service.logout()
        state_container.tourist_dashboard.unmount()
        state_container.operator_dashboard.unmount()
        state_container.admin_dashboard.unmount()
        state_container.notifications.clear()
        logger.info("Logged out")
        return {"redirect": LOGIN_PATH}

    @app.get("/session")
    async def session(request: Request) -> dict[str, object]:
        """Return the current identity without the token."""
        state_container: AppContainer = request.app.state.container
        return _serialize_session(state_container.session_store.current)

    @app.get("/notifications")
    async def notifications(request: Request) -> dict[str, object]:
        """Return notifications that have not been dismissed."""
        state_container: AppContainer = request.app.state.container
        return {"notifications": state_container.notifications.active()}

    @app.delete("/notifications/{notification_id}")
    async def dismiss_notification(
        notification_id: int, request: Request
    ) -> dict[str, str]:
        """Dismiss a notification."""
        state_container: AppContainer = request.app.state.container
        if not state_container.notifications.dismiss(notification_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"status": "ok"}

    return app


async def _login(
    container: AppContainer, body: LoginRequest, admin: bool
) -> JSONResponse:
    try:
        session = await container.auth_service.login(
            body.email_or_username, body.password, admin=admin
        )
    except DomainError as exc:
        return _error_response(exc)
    return JSONResponse(
        {
            "redirect": _landing_path(session, body.next),
            "session": _serialize_session(session),
        }
    )


async def _signup(
    container: AppContainer, body: SignupRequest, is_admin_signup: bool
) -> JSONResponse:
    try:
        session = await container.auth_service.signup(
            is_admin_signup=is_admin_signup, **body.model_dump()
        )
    except DomainError as exc:
        return _error_response(exc)
    return JSONResponse(
        {
            "redirect": _landing_path(session, None),
            "session": _serialize_session(session),
        }
    )


def _landing_path(session: Session, next_path: str | None) -> str:
    """Send the user back where they were heading if the role allows it."""
    if next_path:
        route = find_route(next_path)
        if route and check_access(session, route.allowed_roles).allowed:
            return route.path
    if session.role is None:
        return "/"
    return dashboard_path(session.role)


def _error_response(exc: DomainError) -> JSONResponse:
    return JSONResponse(
        {"message": exc.message}, status_code=status.HTTP_400_BAD_REQUEST
    )


def _serialize_session(session: Session) -> dict[str, object]:
    return {
        "authenticated": session.is_authenticated,
        "role": session.role.value if session.role else None,
        "full_name": session.full_name,
        "email": session.email,
        "phone": session.phone,
        "avatar_url": session.avatar_url,
        "user_id": session.user_id,
    }
