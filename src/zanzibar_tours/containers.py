"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from zanzibar_tours.adapters.api_client import HttpxApiClient
from zanzibar_tours.adapters.file_session_storage import JsonFileSessionStorage
from zanzibar_tours.adapters.http_auth_gateway import HttpAuthGateway
from zanzibar_tours.adapters.http_booking_repository import HttpBookingRepository
from zanzibar_tours.adapters.http_catalog_repository import HttpCatalogRepository
from zanzibar_tours.adapters.http_user_repository import HttpUserRepository
from zanzibar_tours.config import Settings
from zanzibar_tours.domain.geo import LatLng
from zanzibar_tours.services.auth import AuthService
from zanzibar_tours.services.bookings import BookingService
from zanzibar_tours.services.catalog import CatalogService
from zanzibar_tours.services.dashboards import (
    AdminDashboard,
    HomePage,
    OperatorDashboard,
    TouristDashboard,
)
from zanzibar_tours.services.map_browser import MapBrowser
from zanzibar_tours.services.notifications import NotificationCenter
from zanzibar_tours.services.session_store import SessionStore
from zanzibar_tours.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_store: SessionStore
    notifications: NotificationCenter
    auth_service: AuthService
    catalog_service: CatalogService
    booking_service: BookingService
    user_service: UserService
    home_page: HomePage
    tourist_dashboard: TouristDashboard
    operator_dashboard: OperatorDashboard
    admin_dashboard: AdminDashboard
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    session_store = SessionStore(JsonFileSessionStorage(resolved_settings.session_file))
    api_client = HttpxApiClient.create(
        base_url=resolved_settings.api_base_url,
        token_provider=lambda: session_store.current.token,
        timeout=resolved_settings.api_timeout_seconds,
    )
    notifications = NotificationCenter()
    auth_service = AuthService(HttpAuthGateway(api_client), session_store)
    catalog_service = CatalogService(HttpCatalogRepository(api_client))
    booking_service = BookingService(HttpBookingRepository(api_client))
    user_service = UserService(HttpUserRepository(api_client))
    map_browser = MapBrowser(
        center=LatLng(resolved_settings.map_center_lat, resolved_settings.map_center_lng),
        zoom=resolved_settings.map_zoom,
    )

    async def close_resources() -> None:
        await api_client.close()

    return AppContainer(
        settings=resolved_settings,
        session_store=session_store,
        notifications=notifications,
        auth_service=auth_service,
        catalog_service=catalog_service,
        booking_service=booking_service,
        user_service=user_service,
        home_page=HomePage(catalog_service, notifications),
        tourist_dashboard=TouristDashboard(
            session=session_store,
            catalog_service=catalog_service,
            booking_service=booking_service,
            notifier=notifications,
            map_browser=map_browser,
        ),
        operator_dashboard=OperatorDashboard(
            catalog_service=catalog_service,
            booking_service=booking_service,
            notifier=notifications,
        ),
        admin_dashboard=AdminDashboard(
            catalog_service=catalog_service,
            booking_service=booking_service,
            user_service=user_service,
            notifier=notifications,
        ),
        close_resources=close_resources,
    )
