"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from pathlib import Path

import pytest

from zanzibar_tours.adapters.api_client import ApiError
from zanzibar_tours.config import Settings
from zanzibar_tours.containers import AppContainer
from zanzibar_tours.domain.geo import LatLng
from zanzibar_tours.domain.models import (
    Activity,
    Booking,
    BookingDraft,
    BookingStatus,
    ImageUpload,
    Location,
    Role,
    UserRecord,
)
from zanzibar_tours.services.auth import AuthGateway, AuthService
from zanzibar_tours.services.bookings import BookingRepository, BookingService
from zanzibar_tours.services.catalog import CatalogRepository, CatalogService
from zanzibar_tours.services.dashboards import (
    AdminDashboard,
    HomePage,
    OperatorDashboard,
    TouristDashboard,
)
from zanzibar_tours.services.map_browser import MapBrowser
from zanzibar_tours.services.notifications import NotificationCenter
from zanzibar_tours.services.session_store import SessionStorage, SessionStore
from zanzibar_tours.services.users import UserRepository, UserService


def make_location(  # noqa: PLR0913
    location_id: int = 1,
    name: str = "Stone Town",
    category: str = "Historical",
    description: str = "Old town of Zanzibar City",
    image_url: str | None = "http://localhost:5000/uploads/stone-town.jpg",
    lat: float | None = -6.1622,
    lng: float | None = 39.1921,
) -> Location:
    return Location(
        id=location_id,
        name=name,
        category=category,
        description=description,
        image_url=image_url,
        lat=lat,
        lng=lng,
    )


def make_activity(
    activity_id: int = 1,
    location_id: int = 1,
    name: str = "Walking tour",
    price: float = 25.0,
) -> Activity:
    return Activity(
        id=activity_id,
        location_id=location_id,
        name=name,
        description="Guided walk",
        price=price,
    )


def make_booking(
    booking_id: int = 1,
    user_id: int | None = 7,
    status: BookingStatus = BookingStatus.PENDING,
    full_name: str = "Amina Juma",
) -> Booking:
    return Booking(
        id=booking_id,
        user_id=user_id,
        location_id=1,
        activity_id=1,
        full_name=full_name,
        notes="",
        status=status,
        created_at=None,
    )


@dataclass
class InMemorySessionStorage(SessionStorage):
    """Dict-backed session storage for tests."""

    items: dict[str, str] = field(default_factory=dict)

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


@dataclass
class InMemoryCatalogRepository(CatalogRepository):
    """In-memory catalog repository for tests."""

    locations: list[Location] = field(default_factory=list)
    activities: dict[int, list[Activity]] = field(default_factory=dict)
    created_locations: list[tuple[dict[str, str], ImageUpload | None]] = field(
        default_factory=list
    )
    updated_locations: list[tuple[int, dict[str, str], ImageUpload | None]] = field(
        default_factory=list
    )
    created_activities: list[dict[str, object]] = field(default_factory=list)
    error: str | None = None

    async def list_locations(self) -> list[Location]:
        self._maybe_fail()
        return list(self.locations)

    async def create_location(
        self, fields: dict[str, str], image: ImageUpload | None
    ) -> None:
        self._maybe_fail()
        self.created_locations.append((fields, image))
        self.locations.append(
            make_location(
                location_id=len(self.locations) + 100,
                name=fields["name"],
                category=fields["category"],
                description=fields["description"],
                lat=float(fields["lat"]),
                lng=float(fields["lng"]),
            )
        )

    async def update_location(
        self, location_id: int, fields: dict[str, str], image: ImageUpload | None
    ) -> None:
        self._maybe_fail()
        self.updated_locations.append((location_id, fields, image))

    async def delete_location(self, location_id: int) -> None:
        self._maybe_fail()
        self.locations = [loc for loc in self.locations if loc.id != location_id]

    async def list_activities(self, location_id: int) -> list[Activity]:
        self._maybe_fail()
        return list(self.activities.get(location_id, []))

    async def create_activity(self, payload: dict[str, object]) -> None:
        self._maybe_fail()
        self.created_activities.append(payload)

    def _maybe_fail(self) -> None:
        if self.error:
            raise ApiError(self.error)


@dataclass
class FlakyActivityRepository(InMemoryCatalogRepository):
    """Catalog repository whose activity list fails for one location."""

    failing_location_id: int | None = None

    async def list_activities(self, location_id: int) -> list[Activity]:
        if location_id == self.failing_location_id:
            raise ApiError("boom")
        return await super().list_activities(location_id)


@dataclass
class InMemoryBookingRepository(BookingRepository):
    """In-memory booking repository for tests."""

    bookings: list[Booking] = field(default_factory=list)
    drafts: list[BookingDraft] = field(default_factory=list)
    status_updates: list[tuple[int, BookingStatus]] = field(default_factory=list)
    list_calls: int = 0
    error: str | None = None
    create_error: str | None = None

    async def list_bookings(self) -> list[Booking]:
        self._maybe_fail()
        self.list_calls += 1
        return list(self.bookings)

    async def list_user_bookings(self, user_id: int) -> list[Booking]:
        self._maybe_fail()
        self.list_calls += 1
        return [booking for booking in self.bookings if booking.user_id == user_id]

    async def create_booking(self, draft: BookingDraft) -> None:
        if self.create_error:
            raise ApiError(self.create_error)
        self.drafts.append(draft)
        self.bookings.append(
            Booking(
                id=len(self.bookings) + 1,
                user_id=draft.user_id,
                location_id=draft.location_id,
                activity_id=draft.activity_id,
                full_name=draft.full_name,
                notes=draft.notes,
                status=BookingStatus.PENDING,
                created_at=None,
            )
        )

    async def update_status(self, booking_id: int, status: BookingStatus) -> None:
        self._maybe_fail()
        self.status_updates.append((booking_id, status))
        self.bookings = [
            replace(booking, status=status)
            if booking.id == booking_id
            else booking
            for booking in self.bookings
        ]

    async def delete_booking(self, booking_id: int) -> None:
        self._maybe_fail()
        self.bookings = [b for b in self.bookings if b.id != booking_id]

    def _maybe_fail(self) -> None:
        if self.error:
            raise ApiError(self.error)


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    users: list[UserRecord] = field(default_factory=list)
    error: str | None = None

    async def list_users(self) -> list[UserRecord]:
        if self.error:
            raise ApiError(self.error)
        return list(self.users)

    async def delete_user(self, user_id: int) -> None:
        if self.error:
            raise ApiError(self.error)
        self.users = [user for user in self.users if user.id != user_id]


@dataclass
class FakeAuthGateway(AuthGateway):
    """Fake auth endpoints backed by a dict of accounts."""

    accounts: dict[str, dict[str, object]] = field(default_factory=dict)
    signups: list[tuple[dict[str, object], bool]] = field(default_factory=list)
    logins: list[tuple[str, bool]] = field(default_factory=list)

    def add_account(  # noqa: PLR0913
        self,
        email: str,
        password: str,
        role: str,
        full_name: str = "Test User",
        user_id: int = 7,
        token: str = "token-123",
    ) -> None:
        self.accounts[email] = {
            "password": password,
            "token": token,
            "user": {
                "id": user_id,
                "full_name": full_name,
                "email": email,
                "role": role,
                "phone": "+255700000000",
                "image": None,
            },
        }

    async def login(
        self, email_or_username: str, password: str, admin: bool = False
    ) -> dict[str, object]:
        self.logins.append((email_or_username, admin))
        account = self.accounts.get(email_or_username)
        if account is None or account["password"] != password:
            raise ApiError("Invalid credentials", status_code=401)
        return {"token": account["token"], "user": account["user"]}

    async def signup(self, payload: dict[str, object], admin: bool = False) -> None:
        self.signups.append((payload, admin))
        self.add_account(
            email=str(payload["email"]),
            password=str(payload["password"]),
            role=str(payload["role"]),
            full_name=str(payload["fullName"]),
            user_id=len(self.accounts) + 50,
        )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        api_base_url="http://api.test/api",
        session_file=tmp_path / "session.json",
    )


@pytest.fixture
def session_storage() -> InMemorySessionStorage:
    return InMemorySessionStorage()


@pytest.fixture
def session_store(session_storage: InMemorySessionStorage) -> SessionStore:
    return SessionStore(session_storage)


@pytest.fixture
def notifications() -> NotificationCenter:
    return NotificationCenter()


@pytest.fixture
def catalog_repository() -> InMemoryCatalogRepository:
    return InMemoryCatalogRepository(
        locations=[
            make_location(),
            make_location(
                location_id=2,
                name="Jozani Forest",
                category="Nature",
                description="Home of the red colobus monkey",
                lat=-6.2556,
                lng=39.4186,
            ),
        ],
        activities={
            1: [make_activity()],
            2: [make_activity(activity_id=2, location_id=2, name="Monkey walk")],
        },
    )


@pytest.fixture
def booking_repository() -> InMemoryBookingRepository:
    return InMemoryBookingRepository()


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository(
        users=[
            UserRecord(id=1, full_name="Amina Juma", email="amina@example.com", role=Role.TOURIST),
            UserRecord(id=2, full_name="Omar Said", email="omar@example.com", role=Role.OPERATOR),
            UserRecord(id=3, full_name="Root", email="root@example.com", role=Role.ADMIN),
        ]
    )


@pytest.fixture
def auth_gateway() -> FakeAuthGateway:
    gateway = FakeAuthGateway()
    gateway.add_account("tourist@example.com", "password123", "tourist", user_id=7)
    gateway.add_account("operator@example.com", "password123", "operator", user_id=8)
    gateway.add_account("admin@example.com", "password123", "admin", user_id=9)
    return gateway


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    session_store: SessionStore,
    notifications: NotificationCenter,
    catalog_repository: InMemoryCatalogRepository,
    booking_repository: InMemoryBookingRepository,
    user_repository: InMemoryUserRepository,
    auth_gateway: FakeAuthGateway,
) -> AppContainer:
    catalog_service = CatalogService(catalog_repository)
    booking_service = BookingService(booking_repository)
    user_service = UserService(user_repository)

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        session_store=session_store,
        notifications=notifications,
        auth_service=AuthService(auth_gateway, session_store),
        catalog_service=catalog_service,
        booking_service=booking_service,
        user_service=user_service,
        home_page=HomePage(catalog_service, notifications),
        tourist_dashboard=TouristDashboard(
            session=session_store,
            catalog_service=catalog_service,
            booking_service=booking_service,
            notifier=notifications,
            map_browser=MapBrowser(center=LatLng(-6.1659, 39.2026)),
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
