"""Tests for the portal routes."""

from fastapi.testclient import TestClient

from zanzibar_tours.api.app import create_app
from zanzibar_tours.containers import AppContainer
from zanzibar_tours.domain.models import BookingStatus, Role
from tests.conftest import (
    InMemoryBookingRepository,
    InMemoryCatalogRepository,
    make_booking,
)


def _client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container), follow_redirects=False)


def _login_as(container: AppContainer, role: Role, user_id: int = 7) -> None:
    container.session_store.login(
        token="abc", role=role, full_name="Test User", user_id=user_id
    )


def test_health_and_home(container: AppContainer) -> None:
    client = _client(container)

    assert client.get("/health").json() == {"status": "ok"}
    home = client.get("/").json()
    assert [loc["name"] for loc in home["locations"]] == ["Stone Town", "Jozani Forest"]


def test_anonymous_dashboard_redirects_to_login_and_back(container: AppContainer) -> None:
    client = _client(container)

    response = client.get("/admin/dashboard")

    assert response.status_code == 303
    assert response.headers["location"] == "/login?next=%2Fadmin%2Fdashboard"

    login = client.post(
        "/admin/login",
        json={
            "email_or_username": "admin@example.com",
            "password": "password123",
            "next": "/admin/dashboard",
        },
    )

    assert login.status_code == 200
    assert login.json()["redirect"] == "/admin/dashboard"
    assert login.json()["session"]["role"] == "admin"
    assert client.get("/admin/dashboard").status_code == 200


def test_wrong_role_is_redirected_home(container: AppContainer) -> None:
    _login_as(container, Role.TOURIST)
    client = _client(container)

    response = client.get("/admin/dashboard/users")

    assert response.status_code == 303
    assert response.headers["location"] == "/"


def test_login_ignores_next_path_the_role_cannot_open(container: AppContainer) -> None:
    client = _client(container)

    response = client.post(
        "/login",
        json={
            "email_or_username": "tourist@example.com",
            "password": "password123",
            "next": "/admin/dashboard",
        },
    )

    assert response.json()["redirect"] == "/tourist/dashboard"


def test_failed_login_returns_server_message(container: AppContainer) -> None:
    client = _client(container)

    response = client.post(
        "/login",
        json={"email_or_username": "tourist@example.com", "password": "wrongpass1"},
    )

    assert response.status_code == 400
    assert response.json() == {"message": "Invalid credentials"}
    assert client.get("/session").json()["authenticated"] is False


def test_signup_routes(container: AppContainer) -> None:
    client = _client(container)
    payload = {
        "full_name": "Zuhura Ali",
        "username": "zuhura",
        "email": "zuhura@example.com",
        "password": "password123",
        "confirm_password": "password123",
        "role": "admin",
    }

    rejected = client.post("/signup", json=payload)
    accepted = client.post("/admin/signup", json=payload)

    assert rejected.status_code == 400
    assert accepted.status_code == 200
    assert accepted.json()["redirect"] == "/admin/dashboard"


def test_logout_revokes_dashboard_access(container: AppContainer) -> None:
    _login_as(container, Role.OPERATOR)
    client = _client(container)
    assert client.get("/operator/dashboard").status_code == 200
    container.notifications.info("Welcome back")

    response = client.post("/logout")

    assert response.json() == {"redirect": "/login"}
    assert client.get("/operator/dashboard").status_code == 303
    session = client.get("/session").json()
    assert session["authenticated"] is False
    assert "token" not in session
    assert client.get("/notifications").json() == {"notifications": []}


def test_tourist_booking_flow_over_http(
    container: AppContainer, booking_repository: InMemoryBookingRepository
) -> None:
    _login_as(container, Role.TOURIST)
    client = _client(container)
    dashboard = client.get("/tourist/dashboard", params={"category": "Nature"}).json()
    assert [m["location"]["id"] for m in dashboard["map"]["markers"]] == [2]

    selected = client.post(
        "/tourist/booking/select", json={"location_id": 2, "activity_id": 2}
    ).json()
    assert selected["state"] == "selecting"
    assert selected["selection"]["activity_name"] == "Monkey walk"

    client.post("/tourist/booking/form", json={"full_name": "Amina Juma"})
    submitted = client.post("/tourist/booking/submit").json()

    assert submitted["ok"] is True
    assert submitted["booking_flow"]["state"] == "idle"
    assert [b["full_name"] for b in submitted["bookings"]] == ["Amina Juma"]
    assert booking_repository.drafts[0].user_id == 7


def test_tourist_booking_cancel_and_status_filter(
    container: AppContainer, booking_repository: InMemoryBookingRepository
) -> None:
    booking_repository.bookings.extend(
        [make_booking(1), make_booking(2, status=BookingStatus.APPROVED)]
    )
    _login_as(container, Role.TOURIST)
    client = _client(container)

    client.post("/tourist/booking/select", json={"location_id": 1, "activity_id": 1})
    cancelled = client.post("/tourist/booking/cancel").json()
    filtered = client.get("/tourist/bookings", params={"status": "Approved"}).json()

    assert cancelled["state"] == "idle"
    assert [b["id"] for b in filtered["bookings"]] == [2]


def test_operator_routes(
    container: AppContainer,
    catalog_repository: InMemoryCatalogRepository,
    booking_repository: InMemoryBookingRepository,
) -> None:
    booking_repository.bookings.append(make_booking(4))
    _login_as(container, Role.OPERATOR)
    client = _client(container)

    created = client.post(
        "/operator/locations/1/activities", json={"name": "Spice tour", "price": 15}
    ).json()
    status = client.post("/operator/bookings/4/status", json={"status": "rejected"}).json()
    dashboard = client.get("/operator/dashboard", params={"status": "Rejected"}).json()

    assert created["ok"] is True
    assert catalog_repository.created_activities[0]["name"] == "Spice tour"
    assert status["ok"] is True
    assert [b["id"] for b in dashboard["bookings"]] == [4]


def test_admin_location_form_with_image(
    container: AppContainer, catalog_repository: InMemoryCatalogRepository
) -> None:
    _login_as(container, Role.ADMIN)
    client = _client(container)

    response = client.post(
        "/admin/locations",
        data={"name": "Mnemba", "category": "Coastal", "lat": "-5.82", "lng": "39.38"},
        files={"image": ("mnemba.jpg", b"jpeg-bytes", "image/jpeg")},
    )
    rejected = client.post(
        "/admin/locations",
        data={"name": "Bad", "lat": "-5.82", "lng": "39.38"},
        files={"image": ("notes.txt", b"text", "text/plain")},
    )

    assert response.json()["ok"] is True
    fields, image = catalog_repository.created_locations[0]
    assert fields["name"] == "Mnemba"
    assert image is not None
    assert image.content == b"jpeg-bytes"
    assert rejected.json()["ok"] is False
    assert rejected.json()["notifications"][-1]["message"] == "Only image files are allowed."


def test_admin_booking_and_user_routes(
    container: AppContainer, booking_repository: InMemoryBookingRepository
) -> None:
    booking_repository.bookings.extend([make_booking(1), make_booking(2)])
    _login_as(container, Role.ADMIN)
    client = _client(container)

    approved = client.post("/admin/bookings/1/status", json={"status": "Approved"}).json()
    unknown = client.post("/admin/bookings/1/status", json={"status": "Done"}).json()
    deleted = client.delete("/admin/bookings/2").json()
    dashboard = client.get("/admin/dashboard").json()
    users = client.get("/admin/dashboard/users", params={"role": "admin"}).json()

    assert approved["ok"] is True
    assert unknown["ok"] is False
    assert deleted["ok"] is True
    assert dashboard["stats"]["Approved"] == 1
    assert dashboard["stats"]["bookings"] == 1
    assert [u["id"] for u in users["users"]] == [3]
    assert client.delete("/admin/users/1").json()["ok"] is True


def test_dismiss_notification(container: AppContainer) -> None:
    notification = container.notifications.info("Welcome")
    client = _client(container)

    assert client.delete(f"/notifications/{notification.id}").status_code == 200
    assert client.get("/notifications").json() == {"notifications": []}
    assert client.delete(f"/notifications/{notification.id}").status_code == 404


def test_tourist_dashboard_gate(container: AppContainer) -> None:
    client = _client(container)

    anonymous = client.get("/tourist/dashboard")
    _login_as(container, Role.OPERATOR)
    operator = client.get("/tourist/dashboard")

    assert anonymous.headers["location"] == "/login?next=%2Ftourist%2Fdashboard"
    assert operator.status_code == 303
    assert operator.headers["location"] == "/"
