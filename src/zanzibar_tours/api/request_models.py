"""Request bodies accepted by the portal."""

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """Credentials posted to a login route."""

    email_or_username: str
    password: str
    next: str | None = None


class SignupRequest(BaseModel):
    """Account details posted to a signup route."""

    full_name: str
    username: str
    email: str
    password: str
    confirm_password: str
    role: str = "tourist"


class SelectActivityRequest(BaseModel):
    """Activity chosen for booking."""

    location_id: int
    activity_id: int


class BookingFormRequest(BaseModel):
    """Partial update of the booking form."""

    full_name: str | None = None
    notes: str | None = None


class ActivityRequest(BaseModel):
    """New activity details."""

    name: str
    description: str = ""
    price: str | float | None = None


class StatusRequest(BaseModel):
    """New booking status."""

    status: str
