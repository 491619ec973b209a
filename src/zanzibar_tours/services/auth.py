"""Login, signup and logout."""

from dataclasses import dataclass
from typing import Protocol, TypeVar

from pydantic import BaseModel, EmailStr, Field, ValidationError, model_validator

from zanzibar_tours.domain.errors import FormValidationError, UnknownRoleError
from zanzibar_tours.domain.models import Role
from zanzibar_tours.domain.sessions import Session
from zanzibar_tours.services.session_store import SessionStore

FormT = TypeVar("FormT", bound=BaseModel)


class AuthGateway(Protocol):
    """Interface for the server's authentication endpoints."""

    async def login(
        self, email_or_username: str, password: str, admin: bool = False
    ) -> dict[str, object]:
        """Exchange credentials for a token and user payload."""

    async def signup(self, payload: dict[str, object], admin: bool = False) -> None:
        """Create an account."""


class LoginForm(BaseModel):
    """Credentials entered on the login page."""

    email_or_username: str = Field(min_length=1)
    password: str = Field(min_length=8)


class SignupForm(BaseModel):
    """Fields entered on the signup page."""

    full_name: str = Field(min_length=2)
    username: str = Field(min_length=3)
    email: EmailStr
    password: str = Field(min_length=8)
    confirm_password: str
    role: Role = Role.TOURIST

    @model_validator(mode="after")
    def passwords_match(self) -> "SignupForm":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


@dataclass
class AuthService:
    """Authenticates against the server and records the session."""

    gateway: AuthGateway
    session_store: SessionStore

    async def login(
        self, email_or_username: str, password: str, admin: bool = False
    ) -> Session:
        """Log in and start a session from the server's response."""
        form = _validate(
            LoginForm, email_or_username=email_or_username, password=password
        )
        result = await self.gateway.login(
            form.email_or_username, form.password, admin=admin
        )
        return self._start_session(result)

    async def signup(self, is_admin_signup: bool = False, **fields: object) -> Session:
        """Create an account and log straight into it."""
        form = _validate(SignupForm, **fields)
        if form.role is Role.ADMIN and not is_admin_signup:
            raise FormValidationError("Admin accounts cannot be created here")
        admin = form.role is Role.ADMIN
        await self.gateway.signup(
            {
                "fullName": form.full_name,
                "username": form.username,
                "email": str(form.email),
                "password": form.password,
                "role": form.role.value,
            },
            admin=admin,
        )
        result = await self.gateway.login(str(form.email), form.password, admin=admin)
        return self._start_session(result)

    def logout(self) -> None:
        """End the current session."""
        self.session_store.logout()

    def _start_session(self, result: dict[str, object]) -> Session:
        user = result.get("user")
        if not isinstance(user, dict):
            user = {}
        try:
            role = Role(str(user.get("role", "")).lower())
        except ValueError as exc:
            raise UnknownRoleError(user.get("role")) from exc
        return self.session_store.login(
            token=str(result.get("token") or ""),
            role=role,
            full_name=_first_text(user, "full_name", "fullName", "username") or "",
            email=_first_text(user, "email"),
            phone=_first_text(user, "phone"),
            avatar_url=_first_text(user, "image", "avatarUrl"),
            user_id=_parse_id(user.get("id")),
        )


def _validate(model: type[FormT], **fields: object) -> FormT:
    try:
        return model(**fields)
    except ValidationError as exc:
        first = exc.errors()[0]
        raise FormValidationError(_readable(first)) from exc


def _readable(error: dict[str, object]) -> str:
    location = error.get("loc") or ()
    label = str(location[0]).replace("_", " ") if location else "form"
    message = str(error.get("msg", "is invalid")).removeprefix("Value error, ")
    return f"{label}: {message}" if location else message


def _parse_id(value: object) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def _first_text(payload: dict[str, object], *keys: str) -> str | None:
    for key in keys:
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    return None
