"""Session store backed by durable key-value storage."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from zanzibar_tours.domain.models import Role
from zanzibar_tours.domain.sessions import ANONYMOUS, Session

logger = logging.getLogger(__name__)

TOKEN_KEY = "authToken"
ROLE_KEY = "userRole"
NAME_KEY = "userName"
EMAIL_KEY = "userEmail"
PHONE_KEY = "userPhone"
IMAGE_KEY = "userImage"
USER_ID_KEY = "userId"

SESSION_KEYS = (
    TOKEN_KEY,
    ROLE_KEY,
    NAME_KEY,
    EMAIL_KEY,
    PHONE_KEY,
    IMAGE_KEY,
    USER_ID_KEY,
)


class SessionStorage(Protocol):
    """Durable key-value storage that survives restarts."""

    def get_item(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""

    def set_item(self, key: str, value: str) -> None:
        """Store a value under a key."""

    def remove_item(self, key: str) -> None:
        """Remove a key if present."""


class SessionReader(Protocol):
    """Read-only view of the current session."""

    @property
    def current(self) -> Session:
        """Return the current session."""


@dataclass
class SessionStore:
    """Single source of truth for the logged-in identity."""

    storage: SessionStorage
    _session: Session = field(init=False, default=ANONYMOUS)

    def __post_init__(self) -> None:
        self._session = self._hydrate()

    @property
    def current(self) -> Session:
        """Return the current session."""
        return self._session

    def login(  # noqa: PLR0913
        self,
        token: str,
        role: Role,
        full_name: str,
        email: str | None = None,
        phone: str | None = None,
        avatar_url: str | None = None,
        user_id: int | None = None,
    ) -> Session:
        """Overwrite every session field in memory and in storage."""
        self.storage.set_item(TOKEN_KEY, token)
        self.storage.set_item(ROLE_KEY, str(role))
        self.storage.set_item(NAME_KEY, full_name)
        self.storage.set_item(EMAIL_KEY, email or "")
        self.storage.set_item(PHONE_KEY, phone or "")
        self.storage.set_item(IMAGE_KEY, avatar_url or "")
        self.storage.set_item(USER_ID_KEY, "" if user_id is None else str(user_id))
        self._session = Session(
            token=token,
            role=role,
            full_name=full_name,
            email=email,
            phone=phone,
            avatar_url=avatar_url,
            user_id=user_id,
        )
        logger.info("Session started for role %s", role)
        return self._session

    def logout(self) -> None:
        """Clear every session key and reset to anonymous."""
        for key in SESSION_KEYS:
            self.storage.remove_item(key)
        self._session = ANONYMOUS
        logger.info("Session cleared")

    def _hydrate(self) -> Session:
        token = self.storage.get_item(TOKEN_KEY)
        if not token:
            return ANONYMOUS
        return Session(
            token=token,
            role=_parse_role(self.storage.get_item(ROLE_KEY)),
            full_name=self.storage.get_item(NAME_KEY) or None,
            email=self.storage.get_item(EMAIL_KEY) or None,
            phone=self.storage.get_item(PHONE_KEY) or None,
            avatar_url=self.storage.get_item(IMAGE_KEY) or None,
            user_id=_parse_user_id(self.storage.get_item(USER_ID_KEY)),
        )


def _parse_role(raw: str | None) -> Role | None:
    if not raw:
        return None
    try:
        return Role(raw)
    except ValueError:
        return None


def _parse_user_id(raw: str | None) -> int | None:
    if raw and raw.isdigit():
        return int(raw)
    return None
