"""Domain model for the authenticated client session."""

from dataclasses import dataclass

from zanzibar_tours.domain.models import Role


@dataclass(frozen=True)
class Session:
    """Who is logged in and with what role."""

    token: str | None = None
    role: Role | None = None
    full_name: str | None = None
    email: str | None = None
    phone: str | None = None
    avatar_url: str | None = None
    user_id: int | None = None

    @property
    def is_authenticated(self) -> bool:
        """Token presence is the only authentication signal."""
        return bool(self.token)


ANONYMOUS = Session()
