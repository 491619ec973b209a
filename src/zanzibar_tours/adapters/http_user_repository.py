"""API-backed user repository."""

import logging
from dataclasses import dataclass

from zanzibar_tours.adapters.api_client import ApiClient
from zanzibar_tours.domain.models import Role, UserRecord
from zanzibar_tours.services.users import UserRepository

logger = logging.getLogger(__name__)


@dataclass
class HttpUserRepository(UserRepository):
    """Lists and deletes user accounts through the API."""

    api: ApiClient

    async def list_users(self) -> list[UserRecord]:
        """Return all users."""
        payload = await self.api.get("users")
        if not isinstance(payload, list):
            return []
        users = []
        for row in payload:
            if not isinstance(row, dict):
                continue
            try:
                users.append(_user_from_row(row))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed user row %s", row.get("id"))
        return users

    async def delete_user(self, user_id: int) -> None:
        """Delete a user account."""
        await self.api.delete(f"users/{user_id}")


def _user_from_row(row: dict[str, object]) -> UserRecord:
    full_name = row.get("full_name") or row.get("fullName") or row.get("username")
    try:
        role = Role(str(row.get("role", "")).lower())
    except ValueError:
        role = None
    return UserRecord(
        id=int(row["id"]),
        full_name=str(full_name or ""),
        email=str(row["email"]) if row.get("email") else None,
        role=role,
        phone=str(row["phone"]) if row.get("phone") else None,
        avatar_url=str(row["image"]) if row.get("image") else None,
    )
