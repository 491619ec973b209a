"""User management for administrators."""

from dataclasses import dataclass
from typing import Protocol

from zanzibar_tours.domain.models import UserRecord


class UserRepository(Protocol):
    """Persistence interface for user accounts."""

    async def list_users(self) -> list[UserRecord]:
        """Return all users."""

    async def delete_user(self, user_id: int) -> None:
        """Delete a user account."""


@dataclass
class UserService:
    """Application service for admin user management."""

    repository: UserRepository

    async def list_users(self) -> list[UserRecord]:
        """Return all users."""
        return await self.repository.list_users()

    async def delete_user(self, user_id: int) -> None:
        """Delete a user account."""
        await self.repository.delete_user(user_id)


def filter_users(
    users: list[UserRecord], search: str | None = None, role: str | None = None
) -> list[UserRecord]:
    """Filter users by a search term on name or email and by role."""
    results = list(users)
    if role and role.lower() != "all":
        results = [user for user in results if user.role and user.role == role.lower()]
    if search:
        needle = search.strip().lower()
        results = [
            user
            for user in results
            if needle in user.full_name.lower() or needle in (user.email or "").lower()
        ]
    return results
