"""API-backed authentication gateway."""

from dataclasses import dataclass

from zanzibar_tours.adapters.api_client import ApiClient, ApiError
from zanzibar_tours.services.auth import AuthGateway


@dataclass
class HttpAuthGateway(AuthGateway):
    """Calls the /auth endpoints of the REST API."""

    api: ApiClient

    async def login(
        self, email_or_username: str, password: str, admin: bool = False
    ) -> dict[str, object]:
        """Exchange credentials for a token and user payload."""
        path = "auth/admin/login" if admin else "auth/login"
        payload = await self.api.post(
            path, json={"emailOrUsername": email_or_username, "password": password}
        )
        if not isinstance(payload, dict):
            raise ApiError("Login failed")
        return payload

    async def signup(self, payload: dict[str, object], admin: bool = False) -> None:
        """Create an account."""
        path = "auth/admin/signup" if admin else "auth/signup"
        await self.api.post(path, json=payload)
