"""HTTP client for the tourism REST API."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

import httpx

from zanzibar_tours.domain.errors import DomainError, ErrorCode

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred"

FileField = tuple[str, bytes, str]


class ApiError(DomainError):
    """Normalized failure of an API call."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(code=ErrorCode.API_ERROR, message=message)
        self.status_code = status_code


class ApiClient(Protocol):
    """Interface for verb-scoped calls against the API base URL."""

    async def get(self, path: str, params: dict[str, object] | None = None) -> object:
        """Issue a GET request and return the decoded body."""

    async def post(
        self,
        path: str,
        json: object | None = None,
        data: dict[str, str] | None = None,
        files: dict[str, FileField] | None = None,
    ) -> object:
        """Issue a POST request with a JSON or multipart body."""

    async def put(
        self,
        path: str,
        json: object | None = None,
        data: dict[str, str] | None = None,
        files: dict[str, FileField] | None = None,
    ) -> object:
        """Issue a PUT request with a JSON or multipart body."""

    async def delete(self, path: str) -> object:
        """Issue a DELETE request."""


@dataclass
class HttpxApiClient(ApiClient):
    """HTTPX-backed API client with bearer token injection."""

    http_client: httpx.AsyncClient
    timeout: float | None = None

    @classmethod
    def create(
        cls,
        base_url: str,
        token_provider: Callable[[], str | None],
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "HttpxApiClient":
        """Create an API client whose requests carry the current token."""

        async def attach_token(request: httpx.Request) -> None:
            token = token_provider()
            if token:
                request.headers["Authorization"] = f"Bearer {token}"

        http_client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/",
            event_hooks={"request": [attach_token]},
            transport=transport,
        )
        return cls(http_client=http_client, timeout=timeout)

    async def get(self, path: str, params: dict[str, object] | None = None) -> object:
        """Issue a GET request."""
        return await self._request("GET", path, params=params)

    async def post(
        self,
        path: str,
        json: object | None = None,
        data: dict[str, str] | None = None,
        files: dict[str, FileField] | None = None,
    ) -> object:
        """Issue a POST request."""
        return await self._request("POST", path, **_body(json, data, files))

    async def put(
        self,
        path: str,
        json: object | None = None,
        data: dict[str, str] | None = None,
        files: dict[str, FileField] | None = None,
    ) -> object:
        """Issue a PUT request."""
        return await self._request("PUT", path, **_body(json, data, files))

    async def delete(self, path: str) -> object:
        """Issue a DELETE request."""
        return await self._request("DELETE", path)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _request(self, method: str, path: str, **kwargs: object) -> object:
        try:
            response = await self.http_client.request(
                method, path.lstrip("/"), timeout=self.timeout, **kwargs
            )
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ApiError(str(exc) or UNKNOWN_ERROR_MESSAGE) from exc
        if not response.is_success:
            message = _error_message(response)
            logger.warning(
                "%s %s returned %s: %s", method, path, response.status_code, message
            )
            raise ApiError(message, status_code=response.status_code)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None


def _body(
    json: object | None,
    data: dict[str, str] | None,
    files: dict[str, FileField] | None,
) -> dict[str, object]:
    if files or data is not None:
        return {"data": data or {}, "files": files}
    return {"json": json}


def _error_message(response: httpx.Response) -> str:
    """Pull the server-supplied message out of an error response."""
    try:
        payload = response.json()
    except ValueError:
        return UNKNOWN_ERROR_MESSAGE
    if isinstance(payload, dict):
        for key in ("message", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    return UNKNOWN_ERROR_MESSAGE
