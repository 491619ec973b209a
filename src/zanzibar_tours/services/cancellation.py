"""Cancellation tokens for in-flight fetches."""

from dataclasses import dataclass


@dataclass
class CancellationToken:
    """Flag checked before a fetch result is applied to view state."""

    cancelled: bool = False

    def cancel(self) -> None:
        """Mark the owning fetch as stale."""
        self.cancelled = True

    @property
    def active(self) -> bool:
        """Return True while results may still be applied."""
        return not self.cancelled


@dataclass
class RefreshGuard:
    """Hands out a fresh token per fetch, cancelling the previous one."""

    _token: CancellationToken | None = None

    def begin(self) -> CancellationToken:
        """Start a new fetch, making any earlier one stale."""
        self.cancel()
        self._token = CancellationToken()
        return self._token

    def cancel(self) -> None:
        """Make the current fetch stale, e.g. when the view unmounts."""
        if self._token is not None:
            self._token.cancel()
