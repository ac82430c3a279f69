"""Custom exception hierarchy for ghcard."""


class GhcardError(Exception):
    """Base exception for all ghcard errors."""


class MissingUsernameError(GhcardError):
    """No username was supplied with the request."""


class FetchError(GhcardError):
    """Failed to fetch upstream data."""


class UserNotFoundError(FetchError):
    """No GitHub account exists for the username."""


class UpstreamError(FetchError):
    """Upstream answered with an unexpected status or could not be reached."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class RenderError(GhcardError):
    """Failed to rasterize a visual tree."""
