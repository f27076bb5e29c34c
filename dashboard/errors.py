"""Exception hierarchy for the dashboard data service.

Fetch errors carry a human-readable ``str()`` that the provider stores as its
last error message; consumers display it as-is.
"""

from __future__ import annotations


class DashboardError(Exception):
    """Base class for all dashboard errors."""


class FetchError(DashboardError):
    """A webhook call for *target* failed."""

    def __init__(self, target: str, message: str):
        super().__init__(message)
        self.target = target


class HttpError(FetchError):
    """The webhook answered with a non-2xx status."""

    def __init__(self, target: str, status: int):
        super().__init__(target, f"Error {status}: failed to load {target} data")
        self.status = status


class NetworkError(FetchError):
    """No response was obtained (DNS, connection, transport timeout)."""

    def __init__(self, target: str, detail: str = ""):
        super().__init__(
            target,
            f"Connection failed while loading {target} data. "
            "Check your connection and try again.",
        )
        self.detail = detail


class PayloadError(FetchError):
    """The webhook answered 2xx but the body is not JSON."""

    def __init__(self, target: str):
        super().__init__(target, f"Invalid response while loading {target} data")


class CacheReadError(DashboardError):
    """A persisted cache record could not be decoded."""


class AuthError(DashboardError):
    """Base class for login failures."""


class MissingCredentialsError(AuthError):
    def __init__(self):
        super().__init__("Please fill in all fields")


class InvalidCredentialsError(AuthError):
    def __init__(self):
        super().__init__("Invalid credentials. Please try again.")


class AuthConnectionError(AuthError):
    def __init__(self):
        super().__init__("Connection error. Check your internet and try again.")
