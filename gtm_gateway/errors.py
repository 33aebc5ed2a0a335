"""Error taxonomy for the GTM gateway and platform-error classification.

Every failure that reaches the HTTP boundary is a ``GatewayError`` carrying
its HTTP status, a stable ``code`` and optional ``details`` merged into the
JSON envelope.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional


class GatewayError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    message: str = "Internal server error during GTM consultation"

    def __init__(
        self,
        error: str = "",
        *,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(error or self.code)
        self.error = error or self.code
        if message is not None:
            self.message = message
        self.details: dict[str, Any] = dict(details or {})

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body fields (timestamp is added by the boundary)."""
        return {
            "success": False,
            "message": self.message,
            "error": self.error,
            "code": self.code,
            **self.details,
        }


class ValidationError(GatewayError):
    """One or more mandatory consultation fields are missing or malformed."""

    status_code = 400
    code = "VALIDATION_ERROR"
    message = "Please provide all required fields for GTM consultation"

    def __init__(
        self,
        missing_fields: Iterable[str] = (),
        invalid_fields: Iterable[str] = (),
        *,
        error: str = "",
        message: Optional[str] = None,
    ) -> None:
        self.missing_fields = list(missing_fields)
        self.invalid_fields = list(invalid_fields)
        details: dict[str, Any] = {"missingFields": self.missing_fields}
        if self.invalid_fields:
            details["invalidFields"] = self.invalid_fields
        if not error:
            error = "Missing required fields" if self.missing_fields else "Invalid field values"
        super().__init__(error, message=message, details=details)


class RemoteAuthError(GatewayError):
    status_code = 401
    code = "UNAUTHORIZED"
    message = "Unauthorized access to Apify. Check API token."


class RemoteNotFoundError(GatewayError):
    status_code = 404
    code = "ACTOR_NOT_FOUND"
    message = "GTM Alpha Consultant actor not found"


class RemoteUnavailableError(GatewayError):
    status_code = 503
    code = "UNDER_MAINTENANCE"
    message = "GTM Alpha Consultant is currently under maintenance. Please retry later."

    def __init__(self, **kwargs: Any) -> None:
        # The raw platform text is not echoed back; callers key on the code.
        super().__init__("UNDER_MAINTENANCE", **kwargs)


def failure_code(status: str) -> str:
    """Error code for a run that ended in FAILED, ABORTED or TIMED-OUT."""
    return "JOB_" + status.upper().replace("-", "_")


class NoResultError(GatewayError):
    """The run succeeded but its dataset holds no records."""

    status_code = 500
    code = "NO_RESULT"
    message = "GTM consultation completed but produced no results"


class InternalError(GatewayError):
    status_code = 500
    code = "INTERNAL_ERROR"


# ── Platform transport errors ────────────────────────────────────────────────


class PlatformError(Exception):
    """Raised by a platform client when a call to the platform fails.

    ``error_type`` and ``status_code`` are filled in when the platform
    answered with a structured error body; transport failures leave
    ``status_code`` as ``None``.
    """

    def __init__(
        self,
        message: str,
        *,
        error_type: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.status_code = status_code


class PlatformTimeoutError(PlatformError):
    """The run did not reach a terminal state before the wait deadline."""

    def __init__(self, message: str, *, run: Any = None) -> None:
        super().__init__(message, error_type="timed-out")
        self.run = run


_MAINTENANCE_TYPES = {"under-maintenance"}
_AUTH_TYPES = {"token-not-provided", "user-or-token-not-found", "unauthorized"}
_NOT_FOUND_TYPES = {"record-not-found", "actor-not-found"}

_MAINTENANCE_PATTERNS = ("UNDER_MAINTENANCE",)
_AUTH_PATTERNS = ("Unauthorized",)
_NOT_FOUND_PATTERNS = ("Actor not found", "Actor was not found")


def classify_platform_error(exc: PlatformError, *, actor_lookup: bool = True) -> GatewayError:
    """Map a platform failure onto the gateway error taxonomy.

    Maintenance is checked first so a message mentioning ``UNDER_MAINTENANCE``
    is always reported as 503, whatever else it says. Anything unmatched is
    an ``InternalError``.

    ``actor_lookup`` is False for calls made after the run was started
    (dataset and record reads). A missing storage then means a broken run,
    not a missing actor, so it is reported as an ``InternalError``.
    """
    message = exc.message or ""
    error_type = (exc.error_type or "").lower()

    if (
        any(p in message for p in _MAINTENANCE_PATTERNS)
        or error_type in _MAINTENANCE_TYPES
        or exc.status_code == 503
    ):
        return RemoteUnavailableError()

    if (
        any(p in message for p in _AUTH_PATTERNS)
        or error_type in _AUTH_TYPES
        or exc.status_code == 401
    ):
        return RemoteAuthError(message)

    if actor_lookup and (
        any(p in message for p in _NOT_FOUND_PATTERNS) or error_type in _NOT_FOUND_TYPES
    ):
        return RemoteNotFoundError(message)

    return InternalError(message)
