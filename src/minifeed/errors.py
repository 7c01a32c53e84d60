"""
minifeed.errors

Application error taxonomy.

Responsibilities:
- Name the caller-facing failure kinds raised by auth and services.
- Carry the HTTP status each kind maps to at the API boundary.

None of these are retried: they describe bad caller input, not transient faults.
"""

from __future__ import annotations

from starlette.status import (
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_422_UNPROCESSABLE_CONTENT,
)


class AppError(Exception):
    status_code: int = 500
    default_detail: str = "Internal error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class AuthenticationError(AppError):
    # Bad credentials or an invalid/expired token.
    status_code = HTTP_401_UNAUTHORIZED
    default_detail = "Not authenticated"


class AuthorizationError(AppError):
    status_code = HTTP_403_FORBIDDEN
    default_detail = "Forbidden"


class NotFoundError(AppError):
    status_code = HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(AppError):
    status_code = HTTP_422_UNPROCESSABLE_CONTENT
    default_detail = "Conflict"


class KeyMaterialError(Exception):
    """
    Raised at startup when signing/verification keys are missing or malformed.
    Not an HTTP error: the process must not start serving.
    """


# --- Module Notes -----------------------------------------------------------
# The API layer registers one exception handler for `AppError` (see `api.app`).
