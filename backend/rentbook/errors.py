# backend/rentbook/errors.py
from __future__ import annotations

from typing import Any, Optional


class RentbookError(Exception):
    """Base error with an HTTP status; converted to JSON by the handlers in main.py."""

    status_code = 500

    def __init__(self, message: str, *, payload: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.payload = payload or {}

    def to_body(self) -> dict[str, Any]:
        return {"error": self.message, **self.payload}


class Unauthenticated(RentbookError):
    status_code = 401

    def __init__(self, message: str = "Nicht authentifiziert"):
        super().__init__(message)


class NotFoundOrForbidden(RentbookError):
    # missing and foreign rows are reported identically
    status_code = 404


class ValidationError(RentbookError):
    status_code = 400


class UniquenessViolation(RentbookError):
    status_code = 400


class Conflict(RentbookError):
    status_code = 409

    def to_body(self) -> dict[str, Any]:
        return {"warning": True, "message": self.message, **self.payload}
