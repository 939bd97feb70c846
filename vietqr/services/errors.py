"""Shared service error definitions."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ServiceError(Exception):
    code: str
    message: str
    status_code: int = 400

    def __str__(self) -> str:  # noqa: D401 override
        return f"{self.code}: {self.message}"


class MissingRequiredField(ServiceError):
    """A mandatory option (bank BIN, account number) was not supplied."""

    def __init__(self, field: str, message: str | None = None):
        ServiceError.__init__(self, code="ERR_MISSING_FIELD", message=message or f"{field} is required", status_code=422)
        self.field = field


class ValueTooLong(ServiceError):
    """A TLV value cannot be expressed with a two digit length."""

    def __init__(self, tag: str, length: int):
        ServiceError.__init__(
            self,
            code="ERR_VALUE_TOO_LONG",
            message=f"Value for tag {tag} is {length} characters, maximum is 99",
            status_code=422,
        )
        self.tag = tag
        self.length = length


class InvalidFieldValue(ServiceError):
    def __init__(self, field: str, message: str):
        ServiceError.__init__(self, code="ERR_INVALID_FIELD", message=message, status_code=422)
        self.field = field


class InvalidPayload(ServiceError):
    def __init__(self, message: str | None = None):
        ServiceError.__init__(self, code="ERR_BAD_PAYLOAD", message=message or "Invalid VietQR payload", status_code=400)


class RenderingFailure(ServiceError):
    def __init__(self, message: str | None = None):
        ServiceError.__init__(self, code="ERR_RENDER_FAILED", message=message or "QR rendering failed", status_code=500)
