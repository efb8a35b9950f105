"""Exceptions raised by the invoicekit client."""

from __future__ import annotations


class InvoiceKitError(Exception):
    """Base class for every error raised by the package."""


class ApiError(InvoiceKitError):
    """The backend answered with an HTTP error or ``success: false``."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class ConnectionFailed(ApiError):
    """The backend could not be reached."""


class GenerationFailed(InvoiceKitError):
    """A document number could not be generated or previewed."""


class SettingsValidationError(InvoiceKitError):
    """A stored settings payload does not match its schema."""

    def __init__(self, category: str, message: str) -> None:
        super().__init__(f"{category}: {message}")
        self.category = category


__all__ = [
    "ApiError",
    "ConnectionFailed",
    "GenerationFailed",
    "InvoiceKitError",
    "SettingsValidationError",
]
