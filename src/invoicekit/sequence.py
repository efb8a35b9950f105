"""Access to the backend sequence counters.

The client never owns a counter. ``generate`` advances the server side
sequence on every call while ``preview`` only reads it, so previews may be
repeated freely. Failures are reported as :class:`GenerationFailed`; there is
no retry here because a retried ``generate`` could skip a number.
"""

from __future__ import annotations

import logging
from typing import Any

from .client import ApiClient
from .errors import GenerationFailed, InvoiceKitError
from .utils import unwrap_data

LOGGER = logging.getLogger("invoicekit.sequence")

COUNTER_NAMES = ("clients", "invoices", "expenses", "templates", "reports")


class SequenceProvider:
    """Generate or preview document numbers through the backend."""

    def __init__(
        self,
        client: ApiClient,
        *,
        resource: str = "invoices",
        number_field: str = "invoice_number",
    ) -> None:
        self.client = client
        self.resource = resource
        self.number_field = number_field

    def _number_from(self, endpoint: str, method: str) -> str:
        try:
            payload = self.client.call(endpoint, method)
        except InvoiceKitError as exc:
            LOGGER.error("Number request %s %s failed: %s", method, endpoint, exc)
            raise GenerationFailed(f"Failed to obtain document number: {exc}") from exc

        number: Any = unwrap_data(payload, self.number_field)
        if not isinstance(number, str) or not number:
            raise GenerationFailed(f"Response from {endpoint} carries no {self.number_field}")
        return number

    def generate(self) -> str:
        """Reserve and return the next number. Each call advances the series."""

        number = self._number_from(f"/{self.resource}/generate-number", "POST")
        LOGGER.info("Generated %s", number)
        return number

    def preview(self) -> str:
        """Return the next number without reserving it."""

        return self._number_from(f"/{self.resource}/preview-number", "GET")

    def next_counter_id(self, counter_name: str) -> int:
        """Increment a generic entity counter and return its new value."""

        if counter_name not in COUNTER_NAMES:
            raise ValueError(
                f"Invalid counter name. Valid counters: {', '.join(COUNTER_NAMES)}"
            )
        try:
            payload = self.client.call(f"/counters/{counter_name}/next")
        except InvoiceKitError as exc:
            raise GenerationFailed(f"Failed to obtain next id for {counter_name}: {exc}") from exc

        value = unwrap_data(payload, "nextId")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise GenerationFailed(f"Counter {counter_name} returned no id") from None


__all__ = ["COUNTER_NAMES", "SequenceProvider"]
