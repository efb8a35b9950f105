"""Document number uniqueness checks.

There is no "exists" endpoint on the backend, so the check scans the list
endpoint. Numbers are compared case-sensitively: ``inv-001`` and ``INV-001``
are different numbers. When the list cannot be fetched the error propagates;
the checker never guesses an answer.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from .client import ApiClient

LOGGER = logging.getLogger("invoicekit.uniqueness")

NUMBER_FIELDS: Mapping[str, str] = {
    "invoices": "invoice_number",
    "expenses": "expense_number",
    "payments": "payment_number",
}


def _same_id(record_id: Any, exclude_id: Any) -> bool:
    if record_id == exclude_id:
        return True
    # ids may come back as strings from some endpoints
    return str(record_id) == str(exclude_id)


def number_in_use(
    records: Iterable[Mapping[str, Any]],
    candidate: str,
    *,
    number_field: str = "invoice_number",
    exclude_id: Any = None,
) -> bool:
    """Return ``True`` when ``candidate`` already appears in ``records``."""

    for record in records:
        if record.get(number_field) != candidate:
            continue
        if exclude_id is not None and _same_id(record.get("id"), exclude_id):
            continue
        return True
    return False


class UniquenessChecker:
    """Check candidate numbers against the documents stored on the backend."""

    def __init__(
        self,
        client: ApiClient,
        *,
        resource: str = "invoices",
        number_field: str | None = None,
    ) -> None:
        self.client = client
        self.resource = resource
        self.number_field = number_field or NUMBER_FIELDS.get(resource, "number")

    def is_unique(self, candidate: str, exclude_id: Any = None) -> bool:
        """Return ``True`` if no other document uses ``candidate``.

        ``exclude_id`` skips the document being edited so it does not collide
        with itself.
        """

        records = self.client.list_documents(self.resource)
        in_use = number_in_use(
            records,
            candidate,
            number_field=self.number_field,
            exclude_id=exclude_id,
        )
        LOGGER.debug(
            "Checked %s against %d %s: %s",
            candidate,
            len(records),
            self.resource,
            "duplicate" if in_use else "unique",
        )
        return not in_use


__all__ = ["NUMBER_FIELDS", "UniquenessChecker", "number_in_use"]
