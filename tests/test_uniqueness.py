from __future__ import annotations

import pytest

from invoicekit.errors import ApiError, ConnectionFailed
from invoicekit.uniqueness import UniquenessChecker, number_in_use

from conftest import DummyResponse, ok

INVOICES = [
    {"id": 1, "invoice_number": "INV-2026-0001"},
    {"id": 2, "invoice_number": "INV-2026-0002"},
]


def test_unique_on_empty_list(client, session):
    session.routes[("GET", "/invoices")] = ok([])
    assert UniquenessChecker(client).is_unique("INV-2026-0001")


def test_duplicate_detected(client, session):
    session.routes[("GET", "/invoices")] = ok(INVOICES)
    checker = UniquenessChecker(client)
    assert not checker.is_unique("INV-2026-0001")
    assert checker.is_unique("INV-2026-0003")


def test_record_does_not_collide_with_itself(client, session):
    session.routes[("GET", "/invoices")] = ok(INVOICES)
    checker = UniquenessChecker(client)
    assert checker.is_unique("INV-2026-0001", exclude_id=1)
    assert checker.is_unique("INV-2026-0001", exclude_id="1")
    assert not checker.is_unique("INV-2026-0001", exclude_id=2)


def test_comparison_is_case_sensitive(client, session):
    session.routes[("GET", "/invoices")] = ok(INVOICES)
    assert UniquenessChecker(client).is_unique("inv-2026-0001")


def test_fetch_failure_propagates(client, session):
    session.routes[("GET", "/invoices")] = DummyResponse(500, {}, reason="Server Error")
    with pytest.raises(ApiError):
        UniquenessChecker(client).is_unique("INV-2026-0001")


def test_network_failure_propagates(client, session, connection_error):
    session.routes[("GET", "/invoices")] = connection_error
    with pytest.raises(ConnectionFailed):
        UniquenessChecker(client).is_unique("INV-2026-0001")


def test_expenses_use_expense_number(client, session):
    session.routes[("GET", "/expenses")] = ok({"expenses": [{"id": 9, "expense_number": "EXP-0001"}]})
    checker = UniquenessChecker(client, resource="expenses")
    assert checker.number_field == "expense_number"
    assert not checker.is_unique("EXP-0001")


def test_number_in_use_without_exclusion():
    assert number_in_use(INVOICES, "INV-2026-0002")
    assert not number_in_use(INVOICES, "INV-2026-0002", exclude_id=2)
    assert not number_in_use([], "INV-2026-0002")
