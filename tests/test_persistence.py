from __future__ import annotations

import threading
from typing import Any

import pytest

from invoicekit.persistence import DEFAULT_DELAY, DebouncedSaver


class Recorder:
    def __init__(self, fail_on: set[str] | None = None):
        self.saved: list[tuple[str, Any]] = []
        self.fail_on = fail_on or set()
        self.done = threading.Event()

    def __call__(self, key: str, payload: Any) -> None:
        if key in self.fail_on:
            raise RuntimeError(f"cannot save {key}")
        self.saved.append((key, payload))
        self.done.set()


def test_default_delay_is_half_a_second():
    assert DebouncedSaver(Recorder()).delay == DEFAULT_DELAY == 0.5


def test_only_latest_payload_is_saved():
    recorder = Recorder()
    saver = DebouncedSaver(recorder, delay=60)

    saver.schedule("company_settings", {"companyName": "A"})
    saver.schedule("company_settings", {"companyName": "AC"})
    saver.schedule("company_settings", {"companyName": "ACME"})
    assert saver.pending() == ["company_settings"]

    saver.flush()
    assert recorder.saved == [("company_settings", {"companyName": "ACME"})]
    assert saver.pending() == []


def test_keys_are_debounced_independently():
    recorder = Recorder()
    saver = DebouncedSaver(recorder, delay=60)
    saver.schedule("tax_settings", 1)
    saver.schedule("email_settings", 2)

    saver.flush()
    assert sorted(recorder.saved) == [("email_settings", 2), ("tax_settings", 1)]


def test_timer_saves_after_quiet_period():
    recorder = Recorder()
    saver = DebouncedSaver(recorder, delay=0.01)
    saver.schedule("theme", "dark")

    assert recorder.done.wait(5)
    assert recorder.saved == [("theme", "dark")]
    assert saver.pending() == []


def test_cancel_drops_pending_payloads():
    recorder = Recorder()
    saver = DebouncedSaver(recorder, delay=60)
    saver.schedule("theme", "dark")
    saver.cancel()
    saver.flush()
    assert recorder.saved == []


def test_flush_saves_everything_then_raises_first_error():
    recorder = Recorder(fail_on={"a"})
    saver = DebouncedSaver(recorder, delay=60)
    saver.schedule("a", 1)
    saver.schedule("b", 2)

    with pytest.raises(RuntimeError, match="cannot save a"):
        saver.flush()
    assert recorder.saved == [("b", 2)]
    assert saver.pending() == []


def test_failed_timer_save_does_not_block_later_saves():
    recorder = Recorder(fail_on={"theme"})
    saver = DebouncedSaver(recorder, delay=0.01)
    saver.schedule("theme", "dark")
    saver.schedule("tax_settings", {"rates": []})

    assert recorder.done.wait(5)
    assert recorder.saved == [("tax_settings", {"rates": []})]
