"""Debounced persistence of settings edits.

Settings screens save while the user types. Instead of every caller keeping
its own timer, :class:`DebouncedSaver` keeps one timer per key and saves only
the latest payload once the key has been quiet for ``delay`` seconds.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

LOGGER = logging.getLogger("invoicekit.persistence")

DEFAULT_DELAY = 0.5

SaveCallable = Callable[[str, Any], None]


class DebouncedSaver:
    """Coalesce rapid saves per key."""

    def __init__(self, save: SaveCallable, delay: float = DEFAULT_DELAY) -> None:
        self._save = save
        self.delay = delay
        self._lock = threading.Lock()
        self._pending: dict[str, Any] = {}
        self._timers: dict[str, threading.Timer] = {}

    def schedule(self, key: str, payload: Any) -> None:
        """Save ``payload`` under ``key`` after ``delay`` seconds of quiet."""

        with self._lock:
            timer = self._timers.pop(key, None)
            if timer is not None:
                timer.cancel()
            self._pending[key] = payload
            timer = threading.Timer(self.delay, self._fire, args=(key,))
            timer.daemon = True
            self._timers[key] = timer
            timer.start()

    def _take(self, key: str) -> tuple[bool, Any]:
        with self._lock:
            timer = self._timers.pop(key, None)
            if timer is not None:
                timer.cancel()
            if key not in self._pending:
                return False, None
            return True, self._pending.pop(key)

    def _fire(self, key: str) -> None:
        found, payload = self._take(key)
        if not found:
            return
        try:
            self._save(key, payload)
        except Exception:
            # Timer threads have no caller to report to.
            LOGGER.exception("Debounced save of %s failed", key)

    def pending(self) -> list[str]:
        with self._lock:
            return sorted(self._pending)

    def flush(self) -> None:
        """Save every pending payload now.

        All keys are attempted; the first error is re-raised afterwards.
        """

        first_error: Exception | None = None
        for key in self.pending():
            found, payload = self._take(key)
            if not found:
                continue
            try:
                self._save(key, payload)
            except Exception as exc:
                LOGGER.error("Saving %s failed: %s", key, exc)
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error

    def cancel(self) -> None:
        """Drop every pending payload without saving."""

        with self._lock:
            for timer in self._timers.values():
                timer.cancel()
            self._timers.clear()
            self._pending.clear()


__all__ = ["DEFAULT_DELAY", "DebouncedSaver"]
