"""HTTP client for the invoicing backend.

The client is created explicitly, connected with :meth:`ApiClient.connect`
and handed to whoever needs it; nothing happens at import time. All calls
go through :meth:`ApiClient.call`, which normalises the ``{success, data}``
envelope used by every endpoint of the backend.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping
from urllib.parse import quote

import requests
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .cache import SettingsCache
from .config import ClientConfig
from .errors import ApiError, ConnectionFailed
from .utils import unwrap_data

LOGGER = logging.getLogger("invoicekit.client")

# Keys served by a dedicated section route instead of ``/settings/<key>``.
SECTION_ROUTES: Mapping[str, str] = {
    "company_settings": "company",
    "notification_settings": "notification",
    "currency_format_settings": "currency",
}
CATEGORY_ROUTES: Mapping[str, str] = {
    "appearance": "/settings/appearance",
    "general": "/settings/general",
}

_DOWNLOAD_CHUNK = 65536


def _extract_list(data: Any, resource: str, depth: int = 0) -> list[dict[str, Any]] | None:
    """Find the record list inside ``data``.

    The backend returns lists either directly or wrapped one or two levels
    deep under ``data`` or the resource name (``data.data.invoices``).
    """

    if isinstance(data, list):
        return [item for item in data if isinstance(item, Mapping)]
    if not isinstance(data, Mapping) or depth > 1:
        return None
    for key in ("data", resource, resource.replace("-", "_")):
        if key in data:
            found = _extract_list(data[key], resource, depth + 1)
            if found is not None:
                return found
    return None


class ApiClient:
    """Typed pass-through client for the backend REST API."""

    connect_attempts = 3
    connect_backoff = 2.0

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        session: requests.Session | None = None,
        cache: SettingsCache | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        self._session = session
        self.cache = cache if cache is not None else SettingsCache(self.config.settings_ttl_ms)
        self._ready = False

    # -- lifecycle ---------------------------------------------------------

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def is_ready(self) -> bool:
        return self._ready

    def connect(self) -> None:
        """Check that the backend answers ``/health``.

        Retries with exponential backoff before giving up with
        :class:`ConnectionFailed`.
        """

        if self._ready:
            return

        @retry(
            reraise=True,
            stop=stop_after_attempt(self.connect_attempts),
            wait=wait_exponential(multiplier=self.connect_backoff, min=0, max=30),
            retry=retry_if_exception_type(ConnectionFailed),
            before_sleep=before_sleep_log(LOGGER, logging.WARNING),
        )
        def _probe() -> None:
            try:
                response = self.session.request(
                    "GET",
                    self.config.url("/health"),
                    headers=self._headers(),
                    timeout=self.config.timeout,
                )
            except requests.RequestException as exc:
                raise ConnectionFailed(f"Network connection failed: {exc}") from exc
            if response.status_code == 429:
                raise ConnectionFailed("Rate limited - too many requests", status=429)
            if response.status_code >= 400:
                raise ConnectionFailed(
                    f"Backend server responded with status: {response.status_code}",
                    status=response.status_code,
                )

        try:
            _probe()
        except ConnectionFailed as exc:
            LOGGER.error("Backend at %s not available: %s", self.config.api_base, exc)
            raise ConnectionFailed("Backend server not available", status=exc.status) from exc

        self._ready = True
        LOGGER.info("Connected to %s", self.config.api_base)

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
        self._ready = False

    def __enter__(self) -> "ApiClient":
        self.connect()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- transport ---------------------------------------------------------

    def _headers(self, content_type: str | None = "application/json") -> dict[str, str]:
        headers: dict[str, str] = {}
        if content_type:
            headers["Content-Type"] = content_type
        if self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"
        return headers

    def _send(self, method: str, endpoint: str, **kwargs: Any) -> requests.Response:
        kwargs.setdefault("headers", self._headers())
        kwargs.setdefault("timeout", self.config.timeout)
        try:
            return self.session.request(method, self.config.url(endpoint), **kwargs)
        except requests.RequestException as exc:
            raise ConnectionFailed(f"Network connection failed: {exc}") from exc

    def call(self, endpoint: str, method: str = "GET", body: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Perform a JSON API call and return the decoded envelope.

        For ``GET`` requests ``body`` is sent as query parameters, skipping
        ``None`` values.
        """

        kwargs: dict[str, Any] = {}
        if method == "GET":
            if body:
                kwargs["params"] = {key: str(value) for key, value in body.items() if value is not None}
        elif body is not None:
            kwargs["json"] = dict(body)

        LOGGER.debug("%s %s", method, endpoint)
        response = self._send(method, endpoint, **kwargs)
        if response.status_code >= 400:
            reason = getattr(response, "reason", "") or ""
            raise ApiError(f"HTTP {response.status_code}: {reason}".strip(), status=response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            raise ApiError("Invalid JSON in API response", status=response.status_code) from exc

        if not isinstance(payload, Mapping):
            raise ApiError("Unexpected API response", status=response.status_code)
        if not payload.get("success"):
            raise ApiError(str(payload.get("error") or "API call failed"), status=response.status_code)
        return dict(payload)

    # -- settings ----------------------------------------------------------

    def get_setting(self, key: str) -> Any:
        """Read a single setting value, served from the cache when fresh."""

        cached = self.cache.get(key)
        if cached is not None:
            return cached

        section = SECTION_ROUTES.get(key)
        if section:
            payload = self.call(f"/settings/{section}")
            value = None
            if key == "notification_settings":
                value = unwrap_data(payload, "settings", "notification_settings")
            if value is None:
                value = unwrap_data(payload, "value")
        else:
            payload = self.call(f"/settings/{quote(key, safe='')}")
            value = unwrap_data(payload, "value")

        self.cache.set(key, value)
        return value

    def set_setting(self, key: str, value: Any, category: str = "general") -> None:
        self.call("/settings", "POST", {"key": key, "value": value, "category": category})
        self.cache.invalidate(key)
        LOGGER.debug("Setting %s saved (%s)", key, category)

    def get_all_settings(self, category: str | None = None) -> dict[str, Any]:
        """Return every setting of ``category`` (or all of them) as a mapping."""

        route = CATEGORY_ROUTES.get(category or "")
        if route:
            payload = self.call(route)
        else:
            payload = self.call("/settings", "GET", {"category": category} if category else None)
        settings = unwrap_data(payload, "settings")
        if settings is None:
            return {}
        if not isinstance(settings, Mapping):
            raise ApiError("Unexpected settings payload")
        return dict(settings)

    def set_multiple_settings(self, settings: Mapping[str, Mapping[str, Any]]) -> None:
        """Save ``{key: {"value": ..., "category": ...}}`` in one request."""

        self.call("/settings", "PUT", {"settings": {key: dict(item) for key, item in settings.items()}})
        for key in settings:
            self.cache.invalidate(key)
        LOGGER.debug("Saved %d settings", len(settings))

    # -- records -----------------------------------------------------------

    def list_documents(self, resource: str = "invoices", params: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        """Return the records of a list endpoint such as ``/invoices``."""

        payload = self.call(f"/{resource}", "GET", params)
        data = payload.get("data")
        if data is None:
            return []
        records = _extract_list(data, resource)
        if records is None:
            raise ApiError(f"Unexpected payload for /{resource}")
        return records

    # -- backup ------------------------------------------------------------

    def export_database(self, destination: Path) -> Path:
        """Download the database export blob into ``destination``.

        The blob is written to a ``.part`` sibling first and only renamed to
        ``destination`` once complete, so an interrupted download never
        leaves a truncated backup behind.
        """

        response = self._send(
            "GET",
            "/db/export",
            headers=self._headers("application/octet-stream"),
            stream=True,
        )
        with response:
            if response.status_code >= 400:
                reason = getattr(response, "reason", "") or response.status_code
                raise ApiError(f"Export failed: {reason}", status=response.status_code)

            destination.parent.mkdir(parents=True, exist_ok=True)
            partial = destination.with_name(f"{destination.name}.part")
            try:
                with partial.open("wb") as handle:
                    for chunk in response.iter_content(chunk_size=_DOWNLOAD_CHUNK):
                        if chunk:
                            handle.write(chunk)
            except requests.RequestException as exc:
                partial.unlink(missing_ok=True)
                LOGGER.error("Database export interrupted: %s", exc)
                raise ConnectionFailed(f"Export interrupted: {exc}") from exc
            except BaseException:
                partial.unlink(missing_ok=True)
                raise

        partial.replace(destination)
        LOGGER.info("Database exported to %s", destination)
        return destination

    def import_database(self, source: Path) -> None:
        """Upload ``source`` as the new database and reconnect."""

        with source.open("rb") as handle:
            response = self._send(
                "POST",
                "/db/import",
                headers=self._headers(content_type=None),
                files={"database": (source.name, handle, "application/octet-stream")},
            )
        if response.status_code >= 400:
            raise ApiError(f"Import failed: {response.text}", status=response.status_code)

        LOGGER.info("Database imported from %s", source)
        self.cache.invalidate()
        self._ready = False
        self.connect()


__all__ = ["ApiClient", "CATEGORY_ROUTES", "SECTION_ROUTES"]
