"""Fetching, normalising and holding the account settings document."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional
from urllib.parse import urlencode, urlsplit

from fmesdk.events import generate_random
from fmesdk.models import Settings, settings_from_json
from fmesdk.payloads import SDK_NAME, SDK_VERSION

DEFAULT_HOSTNAME = "settings.example.com"
HTTP_PROTOCOL = "http"
HTTPS_PROTOCOL = "https"
SETTINGS_TIMEOUT = 50.0
SETTINGS_API_VERSION = "3"

GATEWAY_URL_KEY = "url"
GATEWAY_PROTOCOL_KEY = "protocol"
GATEWAY_PORT_KEY = "port"

NETWORK_CALL_SUCCESS_WITH_RETRIES = "NETWORK_CALL_SUCCESS_WITH_RETRIES"
NETWORK_CALL_FAILURE_AFTER_MAX_RETRIES = "NETWORK_CALL_FAILURE_AFTER_MAX_RETRIES"

_log = logging.getLogger(__name__)


class Endpoint(str, Enum):
    """Paths from which settings are fetched."""

    SETTINGS = "/server-side/v2-settings"
    WEBHOOK_SETTINGS = "/server-side/v2-pull"


@dataclass
class FetchResponse:
    """What a transport reports back for one settings request."""

    status_code: int
    data: str = ""
    error: Optional[str] = None
    total_attempts: int = 0


class SettingsFetchError(Exception):
    """Raised when settings cannot be fetched."""


Transport = Callable[[str, float], Optional[FetchResponse]]
DebugEventSink = Callable[[dict[str, Any]], None]


def parse_gateway_service(gateway_service: Optional[dict[str, Any]]) -> tuple[str, str, int]:
    """Return ``(hostname, protocol, port)`` described by a gateway configuration.

    Without a usable URL the default host over HTTPS on port 0 is returned.
    """
    default = (DEFAULT_HOSTNAME, HTTPS_PROTOCOL, 0)
    if not gateway_service:
        return default
    gateway_url = gateway_service.get(GATEWAY_URL_KEY)
    if not isinstance(gateway_url, str) or not gateway_url:
        return default

    protocol = gateway_service.get(GATEWAY_PROTOCOL_KEY)
    protocol = protocol if isinstance(protocol, str) else ""
    port = gateway_service.get(GATEWAY_PORT_KEY)
    port = port if isinstance(port, int) and not isinstance(port, bool) else 0

    if gateway_url.startswith((f"{HTTP_PROTOCOL}://", f"{HTTPS_PROTOCOL}://")):
        full_url = gateway_url
    elif protocol:
        full_url = f"{protocol}://{gateway_url}"
    else:
        full_url = f"{HTTPS_PROTOCOL}://{gateway_url}"

    try:
        parsed = urlsplit(full_url)
        url_port = parsed.port
    except ValueError as exc:
        _log.error("Error parsing gateway URL %r: %s", gateway_url, exc)
        return default

    hostname = parsed.hostname or ""
    if url_port is not None:
        port = url_port
    return hostname, parsed.scheme, port


def normalize_settings_json(text: str) -> str:
    """Turn empty ``features``/``campaigns`` objects into empty lists.

    Text that is not a JSON object is returned unchanged.
    """
    try:
        raw = json.loads(text)
    except (TypeError, ValueError):
        return text
    if not isinstance(raw, dict):
        return text
    for key in ("features", "campaigns"):
        if raw.get(key) == {}:
            raw[key] = []
    return json.dumps(raw, separators=(",", ":"))


class SettingsManager:
    """Fetches settings over a transport and keeps the latest copy.

    ``transport`` is called with the full request URL and a timeout in
    seconds and returns a :class:`FetchResponse`, or None when no response
    was obtained.
    """

    def __init__(
        self,
        sdk_key: str,
        account_id: int,
        transport: Transport,
        logger: Optional[logging.Logger] = None,
        gateway_service: Optional[dict[str, Any]] = None,
    ) -> None:
        self.sdk_key = sdk_key
        self.account_id = account_id
        self.transport = transport
        self.logger = logger or _log
        self.network_timeout = SETTINGS_TIMEOUT
        self.is_gateway_service_provided = gateway_service is not None
        if gateway_service is not None:
            self.hostname, self.protocol, self.port = parse_gateway_service(gateway_service)
        else:
            self.hostname, self.protocol, self.port = DEFAULT_HOSTNAME, HTTPS_PROTOCOL, 0
        self.development_mode = False
        self.on_debug_event: Optional[DebugEventSink] = None
        self.is_settings_provided_in_init = False
        self.is_settings_valid_on_init = False
        self.start_time_for_init = 0
        self.settings_fetch_time = 0
        self.settings: Optional[Settings] = None
        self.settings_string = ""

    def _query(self) -> dict[str, str]:
        query = {
            "i": self.sdk_key,
            "r": generate_random(),
            "a": str(self.account_id),
            "api-version": SETTINGS_API_VERSION,
            "sn": SDK_NAME,
            "sv": SDK_VERSION,
        }
        if not self.development_mode:
            query["s"] = "prod"
        return query

    def _url(self, endpoint: Endpoint) -> str:
        port = f":{self.port}" if self.port else ""
        return f"{self.protocol}://{self.hostname}{port}{endpoint.value}?{urlencode(self._query())}"

    def _report_retries(self, response: FetchResponse, endpoint: Endpoint, api_name: str) -> None:
        succeeded = response.status_code == 200
        message_type = (
            NETWORK_CALL_SUCCESS_WITH_RETRIES if succeeded else NETWORK_CALL_FAILURE_AFTER_MAX_RETRIES
        )
        outcome = "succeeded" if succeeded else "failed"
        message = (
            f"Network call for {endpoint.value} {outcome} after "
            f"{response.total_attempts} attempts: {response.error or ''}"
        )
        if succeeded:
            self.logger.info(message)
        else:
            self.logger.error(message)
        if self.on_debug_event is not None:
            self.on_debug_event(
                {
                    "category": "retry" if succeeded else "network",
                    "an": api_name,
                    "msg": message,
                    "lt": "INFO" if succeeded else "ERROR",
                    "msg_t": message_type,
                }
            )

    def fetch_settings(self, via_webhook: bool = False) -> str:
        """Fetch the settings JSON; raise SettingsFetchError on any failure."""
        if not self.sdk_key or not self.account_id:
            raise SettingsFetchError(
                "SDK Key and Account ID are required to fetch settings. Aborting"
            )
        endpoint = Endpoint.WEBHOOK_SETTINGS if via_webhook else Endpoint.SETTINGS
        api_name = "updateSettings" if via_webhook else "init"

        start = time.monotonic()
        try:
            response = self.transport(self._url(endpoint), self.network_timeout)
        except OSError as exc:
            raise SettingsFetchError(f"network request failed: {exc}") from exc
        if response is None:
            raise SettingsFetchError("network request failed: response is nil")

        if response.total_attempts > 0:
            self._report_retries(response, endpoint, api_name)

        if response.status_code != 200:
            raise SettingsFetchError(
                response.error
                or f"request failed with status code: {response.status_code}"
            )

        self.settings_fetch_time = int((time.monotonic() - start) * 1000)
        return normalize_settings_json(response.data)

    def _fetch_or_none(self) -> Optional[str]:
        try:
            return self.fetch_settings(False)
        except SettingsFetchError as exc:
            self.logger.error(
                "Error fetching settings for account %s: %s", self.account_id, exc
            )
            return None

    def get_settings(self, force_fetch: bool = False) -> Optional[str]:
        """Fetch settings; unless forced, also parse and keep them.

        Returns the settings JSON, or None when fetching or parsing fails.
        """
        if force_fetch:
            return self._fetch_or_none()

        data = self._fetch_or_none()
        if not data:
            return None
        try:
            parsed = settings_from_json(data)
        except ValueError as exc:
            self.logger.error(
                "Invalid settings schema for account %s: Exception during parsing: %s",
                self.account_id,
                exc,
            )
            return None
        self.settings = parsed
        self.is_settings_valid_on_init = True
        self.settings_string = data
        return data

    def set_settings(self, settings: Settings, settings_string: str) -> None:
        """Replace the held settings and their JSON text."""
        self.settings = settings
        self.settings_string = settings_string