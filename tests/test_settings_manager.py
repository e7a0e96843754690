import json
import logging
from urllib.parse import parse_qs, urlsplit

import pytest

from fmesdk.models import Settings
from fmesdk.settings_manager import (
    DEFAULT_HOSTNAME,
    NETWORK_CALL_FAILURE_AFTER_MAX_RETRIES,
    NETWORK_CALL_SUCCESS_WITH_RETRIES,
    Endpoint,
    FetchResponse,
    SettingsFetchError,
    SettingsManager,
    normalize_settings_json,
    parse_gateway_service,
)

SETTINGS_DOC = json.dumps(
    {
        "accountId": 1,
        "sdkKey": "placeholder",
        "version": 2,
        "features": {},
        "campaigns": {},
    }
)


class FakeTransport:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def __call__(self, url, timeout):
        self.calls.append((url, timeout))
        return self.response


def make_manager(response, **kwargs):
    transport = FakeTransport(response)
    manager = SettingsManager("placeholder", 1, transport, logging.getLogger("test.sm"), **kwargs)
    return manager, transport


def test_parse_gateway_without_url_uses_default():
    assert parse_gateway_service({}) == (DEFAULT_HOSTNAME, "https", 0)
    assert parse_gateway_service({"url": ""}) == (DEFAULT_HOSTNAME, "https", 0)


def test_parse_gateway_url_with_scheme_and_port():
    assert parse_gateway_service({"url": "http://gw.example.com:8080"}) == (
        "gw.example.com",
        "http",
        8080,
    )


def test_parse_gateway_uses_protocol_and_port_options():
    result = parse_gateway_service({"url": "gw.example.com", "protocol": "http", "port": 9000})
    assert result == ("gw.example.com", "http", 9000)


def test_parse_gateway_defaults_to_https():
    assert parse_gateway_service({"url": "gw.example.com"}) == ("gw.example.com", "https", 0)


def test_manager_applies_gateway():
    manager, _ = make_manager(None, gateway_service={"url": "http://gw.example.com:8080"})
    assert manager.is_gateway_service_provided is True
    assert (manager.hostname, manager.protocol, manager.port) == ("gw.example.com", "http", 8080)


def test_normalize_turns_empty_objects_into_lists():
    out = json.loads(normalize_settings_json(SETTINGS_DOC))
    assert out["features"] == []
    assert out["campaigns"] == []
    assert out["version"] == 2


def test_normalize_keeps_non_empty_and_non_objects():
    doc = json.dumps({"features": {"a": 1}})
    assert json.loads(normalize_settings_json(doc)) == {"features": {"a": 1}}
    assert normalize_settings_json("[1, 2]") == "[1, 2]"
    assert normalize_settings_json("not json") == "not json"


def test_fetch_settings_builds_query():
    manager, transport = make_manager(FetchResponse(200, SETTINGS_DOC))
    data = manager.fetch_settings()
    assert json.loads(data)["features"] == []
    url, timeout = transport.calls[0]
    parts = urlsplit(url)
    assert parts.path == Endpoint.SETTINGS.value
    assert parts.hostname == DEFAULT_HOSTNAME
    query = parse_qs(parts.query)
    assert query["i"] == ["placeholder"]
    assert query["a"] == ["1"]
    assert query["api-version"] == ["3"]
    assert query["s"] == ["prod"]
    assert timeout == manager.network_timeout


def test_fetch_settings_development_mode_and_webhook():
    manager, transport = make_manager(FetchResponse(200, "{}"))
    manager.development_mode = True
    manager.fetch_settings(True)
    parts = urlsplit(transport.calls[0][0])
    assert parts.path == Endpoint.WEBHOOK_SETTINGS.value
    assert "s" not in parse_qs(parts.query)


def test_fetch_settings_status_error():
    manager, _ = make_manager(FetchResponse(500))
    with pytest.raises(SettingsFetchError, match="request failed with status code: 500"):
        manager.fetch_settings()


def test_fetch_settings_error_text_wins():
    manager, _ = make_manager(FetchResponse(503, error="boom"))
    with pytest.raises(SettingsFetchError, match="boom"):
        manager.fetch_settings()


def test_fetch_settings_missing_response_or_credentials():
    manager, _ = make_manager(None)
    with pytest.raises(SettingsFetchError, match="response is nil"):
        manager.fetch_settings()
    no_key = SettingsManager("", 1, FakeTransport(None))
    with pytest.raises(SettingsFetchError, match="required"):
        no_key.fetch_settings()


def test_retry_reports_debug_events():
    events = []
    manager, _ = make_manager(FetchResponse(200, "{}", error="timeout", total_attempts=2))
    manager.on_debug_event = events.append
    manager.fetch_settings()
    assert events[0]["msg_t"] == NETWORK_CALL_SUCCESS_WITH_RETRIES
    assert events[0]["an"] == "init"

    failing, _ = make_manager(FetchResponse(500, error="timeout", total_attempts=3))
    failing.on_debug_event = events.append
    with pytest.raises(SettingsFetchError):
        failing.fetch_settings()
    assert events[1]["msg_t"] == NETWORK_CALL_FAILURE_AFTER_MAX_RETRIES


def test_get_settings_parses_and_stores():
    manager, _ = make_manager(FetchResponse(200, SETTINGS_DOC))
    data = manager.get_settings()
    assert manager.settings.version == 2
    assert manager.settings_string == data
    assert manager.is_settings_valid_on_init is True


def test_get_settings_failure_returns_none(caplog):
    manager, _ = make_manager(FetchResponse(500))
    with caplog.at_level(logging.ERROR, logger="test.sm"):
        assert manager.get_settings() is None
    assert "500" in caplog.text
    assert manager.settings is None


def test_get_settings_invalid_shape_returns_none():
    manager, _ = make_manager(FetchResponse(200, json.dumps({"campaigns": "bad"})))
    assert manager.get_settings() is None
    assert manager.is_settings_valid_on_init is False


def test_force_fetch_does_not_parse():
    manager, _ = make_manager(FetchResponse(200, SETTINGS_DOC))
    data = manager.get_settings(True)
    assert json.loads(data)["accountId"] == 1
    assert manager.settings is None


def test_set_settings():
    manager, _ = make_manager(None)
    settings = Settings(version=7)
    manager.set_settings(settings, "{}")
    assert manager.settings is settings
    assert manager.settings_string == "{}"