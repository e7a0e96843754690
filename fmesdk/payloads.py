"""Builders for the query parameters and JSON payloads of outgoing events."""

from __future__ import annotations

import time
from typing import Any, Optional

from fmesdk.events import (
    generate_msg_id,
    generate_random,
    generate_session_id,
    remove_null_values,
)
from fmesdk.uuids import get_random_uuid, get_uuid

SDK_NAME = "fmesdk"
SDK_VERSION = "1.0.0"
PRODUCT = "fme"
VWO_FS_ENVIRONMENT = "vwo_fs_environment"
DEBUGGER_EVENT = "vwo_debugger_event"

DEBUG_PROP_UUID = "uuid"
DEBUG_PROP_SESSION_ID = "sId"
DEBUG_PROP_ACCOUNT_ID = "a"
DEBUG_PROP_PRODUCT = "product"
DEBUG_PROP_SDK_NAME = "sn"
DEBUG_PROP_SDK_VERSION = "sv"
DEBUG_PROP_EVENT_ID = "eventId"

SDK_INIT_IS_INITIALIZED = "isSDKInitialized"
SDK_INIT_SETTINGS_FETCH_TIME = "settingsFetchTime"
SDK_INIT_TIME = "sdkInitTime"


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def get_events_base_properties(
    account_id: Any,
    sdk_key: str,
    event_name: str,
    visitor_user_agent: Optional[str] = "",
    ip_address: Optional[str] = "",
) -> dict[str, str]:
    """Return the query parameters common to every event request."""
    params = {
        "en": event_name,
        "a": str(account_id),
        "env": sdk_key,
        "eTime": str(_now_ms()),
        "random": generate_random(),
    }
    if visitor_user_agent:
        params["visitor_ua"] = visitor_user_agent
    if ip_address:
        params["visitor_ip"] = ip_address
    return params


def get_event_base_payload(
    account_id: Any,
    sdk_key: str,
    user_id: str,
    event_name: str,
    visitor_user_agent: Optional[str] = "",
    ip_address: Optional[str] = "",
    usage_stats_account_id: int = 0,
) -> dict[str, Any]:
    """Return the payload skeleton shared by every event.

    A non-zero ``usage_stats_account_id`` replaces the account id used to
    derive the visitor UUID.
    """
    uuid_account = str(usage_stats_account_id) if usage_stats_account_id else str(account_id)
    visitor_uuid = get_uuid(user_id, uuid_account)
    data: dict[str, Any] = {
        "msgId": generate_msg_id(visitor_uuid),
        "visId": visitor_uuid,
        "sessionId": generate_session_id(),
        "event": {
            "props": {
                "vwo_sdkName": SDK_NAME,
                "vwo_sdkVersion": SDK_VERSION,
                "vwo_envKey": sdk_key,
                "product": PRODUCT,
            },
            "name": event_name,
            "time": _now_ms(),
        },
        "visitor": {"props": {VWO_FS_ENVIRONMENT: sdk_key}},
    }
    if visitor_user_agent:
        data["visitor_ua"] = visitor_user_agent
    if ip_address:
        data["visitor_ip"] = ip_address
    return {"d": data}


def get_track_goal_payload_data(
    account_id: Any,
    sdk_key: str,
    user_id: str,
    event_name: str,
    user_agent: Optional[str] = "",
    ip_address: Optional[str] = "",
    event_properties: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    """Return the payload for a custom (goal) event."""
    payload = get_event_base_payload(
        account_id, sdk_key, user_id, event_name, user_agent, ip_address
    )
    props = payload["d"]["event"]["props"]
    props["isCustomEvent"] = True
    if event_properties:
        props.update(event_properties)
    return remove_null_values(payload)


def get_attribute_payload_data(
    account_id: Any,
    sdk_key: str,
    user_id: str,
    event_name: str,
    attribute_map: dict[str, Any],
) -> dict[str, Any]:
    """Return the payload that syncs visitor attributes."""
    payload = get_event_base_payload(account_id, sdk_key, user_id, event_name)
    payload["d"]["event"]["props"]["isCustomEvent"] = True
    payload["d"]["visitor"]["props"] = dict(attribute_map)
    return remove_null_values(payload)


def get_sdk_init_event_payload(
    account_id: Any,
    sdk_key: str,
    user_id: str,
    event_name: str,
    settings_fetch_time: int,
    sdk_init_time: int,
) -> dict[str, Any]:
    """Return the payload reporting SDK initialisation timings."""
    payload = get_event_base_payload(account_id, sdk_key, user_id, event_name)
    props = payload["d"]["event"]["props"]
    props["vwo_envKey"] = sdk_key
    props["product"] = PRODUCT
    props["data"] = {
        SDK_INIT_IS_INITIALIZED: True,
        SDK_INIT_SETTINGS_FETCH_TIME: settings_fetch_time,
        SDK_INIT_TIME: sdk_init_time,
    }
    return remove_null_values(payload)


def get_sdk_usage_stats_event_payload(
    account_id: Any,
    sdk_key: str,
    user_id: str,
    event_name: str,
    usage_stats_account_id: int,
    usage_stats_data: dict[str, Any],
) -> dict[str, Any]:
    """Return the payload reporting SDK usage statistics."""
    payload = get_event_base_payload(
        account_id, sdk_key, user_id, event_name, "", "", usage_stats_account_id
    )
    props = payload["d"]["event"]["props"]
    props["product"] = PRODUCT
    props["vwoMeta"] = usage_stats_data
    return remove_null_values(payload)


def get_debugger_event_payload(
    account_id: Any, sdk_key: str, event_props: dict[str, Any]
) -> dict[str, Any]:
    """Return the payload of a debugger event.

    A non-empty ``uuid`` and a non-zero ``sId`` in ``event_props`` are used
    for the visitor and session; otherwise generated ones are recorded in the
    props. The input mapping is not modified.
    """
    props = dict(event_props)
    user_id = f"{account_id}_{sdk_key}"
    payload = get_event_base_payload(account_id, sdk_key, user_id, DEBUGGER_EVENT)
    data = payload["d"]

    supplied_uuid = props.get(DEBUG_PROP_UUID)
    if isinstance(supplied_uuid, str) and supplied_uuid:
        data["msgId"] = generate_msg_id(supplied_uuid)
        data["visId"] = supplied_uuid
    else:
        props[DEBUG_PROP_UUID] = data["visId"]

    session_id = props.get(DEBUG_PROP_SESSION_ID)
    if isinstance(session_id, int) and not isinstance(session_id, bool) and session_id != 0:
        data["sessionId"] = session_id
    else:
        props[DEBUG_PROP_SESSION_ID] = data["sessionId"]

    props[DEBUG_PROP_ACCOUNT_ID] = str(account_id)
    props[DEBUG_PROP_PRODUCT] = PRODUCT
    props[DEBUG_PROP_SDK_NAME] = SDK_NAME
    props[DEBUG_PROP_SDK_VERSION] = SDK_VERSION
    props[DEBUG_PROP_EVENT_ID] = get_random_uuid(sdk_key)

    data["event"]["props"] = {"vwoMeta": props}
    return remove_null_values(payload)