# fmesdk

Building blocks for feature management and experimentation: deterministic
visitor identifiers, a settings data model, variation range allocation,
group lookups, settings preprocessing, event batching and event payload
construction. The package has no runtime dependencies.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `fmesdk.uuids` – `generate_uuid(name, namespace)` (name-based version 5
  UUIDs), `get_uuid(user_id, account_id)` (a stable 32-character upper-case
  visitor id), `get_random_uuid(sdk_key)` and
  `get_uuid_from_bits(msb, lsb)`, which raises `ValueError` for values
  outside the unsigned 64-bit range.
- `fmesdk.datatypes` – value classification (`is_object`, `is_array`,
  `is_number`, `is_integer`, `is_nan`, `is_date`, ...) and `get_type`, which
  returns names such as `"Null"`, `"Array"`, `"Object"`, `"Integer"`,
  `"Number"`, `"String"` or `"Unknown Type"`.
- `fmesdk.models` – the settings model as dataclasses: `Settings`,
  `Feature`, `Campaign`, `Variation`, `Rule`, `Metric`, `Group`, and the
  `CampaignType` enum (`FLAG_TESTING`, `FLAG_ROLLOUT`, `FLAG_PERSONALIZE`).
  `parse_settings(data)` builds a `Settings` from decoded JSON and
  `settings_from_json(text)` from a JSON string; both raise `ValueError` on
  malformed input. Every model has `from_dict` and `to_dict`.
- `fmesdk.campaigns` – bucketing-range allocation
  (`set_variation_allocation`, `assign_range_values`,
  `set_campaign_allocation`, `scale_variation_weights`), bucketing seeds
  (`get_bucketing_seed`), range lookups (`get_variation`,
  `check_in_range`) and lookups over settings: group membership
  (`get_group_details_if_campaign_part_of_it`,
  `find_groups_feature_part_of`, `get_campaigns_by_group_id`), feature and
  campaign cross references and key/name/type lookups by id.
- `fmesdk.features` – `get_feature_from_key`,
  `does_event_belong_to_any_feature`, rule filtering
  (`get_specific_rules_based_on_type`, `get_all_experiment_rules`),
  `clone_object`, and `process_settings`, which allocates variation ranges,
  attaches each rule's campaign to its feature
  (`add_linked_campaigns_to_settings`) and flags features whose segments
  need gateway-supplied data (`add_is_gateway_service_required_flag`).
- `fmesdk.storage` – `StorageService` reading and writing decision
  records through a `StorageConnector`. The default connector keeps
  records in memory, keyed by `featureKey` and `userId`; subclass it and
  override `get` and `set` to store them elsewhere.
- `fmesdk.batching` – `BatchEventQueue`, which collects events and sends
  them through a function you supply, either when `events_per_request`
  events are queued or every `request_time_interval` seconds. A batch that
  is not accepted is put back at the front of the queue.
  `flush_and_clear_interval()` stops the timer and sends what remains; the
  queue can also be used as a context manager.
- `fmesdk.events` – `remove_null_values`, `generate_msg_id`,
  `generate_session_id`, `generate_random` and `create_headers`.
- `fmesdk.payloads` – query parameters (`get_events_base_properties`) and
  JSON payloads for goal events, attribute sync, SDK init timings, usage
  statistics and debugger events.
- `fmesdk.usage` – `LogLevel`, `parse_log_level` and `get_usage_stats`,
  which turns an init options mapping into usage flags.
- `fmesdk.settings_manager` – `SettingsManager`, which fetches the
  settings document through a transport you supply, normalises empty
  `features`/`campaigns` objects to lists and keeps the parsed result;
  `parse_gateway_service` and `normalize_settings_json` are available on
  their own. Fetch failures raise `SettingsFetchError`.
- `fmesdk.debugger` – `DebuggerService`, standard and per-category debug
  properties.
- `fmesdk.hooks` – `HooksManager`, which forwards decisions to an
  optional integration callback.

## Examples

Loading and preparing settings:

```python
from fmesdk.features import get_feature_from_key, process_settings
from fmesdk.models import settings_from_json
from fmesdk.uuids import get_uuid

settings = settings_from_json(settings_text)
process_settings(settings)

feature = get_feature_from_key(settings, "checkout_flow")
visitor_id = get_uuid("user-1", "123456")
```

Fetching settings with a transport built on the standard library:

```python
import urllib.request

from fmesdk.settings_manager import FetchResponse, SettingsManager

def transport(url, timeout):
    with urllib.request.urlopen(url, timeout=timeout) as resp:
        return FetchResponse(status_code=resp.status, data=resp.read().decode())

manager = SettingsManager(
    sdk_key="placeholder",
    account_id=123456,
    transport=transport,
    gateway_service={"url": "gateway.example.com"},
)
text = manager.get_settings()   # JSON text, or None on failure
settings = manager.settings     # the parsed Settings
```

Batching events:

```python
from fmesdk.batching import BatchEventQueue

def send(payload, query, headers):
    # post payload as JSON with the given query and headers; return success
    return True

with BatchEventQueue(
    events_per_request=100,
    request_time_interval=600,
    send=send,
    account_id=123456,
    sdk_key="placeholder",
) as queue:
    queue.enqueue({"d": {"event": {"name": "signup"}}})
```

## What this package does not do

- It has no HTTP client of its own: `SettingsManager` and
  `BatchEventQueue` only build requests and hand them to the transport or
  send function you pass in.
- It does not evaluate flags for a user: there is no client object, no
  segment evaluation, no traffic bucketing against a user's hash and no
  selection of a winner within a mutually exclusive group. It provides the
  data model, range allocation and lookups such logic is built on.
- It does not poll for settings updates and does not validate settings
  against a schema beyond what parsing into the model checks.