"""Settings data model: campaigns, variations, features, rules and groups."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, TypeVar

T = TypeVar("T")


class CampaignType(str, Enum):
    """Kinds of rules a feature can carry."""

    AB = "FLAG_TESTING"
    ROLLOUT = "FLAG_ROLLOUT"
    PERSONALIZE = "FLAG_PERSONALIZE"


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


def _int(value: Any, key: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ValueError(f"'{key}' must be a number, got a boolean")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"'{key}' must be an integer, got {value!r}") from exc


def _float(value: Any, key: str) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ValueError(f"'{key}' must be a number, got a boolean")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"'{key}' must be a number, got {value!r}") from exc


def _str(value: Any) -> str:
    return "" if value is None else str(value)


def _list(data: Mapping[str, Any], key: str, factory: Callable[[Any], T]) -> list[T]:
    raw = data.get(key)
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError(f"'{key}' must be a list")
    return [factory(item) for item in raw]


def _dict(data: Mapping[str, Any], key: str) -> dict[str, Any]:
    raw = data.get(key)
    if raw is None:
        return {}
    return dict(_require_mapping(raw, f"'{key}'"))


@dataclass
class Variation:
    """A variation of a campaign, with its computed bucketing range."""

    id: int = 0
    name: str = ""
    key: str = ""
    weight: float = 0.0
    salt: str = ""
    segments: Optional[dict[str, Any]] = None
    variables: list[Any] = field(default_factory=list)
    start_range_variation: int = 0
    end_range_variation: int = 0
    type: str = ""
    rule_key: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "Variation":
        data = _require_mapping(data, "variation")
        segments = data.get("segments")
        return cls(
            id=_int(data.get("id"), "id"),
            name=_str(data.get("name")),
            key=_str(data.get("key")),
            weight=_float(data.get("weight"), "weight"),
            salt=_str(data.get("salt")),
            segments=None if segments is None else dict(_require_mapping(segments, "'segments'")),
            variables=list(data.get("variables") or []),
            start_range_variation=_int(data.get("startRangeVariation"), "startRangeVariation"),
            end_range_variation=_int(data.get("endRangeVariation"), "endRangeVariation"),
            type=_str(data.get("type")),
            rule_key=_str(data.get("ruleKey")),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "key": self.key,
            "weight": self.weight,
            "salt": self.salt,
            "variables": list(self.variables),
            "startRangeVariation": self.start_range_variation,
            "endRangeVariation": self.end_range_variation,
            "type": self.type,
            "ruleKey": self.rule_key,
        }
        if self.segments is not None:
            out["segments"] = dict(self.segments)
        return out


@dataclass
class Metric:
    """A goal metric attached to a feature or campaign."""

    id: int = 0
    type: str = ""
    identifier: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "Metric":
        data = _require_mapping(data, "metric")
        return cls(
            id=_int(data.get("id"), "id"),
            type=_str(data.get("type")),
            identifier=_str(data.get("identifier")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "type": self.type, "identifier": self.identifier}


@dataclass
class Campaign:
    """A campaign as defined in settings, or a rule's linked copy of one."""

    id: int = 0
    key: str = ""
    name: str = ""
    type: str = ""
    salt: str = ""
    percent_traffic: int = 0
    is_user_list_enabled: bool = False
    is_forced_variation_enabled: bool = False
    segments: dict[str, Any] = field(default_factory=dict)
    variations: list[Variation] = field(default_factory=list)
    metrics: list[Metric] = field(default_factory=list)
    variables: list[Any] = field(default_factory=list)
    variation_id: int = 0
    campaign_id: int = 0
    rule_key: str = ""
    weight: float = 0.0

    @classmethod
    def from_dict(cls, data: Any) -> "Campaign":
        data = _require_mapping(data, "campaign")
        return cls(
            id=_int(data.get("id"), "id"),
            key=_str(data.get("key")),
            name=_str(data.get("name")),
            type=_str(data.get("type")),
            salt=_str(data.get("salt")),
            percent_traffic=_int(data.get("percentTraffic"), "percentTraffic"),
            is_user_list_enabled=bool(data.get("isUserListEnabled", False)),
            is_forced_variation_enabled=bool(data.get("isForcedVariationEnabled", False)),
            segments=_dict(data, "segments"),
            variations=_list(data, "variations", Variation.from_dict),
            metrics=_list(data, "metrics", Metric.from_dict),
            variables=list(data.get("variables") or []),
            variation_id=_int(data.get("variationId"), "variationId"),
            campaign_id=_int(data.get("campaignId"), "campaignId"),
            rule_key=_str(data.get("ruleKey")),
            weight=_float(data.get("weight"), "weight"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "key": self.key,
            "name": self.name,
            "type": self.type,
            "salt": self.salt,
            "percentTraffic": self.percent_traffic,
            "isUserListEnabled": self.is_user_list_enabled,
            "isForcedVariationEnabled": self.is_forced_variation_enabled,
            "segments": dict(self.segments),
            "variations": [v.to_dict() for v in self.variations],
            "metrics": [m.to_dict() for m in self.metrics],
            "variables": list(self.variables),
            "variationId": self.variation_id,
            "campaignId": self.campaign_id,
            "ruleKey": self.rule_key,
            "weight": self.weight,
        }


@dataclass
class Rule:
    """A feature rule pointing at a campaign and, optionally, one variation."""

    type: str = ""
    rule_key: str = ""
    campaign_id: int = 0
    variation_id: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "Rule":
        data = _require_mapping(data, "rule")
        return cls(
            type=_str(data.get("type")),
            rule_key=_str(data.get("ruleKey")),
            campaign_id=_int(data.get("campaignId"), "campaignId"),
            variation_id=_int(data.get("variationId"), "variationId"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "ruleKey": self.rule_key,
            "campaignId": self.campaign_id,
            "variationId": self.variation_id,
        }


@dataclass
class Feature:
    """A feature flag with its rules and metrics."""

    id: int = 0
    key: str = ""
    name: str = ""
    type: str = ""
    metrics: list[Metric] = field(default_factory=list)
    rules: list[Rule] = field(default_factory=list)
    rules_linked_campaign: list[Campaign] = field(default_factory=list)
    is_gateway_service_required: bool = False
    impact_campaign: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "Feature":
        data = _require_mapping(data, "feature")
        return cls(
            id=_int(data.get("id"), "id"),
            key=_str(data.get("key")),
            name=_str(data.get("name")),
            type=_str(data.get("type")),
            metrics=_list(data, "metrics", Metric.from_dict),
            rules=_list(data, "rules", Rule.from_dict),
            rules_linked_campaign=_list(data, "rulesLinkedCampaign", Campaign.from_dict),
            is_gateway_service_required=bool(data.get("isGatewayServiceRequired", False)),
            impact_campaign=_dict(data, "impactCampaign"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "key": self.key,
            "name": self.name,
            "type": self.type,
            "metrics": [m.to_dict() for m in self.metrics],
            "rules": [r.to_dict() for r in self.rules],
            "rulesLinkedCampaign": [c.to_dict() for c in self.rules_linked_campaign],
            "isGatewayServiceRequired": self.is_gateway_service_required,
            "impactCampaign": dict(self.impact_campaign),
        }


@dataclass
class Group:
    """A mutually exclusive group of campaigns."""

    name: str = ""
    campaigns: list[str] = field(default_factory=list)
    et: int = 0
    p: list[str] = field(default_factory=list)
    wt: dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "Group":
        data = _require_mapping(data, "group")
        return cls(
            name=_str(data.get("name")),
            campaigns=_list(data, "campaigns", str),
            et=_int(data.get("et"), "et"),
            p=_list(data, "p", str),
            wt={str(k): _float(v, "wt") for k, v in _dict(data, "wt").items()},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "campaigns": list(self.campaigns),
            "et": self.et,
            "p": list(self.p),
            "wt": dict(self.wt),
        }


@dataclass
class Settings:
    """The account settings document."""

    account_id: int = 0
    sdk_key: str = ""
    version: int = 0
    collection_prefix: str = ""
    campaigns: list[Campaign] = field(default_factory=list)
    features: list[Feature] = field(default_factory=list)
    campaign_groups: dict[str, int] = field(default_factory=dict)
    groups: dict[str, Group] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "Settings":
        data = _require_mapping(data, "settings")
        return cls(
            account_id=_int(data.get("accountId"), "accountId"),
            sdk_key=_str(data.get("sdkKey")),
            version=_int(data.get("version"), "version"),
            collection_prefix=_str(data.get("collectionPrefix")),
            campaigns=_list(data, "campaigns", Campaign.from_dict),
            features=_list(data, "features", Feature.from_dict),
            campaign_groups={
                str(k): _int(v, "campaignGroups") for k, v in _dict(data, "campaignGroups").items()
            },
            groups={str(k): Group.from_dict(v) for k, v in _dict(data, "groups").items()},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "accountId": self.account_id,
            "sdkKey": self.sdk_key,
            "version": self.version,
            "collectionPrefix": self.collection_prefix,
            "campaigns": [c.to_dict() for c in self.campaigns],
            "features": [f.to_dict() for f in self.features],
            "campaignGroups": dict(self.campaign_groups),
            "groups": {k: g.to_dict() for k, g in self.groups.items()},
        }


def parse_settings(data: Any) -> Settings:
    """Build a Settings object from decoded JSON; raises ValueError on bad shapes."""
    return Settings.from_dict(data)


def settings_from_json(text: str) -> Settings:
    """Parse a settings JSON document; raises ValueError when it is invalid."""
    return parse_settings(json.loads(text))