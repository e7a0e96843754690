"""Feature lookups, rule selection and preprocessing of settings."""

from __future__ import annotations

import copy
import json
import logging
import re
from typing import Any, Optional, Union

from fmesdk.campaigns import set_variation_allocation
from fmesdk.models import Campaign, CampaignType, Feature, Settings, Variation

_KEYWORDS = r"\b(country|region|city|os|device_type|browser_string|ua|browser_version|os_version)\b"
_GATEWAY_PATTERN = re.compile(
    _KEYWORDS + r'|"custom_variable"\s*:\s*\{\s*"name"\s*:\s*"inlist\([^)]*\)"'
)
_KEYWORD_PATTERN = re.compile(_KEYWORDS)
_CUSTOM_VARIABLE_MARK = '"custom_variable"'


def does_event_belong_to_any_feature(event_name: str, settings: Optional[Settings]) -> bool:
    """True when some feature has a metric with the event name as identifier."""
    if settings is None:
        return False
    return any(
        metric.identifier == event_name
        for feature in settings.features
        for metric in feature.metrics
    )


def get_feature_from_key(settings: Optional[Settings], feature_key: str) -> Optional[Feature]:
    """Return the feature with the key, or None."""
    if settings is None:
        return None
    return next((f for f in settings.features if f.key == feature_key), None)


def _type_value(campaign_type: Union[CampaignType, str]) -> str:
    return campaign_type.value if isinstance(campaign_type, CampaignType) else campaign_type


def get_specific_rules_based_on_type(
    feature: Optional[Feature], campaign_type: Union[CampaignType, str]
) -> list[Campaign]:
    """Return copies of the feature's linked campaigns of the given type."""
    if feature is None:
        return []
    wanted = _type_value(campaign_type)
    return [copy.copy(rule) for rule in feature.rules_linked_campaign if rule.type == wanted]


def get_all_experiment_rules(feature: Optional[Feature]) -> list[Campaign]:
    """Return copies of the feature's A/B and personalize linked campaigns."""
    if feature is None:
        return []
    wanted = (CampaignType.AB.value, CampaignType.PERSONALIZE.value)
    return [copy.copy(rule) for rule in feature.rules_linked_campaign if rule.type in wanted]


def clone_object(obj: Any) -> Any:
    """Deep-copy a value through JSON.

    Campaigns and variations come back as the same type; anything else comes
    back as a dict, or None when it does not serialise to a JSON object.
    """
    if isinstance(obj, Campaign):
        return Campaign.from_dict(json.loads(json.dumps(obj.to_dict())))
    if isinstance(obj, Variation):
        return Variation.from_dict(json.loads(json.dumps(obj.to_dict())))
    to_dict = getattr(obj, "to_dict", None)
    source = to_dict() if callable(to_dict) else obj
    try:
        cloned = json.loads(json.dumps(source))
    except (TypeError, ValueError):
        return None
    return cloned if isinstance(cloned, dict) else None


def process_settings(settings: Settings, logger: Optional[logging.Logger] = None) -> None:
    """Allocate variation ranges, link campaigns to features and flag gateway needs."""
    for campaign in settings.campaigns:
        set_variation_allocation(campaign, logger)
    add_linked_campaigns_to_settings(settings)
    add_is_gateway_service_required_flag(settings)


def _linked_copy(original: Campaign, rule_key: str, variation_id: int) -> Campaign:
    variations = [copy.copy(v) for v in original.variations]
    if variation_id != 0:
        match = next((v for v in variations if v.id == variation_id), None)
        if match is not None:
            variations = [match]
    return Campaign(
        id=original.id,
        key=original.key,
        name=original.name,
        type=original.type,
        salt=original.salt,
        percent_traffic=original.percent_traffic,
        is_user_list_enabled=original.is_user_list_enabled,
        is_forced_variation_enabled=original.is_forced_variation_enabled,
        segments=original.segments,
        variations=variations,
        metrics=original.metrics,
        variables=original.variables,
        variation_id=original.variation_id,
        campaign_id=original.campaign_id,
        rule_key=rule_key,
    )


def add_linked_campaigns_to_settings(settings: Settings) -> None:
    """Give each feature a copy of the campaign behind each of its rules."""
    by_id = {campaign.id: campaign for campaign in settings.campaigns}
    for feature in settings.features:
        feature.rules_linked_campaign = [
            _linked_copy(by_id[rule.campaign_id], rule.rule_key, rule.variation_id)
            for rule in feature.rules
            if rule.campaign_id in by_id
        ]


def _is_within_custom_variable(start: int, text: str) -> bool:
    index = text.rfind(_CUSTOM_VARIABLE_MARK, 0, start)
    if index == -1:
        return False
    closing = text.find("}", index)
    return closing != -1 and start < closing


def _needs_gateway(segments: Any) -> bool:
    try:
        text = json.dumps(segments, sort_keys=True, separators=(",", ":"))
    except (TypeError, ValueError):
        return False
    for match in _GATEWAY_PATTERN.finditer(text):
        if not _KEYWORD_PATTERN.search(match.group(0)):
            return True
        if not _is_within_custom_variable(match.start(), text):
            return True
    return False


def add_is_gateway_service_required_flag(settings: Settings) -> None:
    """Flag features whose segments rely on data only the gateway can supply."""
    rollout_like = (CampaignType.ROLLOUT.value, CampaignType.PERSONALIZE.value)
    for feature in settings.features:
        for rule in feature.rules_linked_campaign:
            if rule.type in rollout_like:
                segments = rule.variations[0].segments if rule.variations else None
            else:
                segments = rule.segments
            if segments is not None and _needs_gateway(segments):
                feature.is_gateway_service_required = True
                break