"""Campaign allocation, bucketing seeds and lookups over settings."""

from __future__ import annotations

import logging
import math
from decimal import Decimal
from typing import Optional

from fmesdk.models import Campaign, CampaignType, Feature, Settings, Variation

MAX_TRAFFIC_VALUE = 10000

_log = logging.getLogger(__name__)


def _is_rollout_or_personalize(campaign_type: str) -> bool:
    return campaign_type in (CampaignType.ROLLOUT.value, CampaignType.PERSONALIZE.value)


def _format_weight(weight: float) -> str:
    text = format(Decimal(repr(float(weight))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _log_range(logger: logging.Logger, campaign: Campaign, variation: Variation) -> None:
    logger.info(
        "Variation %s of campaign %s having weight %s got bucketing range: (%s - %s)",
        variation.name,
        campaign.key,
        _format_weight(variation.weight),
        variation.start_range_variation,
        variation.end_range_variation,
    )


def _variation_bucket_range(weight: float) -> int:
    if weight <= 0:
        return 0
    return min(math.ceil(weight * 100), MAX_TRAFFIC_VALUE)


def _atoi(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        return 0


def set_variation_allocation(campaign: Campaign, logger: Optional[logging.Logger] = None) -> None:
    """Assign bucketing ranges to every variation of the campaign."""
    logger = logger or _log
    if _is_rollout_or_personalize(campaign.type):
        for variation in campaign.variations:
            variation.start_range_variation = 1
            variation.end_range_variation = int(variation.weight * 100)
            _log_range(logger, campaign, variation)
        return
    current = 0
    for variation in campaign.variations:
        current += assign_range_values(variation, current)
        _log_range(logger, campaign, variation)


def assign_range_values(variation: Variation, current_allocation: int) -> int:
    """Give the variation a range after ``current_allocation``; return its size."""
    step = _variation_bucket_range(variation.weight)
    if step > 0:
        variation.start_range_variation = current_allocation + 1
        variation.end_range_variation = current_allocation + step
    else:
        variation.start_range_variation = -1
        variation.end_range_variation = -1
    return step


def scale_variation_weights(variations: list[Variation]) -> None:
    """Scale weights so they sum to 100; all-zero weights become equal shares."""
    if not variations:
        return
    total = sum(v.weight for v in variations)
    if total == 0:
        share = 100.0 / len(variations)
        for variation in variations:
            variation.weight = share
    else:
        for variation in variations:
            variation.weight = variation.weight / total * 100


def get_bucketing_seed(user_id: str, campaign: Optional[Campaign], group_id: Optional[int] = None) -> str:
    """Return the seed used to bucket a user into a campaign or group."""
    if group_id is not None:
        return f"{group_id}_{user_id}"
    if campaign is None:
        raise ValueError("a campaign is required when no group id is given")
    if _is_rollout_or_personalize(campaign.type) and campaign.variations:
        salt = campaign.variations[0].salt
    else:
        salt = campaign.salt
    return f"{salt}_{user_id}" if salt else f"{campaign.id}_{user_id}"


def get_variation_from_campaign_key(
    settings: Settings, campaign_key: str, variation_id: int
) -> Optional[Variation]:
    """Find a variation by id in the campaign with the given key, or None."""
    campaign = next((c for c in settings.campaigns if c.key == campaign_key), None)
    if campaign is None:
        return None
    return next((v for v in campaign.variations if v.id == variation_id), None)


def set_campaign_allocation(campaigns: list[Variation]) -> None:
    """Assign consecutive bucketing ranges to a list of weighted entries."""
    current = 0
    for entry in campaigns:
        current += assign_range_values(entry, current)


def get_group_details_if_campaign_part_of_it(
    settings: Optional[Settings], campaign_id: int, variation_id: int = -1
) -> dict[str, str]:
    """Return ``{"groupId", "groupName"}`` for the campaign's group, or an empty dict."""
    if settings is None:
        return {}
    to_check = str(campaign_id)
    if variation_id != -1:
        to_check = f"{to_check}_{variation_id}"
    group_id = settings.campaign_groups.get(to_check)
    if group_id is None:
        return {}
    group = settings.groups.get(str(group_id))
    if group is None:
        return {}
    return {"groupId": str(group_id), "groupName": group.name}


def find_groups_feature_part_of(settings: Settings, feature_key: str) -> list[dict[str, str]]:
    """Return the distinct groups that any rule of the feature belongs to."""
    rules = []
    seen_rules: set[tuple[int, int]] = set()
    for feature in settings.features:
        if feature.key != feature_key:
            continue
        for rule in feature.rules:
            ident = (rule.campaign_id, rule.variation_id)
            if ident not in seen_rules:
                seen_rules.add(ident)
                rules.append(rule)

    groups: list[dict[str, str]] = []
    for rule in rules:
        variation_id = rule.variation_id if rule.type == CampaignType.PERSONALIZE.value else -1
        group = get_group_details_if_campaign_part_of_it(settings, rule.campaign_id, variation_id)
        if group and all(g["groupId"] != group["groupId"] for g in groups):
            groups.append(group)
    return groups


def get_campaigns_by_group_id(settings: Settings, group_id: int) -> list[str]:
    """Return the campaign identifiers of a group, or an empty list."""
    group = settings.groups.get(str(group_id))
    return list(group.campaigns) if group is not None else []


def get_feature_keys_from_campaign_ids(settings: Settings, campaign_ids: list[str]) -> list[str]:
    """Return keys of features whose rules use the given ``id`` or ``id_variation`` entries."""
    feature_keys: list[str] = []
    for entry in campaign_ids:
        parts = entry.split("_")
        campaign_id = _atoi(parts[0])
        variation_id = _atoi(parts[1]) if len(parts) > 1 else None
        for feature in settings.features:
            if feature.key in feature_keys:
                continue
            for rule in feature.rules:
                if rule.campaign_id != campaign_id:
                    continue
                if variation_id is None or rule.variation_id == variation_id:
                    feature_keys.append(feature.key)
    return feature_keys


def get_campaign_ids_from_feature_key(settings: Settings, feature_key: str) -> list[int]:
    """Return the campaign ids of all rules of the feature."""
    return [
        rule.campaign_id
        for feature in settings.features
        if feature.key == feature_key
        for rule in feature.rules
    ]


def get_rule_type_using_campaign_id_from_feature(feature: Feature, campaign_id: int) -> str:
    """Return the type of the feature's rule for the campaign, or an empty string."""
    return next((r.type for r in feature.rules if r.campaign_id == campaign_id), "")


def get_campaign_logging_key(campaign: Optional[Campaign]) -> str:
    """Key used in messages: the key for A/B, otherwise name and rule key."""
    if campaign is None:
        return ""
    if campaign.type == CampaignType.AB.value:
        return campaign.key
    if campaign.rule_key:
        return f"{campaign.name}_{campaign.rule_key}"
    return campaign.name


def get_campaign_key_from_campaign_id(settings: Settings, campaign_id: int) -> str:
    """Return the key of the campaign with the id, or an empty string."""
    return next((c.key for c in settings.campaigns if c.id == campaign_id), "")


def get_variation_name_from_campaign_id_and_variation_id(
    settings: Settings, campaign_id: int, variation_id: int
) -> str:
    """Return the name of a variation of a campaign, or an empty string."""
    for campaign in settings.campaigns:
        if campaign.id != campaign_id:
            continue
        for variation in campaign.variations:
            if variation.id == variation_id:
                return variation.name
    return ""


def get_campaign_type_from_campaign_id(settings: Settings, campaign_id: int) -> str:
    """Return the type of the campaign with the id, or an empty string."""
    return next((c.type for c in settings.campaigns if c.id == campaign_id), "")


def is_feature_present_in_settings(settings: Settings, feature_id: int) -> bool:
    """True when a feature with the id exists."""
    return any(f.id == feature_id for f in settings.features)


def get_variation(variations: list[Variation], bucket_value: int) -> Optional[Variation]:
    """Return the first variation whose range contains the bucket value."""
    return next((v for v in variations if check_in_range(v, bucket_value) is not None), None)


def check_in_range(variation: Variation, bucket_value: int) -> Optional[Variation]:
    """Return the variation if the bucket value lies within its range, else None."""
    if variation.start_range_variation <= bucket_value <= variation.end_range_variation:
        return variation
    return None