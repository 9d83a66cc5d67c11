"""
Rule Aggregator

Validates the rules discovered in the source tree and merges rules that target
the same resources into a canonical, order-stable list.
"""

import logging
from typing import Dict, List, Sequence, Set, Tuple

from ..core.constants import ErrorMessages
from ..core.exceptions import InvalidRuleError
from .models import PermissionRule

logger = logging.getLogger(__name__)


def validate_rules(rules: Sequence[PermissionRule]) -> None:
    """
    Check every rule against the permission rule invariants.

    Args:
        rules: Rules as returned by the rule source

    Raises:
        InvalidRuleError: On the first rule without verbs, one that targets
            both or neither of resources and non-resource URLs, resources
            without api groups, or URLs with api groups or resource names
    """
    for rule in rules:
        position = rule.describe_position()
        if not rule.verbs:
            raise InvalidRuleError(ErrorMessages.ScanError.EMPTY_VERBS.format(position=position))

        targets_resources = bool(rule.resources)
        targets_urls = bool(rule.non_resource_urls)
        if targets_resources and targets_urls:
            raise InvalidRuleError(ErrorMessages.ScanError.MIXED_TARGET.format(position=position))
        if not targets_resources and not targets_urls:
            raise InvalidRuleError(ErrorMessages.ScanError.NO_TARGET.format(position=position))
        if targets_resources and not rule.api_groups:
            raise InvalidRuleError(ErrorMessages.ScanError.MISSING_GROUPS.format(position=position))
        if targets_urls and (rule.api_groups or rule.resource_names):
            raise InvalidRuleError(ErrorMessages.ScanError.URL_WITH_RESOURCE_FIELDS.format(position=position))


def aggregate(rules: Sequence[PermissionRule]) -> List[PermissionRule]:
    """
    Merge rules sharing api groups, resources, resource names and URLs.

    Each group yields one rule whose verbs are the sorted union of its
    members' verbs. Groups are ordered by their normalised target fields, so
    the result depends only on the rules' content and not on scan order.

    Args:
        rules: Validated rules, possibly duplicated or overlapping

    Returns:
        List of merged rules (empty for empty input)
    """
    groups: Dict[Tuple[Tuple[str, ...], ...], Set[str]] = {}
    for rule in rules:
        groups.setdefault(rule.target_key(), set()).update(rule.verbs)

    aggregated = []
    for key in sorted(groups):
        api_groups, resources, resource_names, non_resource_urls = key
        aggregated.append(PermissionRule(
            api_groups=api_groups,
            resources=resources,
            resource_names=resource_names,
            verbs=tuple(sorted(groups[key])),
            non_resource_urls=non_resource_urls
        ))

    logger.debug(f"Aggregated {len(rules)} rules into {len(aggregated)}")
    return aggregated
