"""Detection engine — selects a TemplateDescriptor for a tool result.

Two independent classifiers, combined by infer():

1. by_tool_name: hand-written prefix/keyword rules, then the
   capability-suffix fallback, then longest-prefix match over prefixes
   found by dynamic discovery.
2. by_data_shape: ordered structural predicates over the payload, then
   runtime data hints (first registered hint wins).

Both are total: any JSON-like input yields a descriptor or None, never an
exception. Each call first re-syncs dynamically discovered signatures.
"""

import logging
import os
from typing import Any, Callable, Optional

from signature_router.catalog.reader import is_tool_declared, observed_suffixes
from signature_router.discovery.dynamic import sync_dynamic_signatures
from signature_router.signatures.schemas import TemplateDescriptor
from signature_router.state import RegistryState

from .rules import TOOL_NAME_RULES

logger = logging.getLogger(__name__)

SUFFIX_MIN_MATCH_ENV = "SIGNATURE_ROUTER_SUFFIX_MIN_MATCH"
DEFAULT_SUFFIX_MIN_MATCH = 2

FILESYSTEM_ARRAY_FIELDS = ("items", "files", "entries", "matches")
RANKED_ARRAY_FIELDS = ("top_picks", "picks", "predictions")
MEDIA_ARRAY_FIELDS = ("photos", "media", "mediaFiles", "mediaItems")


# -- By tool name --


def suffix_min_match() -> int:
    """Minimum suffix overlap for the capability-suffix fallback, read from the environment."""
    raw = os.environ.get(SUFFIX_MIN_MATCH_ENV)
    if raw is None:
        return DEFAULT_SUFFIX_MIN_MATCH
    try:
        return max(1, int(raw))
    except ValueError:
        logger.warning(f"Ignoring invalid {SUFFIX_MIN_MATCH_ENV}={raw!r}")
        return DEFAULT_SUFFIX_MIN_MATCH


def by_tool_name(state: RegistryState, tool_name: Optional[str]) -> Optional[TemplateDescriptor]:
    """Select a descriptor from the invocation name alone."""
    if not isinstance(tool_name, str) or not tool_name:
        return None
    sync_dynamic_signatures(state)

    for rule in TOOL_NAME_RULES:
        if not tool_name.startswith(rule.prefix):
            continue
        action = tool_name[len(rule.prefix):]
        signature_id = rule.signature_id
        for keyword, keyword_signature in rule.keywords:
            if keyword in action:
                signature_id = keyword_signature
                break
        descriptor = state.signatures.get(rule.family, signature_id)
        if descriptor is not None:
            return descriptor

    descriptor = _match_capability_suffixes(state, tool_name)
    if descriptor is not None:
        return descriptor

    return _match_dynamic_prefix(state, tool_name)


def _match_capability_suffixes(
    state: RegistryState, tool_name: str
) -> Optional[TemplateDescriptor]:
    """Map a foreign prefix onto a known family whose action suffixes it exposes.

    The tool's own suffix must belong to the family, and the suffixes
    declared under the tool's prefix must overlap the family's suffixes in
    at least suffix_min_match() places (capped at the family size). The
    largest overlap wins; ties go to the earlier family.
    """
    generated = state.artifacts.list_executor_names()
    if not is_tool_declared(state.reader, tool_name) and tool_name not in generated:
        return None

    min_match = suffix_min_match()

    best: Optional[TemplateDescriptor] = None
    best_overlap = 0
    for family in state.families.list_all():
        matches = [s for s in family.action_suffixes if s and tool_name.endswith(f"_{s}")]
        if not matches:
            continue
        suffix = max(matches, key=len)
        prefix = tool_name[: len(tool_name) - len(suffix)]

        observed = set(observed_suffixes(state.reader, prefix))
        observed.update(n[len(prefix):] for n in generated if n.startswith(prefix))
        observed.add(suffix)

        overlap = len(observed & set(family.action_suffixes))
        if overlap < min(min_match, len(family.action_suffixes)):
            continue
        descriptor = state.signatures.get(family.family, family.signature_id)
        if descriptor is None:
            continue
        if overlap > best_overlap:
            best, best_overlap = descriptor, overlap

    if best is not None:
        logger.debug(
            f"Capability-suffix match: {tool_name} -> {best.family}/{best.signature_id}"
        )
    return best


def _match_dynamic_prefix(state: RegistryState, tool_name: str) -> Optional[TemplateDescriptor]:
    """Longest discovered prefix that tool_name starts with."""
    matching = [p for p in state.dynamic_prefixes if tool_name.startswith(p)]
    if not matching:
        return None
    family, signature_id = state.dynamic_prefixes[max(matching, key=len)]
    return state.signatures.get(family, signature_id)


# -- By data shape --


def _list_of_named(value: Any) -> bool:
    return (
        isinstance(value, list)
        and len(value) > 0
        and all(isinstance(item, dict) and "name" in item for item in value)
    )


def _has_list(payload: dict, *fields: str) -> bool:
    return any(isinstance(payload.get(f), list) for f in fields)


def _is_filesystem(payload: dict) -> bool:
    return any(_list_of_named(payload.get(f)) for f in FILESYSTEM_ARRAY_FIELDS)


def _is_ranked_list(payload: dict) -> bool:
    return _has_list(payload, *RANKED_ARRAY_FIELDS)


def _is_bare_ticker(payload: dict) -> bool:
    return "ticker" in payload and not _has_list(payload, *RANKED_ARRAY_FIELDS)


def _is_regime(payload: dict) -> bool:
    return "regime" in payload or "regimeConfidence" in payload


def _is_routine_report(payload: dict) -> bool:
    return _has_list(payload, "steps") and ("status" in payload or "routine" in payload)


def _is_table(payload: dict) -> bool:
    return _has_list(payload, "rows") and _has_list(payload, "columns")


def _is_run_inspector(payload: dict) -> bool:
    return _has_list(payload, "steps") and ("logs" in payload or "failure" in payload)


def _is_media(payload: dict) -> bool:
    return _has_list(payload, *MEDIA_ARRAY_FIELDS) or "mediaUrl" in payload


def _is_workspace(payload: dict) -> bool:
    return (
        _has_list(payload, "repos", "extensionStats", "folderStats")
        or ("found" in payload and "missing" in payload)
    )


def _is_travel(payload: dict) -> bool:
    return (
        _has_list(payload, "itinerary")
        or "optimizedPlan" in payload
        or ("categories" in payload and "totalBudget" in payload)
    )


def _is_meal(payload: dict) -> bool:
    return (
        _has_list(payload, "mealPlan", "groceryGroups")
        or ("replacement" in payload and "mealType" in payload)
    )


def _is_skill_store(payload: dict) -> bool:
    return _has_list(payload, "skills") or "installedSlugs" in payload


def _is_plugin_catalog(payload: dict) -> bool:
    return _has_list(payload, "plugins")


def _is_research(payload: dict) -> bool:
    return _has_list(payload, "keyFindings")


def _is_city(payload: dict) -> bool:
    return _has_list(payload, "places", "recentCities")


def _is_browser(payload: dict) -> bool:
    return "screenshot" in payload and "url" in payload


def _is_tool_console(payload: dict) -> bool:
    return _has_list(payload, "families")


SHAPE_RULES: tuple[tuple[Callable[[dict], bool], str, str], ...] = (
    (_is_filesystem, "filesystem", "directory_listing"),
    (lambda p: "single_ticker_data" in p, "alpharank", "ticker_detail"),
    (_is_ranked_list, "alpharank", "ranked_predictions_table"),
    (_is_bare_ticker, "alpharank", "ticker_detail"),
    (_is_regime, "alpharank", "market_regime_snapshot"),
    (_is_routine_report, "alpharank", "routine_execution_report"),
    (_is_table, "data_explorer", "table_explorer"),
    (_is_run_inspector, "tool_inspector", "tool_run_summary"),
    (_is_media, "multimedia", "media_gallery"),
    (_is_workspace, "code_workspace", "workspace_inventory"),
    (_is_travel, "travel_planner", "itinerary_board"),
    (_is_meal, "meal_planner", "weekly_meal_plan"),
    (_is_skill_store, "clawhub", "clawhub_store"),
    (_is_plugin_catalog, "plugin_discovery", "plugin_catalog_list"),
    (_is_research, "researcher", "research_board"),
    (_is_city, "city_research", "city_research_board"),
    (_is_browser, "browser", "remote_browser"),
    (_is_tool_console, "enso_tooling", "tool_console"),
)


def by_data_shape(state: RegistryState, payload: Any) -> Optional[TemplateDescriptor]:
    """Select a descriptor from the payload structure alone."""
    sync_dynamic_signatures(state)

    if _list_of_named(payload):
        return state.signatures.get("filesystem", "directory_listing")
    if not isinstance(payload, dict):
        return None

    for predicate, family, signature_id in SHAPE_RULES:
        if not predicate(payload):
            continue
        descriptor = state.signatures.get(family, signature_id)
        if descriptor is not None:
            return descriptor

    for hint in state.signatures.list_hints():
        if all(key in payload for key in hint.required_keys):
            descriptor = state.signatures.get(hint.family, hint.signature_id)
            if descriptor is not None:
                return descriptor

    return None


# -- Combined --


def infer(
    state: RegistryState,
    tool_name: Optional[str] = None,
    data: Any = None,
) -> Optional[TemplateDescriptor]:
    """Combine both classifiers.

    The tool name decides the family. Within that family the payload shape
    may pick a different signature (e.g. a detail view instead of a list).
    Without a tool-name match the shape decides alone.
    """
    from_tool = by_tool_name(state, tool_name) if tool_name else None

    if from_tool is not None and data is not None:
        from_data = by_data_shape(state, data)
        if (
            from_data is not None
            and from_data.family == from_tool.family
            and from_data.signature_id != from_tool.signature_id
        ):
            logger.debug(
                f"Shape refined {from_tool.signature_id} -> {from_data.signature_id} "
                f"for {tool_name}"
            )
            return from_data

    if from_tool is not None:
        return from_tool
    if data is not None:
        return by_data_shape(state, data)
    return None
