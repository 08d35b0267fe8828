"""Payload normalizer — reshapes raw tool output into a template's field layout.

Every template reads ``rows`` plus a few signature-specific secondary
fields (groups, categories, columns, logs). Raw payloads name these in
many ways, so each signature lists candidate raw fields in priority order;
the first list found wins and an empty list is the fallback. A default
``title`` is supplied when the payload has none. All other raw fields are
kept untouched.

normalize() never raises, and normalize(d, normalize(d, x)) equals
normalize(d, x): the canonical fields always come first in every
candidate list.
"""

import logging
from typing import Any, NamedTuple

from signature_router.discovery.dynamic import is_system_auto
from signature_router.signatures.schemas import TemplateDescriptor

logger = logging.getLogger(__name__)


class Layout(NamedTuple):
    title: str
    rows: tuple[str, ...] = ("rows",)
    # canonical field -> raw candidates (canonical name first)
    secondary: tuple[tuple[str, tuple[str, ...]], ...] = ()


LAYOUTS: dict[str, Layout] = {
    "ranked_predictions_table": Layout(
        "Top Predictions", ("rows", "picks", "top_picks", "predictions")
    ),
    "ticker_detail": Layout("Ticker Detail", ("rows", "factors")),
    "market_regime_snapshot": Layout("Market Regime", ("rows", "guidance", "signals")),
    "routine_execution_report": Layout("Daily Routine", ("rows", "steps")),
    "portfolio_health": Layout("Portfolio Health", ("rows", "holdings", "positions")),
    "directory_listing": Layout("Files", ("rows", "items", "files", "entries", "matches")),
    "media_gallery": Layout(
        "Media Library",
        ("rows", "items", "photos", "media", "mediaFiles", "mediaItems"),
        (("groups", ("groups",)),),
    ),
    "workspace_inventory": Layout("Workspace", ("rows", "repos", "found")),
    "itinerary_board": Layout(
        "Trip Plan", ("rows", "itinerary"), (("categories", ("categories",)),)
    ),
    "weekly_meal_plan": Layout(
        "Meal Plan", ("rows", "mealPlan"), (("groups", ("groups", "groceryGroups")),)
    ),
    "clawhub_store": Layout("Skill Store", ("rows", "skills", "results")),
    "plugin_catalog_list": Layout("Plugins", ("rows", "plugins")),
    "research_board": Layout(
        "Research", ("rows", "sources"), (("sections", ("sections",)),)
    ),
    "city_research_board": Layout(
        "City Guide", ("rows", "places"), (("sections", ("sections",)),)
    ),
    "remote_browser": Layout("Browser", ("rows", "bookmarks")),
    "tool_console": Layout("Tool Console", ("rows", "families")),
    "tool_run_summary": Layout("Tool Run", ("rows", "steps"), (("logs", ("logs",)),)),
    "table_explorer": Layout("Data Table", ("rows", "records", "items")),
    "smart_text_card": Layout("Summary", ("rows",), (("sections", ("sections",)),)),
}

SYSTEM_AUTO_ROWS = ("rows", "items", "results", "records")
GENERIC_ROWS = ("rows", "items", "results", "records", "data")


def _first_list(raw: dict, candidates: tuple[str, ...]) -> list:
    for field in candidates:
        value = raw.get(field)
        if isinstance(value, list):
            return list(value)
    return []


def _default_title(descriptor: TemplateDescriptor) -> str:
    if is_system_auto(descriptor):
        stem = descriptor.family.removeprefix("system_")
    else:
        stem = descriptor.signature_id
    return stem.replace("_", " ").strip().title() or "Result"


def _as_mapping(raw: Any) -> dict:
    if isinstance(raw, dict):
        return dict(raw)
    if isinstance(raw, list):
        return {"rows": list(raw)}
    if raw is None:
        return {}
    return {"value": raw}


def normalize(descriptor: TemplateDescriptor, raw: Any) -> dict[str, Any]:
    """Canonical payload for the descriptor's template."""
    payload = _as_mapping(raw)
    layout = LAYOUTS.get(descriptor.signature_id)

    if layout is not None:
        rows_fields = layout.rows
        title = layout.title
        secondary = layout.secondary
    elif is_system_auto(descriptor):
        rows_fields = SYSTEM_AUTO_ROWS
        title = _default_title(descriptor)
        secondary = ()
    else:
        rows_fields = GENERIC_ROWS
        title = _default_title(descriptor)
        secondary = ()

    payload["rows"] = _first_list(payload, rows_fields)
    for canonical, candidates in secondary:
        payload[canonical] = _first_list(payload, candidates)

    if descriptor.signature_id == "table_explorer":
        payload["columns"] = _columns(payload)
    elif descriptor.signature_id == "plugin_catalog_list":
        payload["totalPlugins"] = len(payload["rows"])

    existing_title = payload.get("title")
    if not isinstance(existing_title, str) or not existing_title.strip():
        payload["title"] = title

    return payload


def _columns(payload: dict) -> list:
    columns = payload.get("columns")
    if isinstance(columns, list):
        return list(columns)
    rows = payload["rows"]
    if rows and isinstance(rows[0], dict):
        return list(rows[0].keys())
    return []
