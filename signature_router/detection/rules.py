"""Hand-written tool-name rules.

Rules are evaluated in order. A rule matches when the tool name starts with
its prefix; keyword fragments appearing after the prefix then select a
sub-signature, otherwise the rule's default signature applies.
"""

from typing import NamedTuple


class ToolNameRule(NamedTuple):
    prefix: str
    family: str
    signature_id: str
    keywords: tuple[tuple[str, str], ...] = ()


TOOL_NAME_RULES: tuple[ToolNameRule, ...] = (
    ToolNameRule(
        "alpharank_",
        "alpharank",
        "ranked_predictions_table",
        (
            ("regime", "market_regime_snapshot"),
            ("routine", "routine_execution_report"),
            ("portfolio", "portfolio_health"),
            ("ticker", "ticker_detail"),
        ),
    ),
    ToolNameRule("enso_fs_", "filesystem", "directory_listing"),
    ToolNameRule("enso_media_", "multimedia", "media_gallery"),
    ToolNameRule("enso_ws_", "code_workspace", "workspace_inventory"),
    ToolNameRule("enso_travel_", "travel_planner", "itinerary_board"),
    ToolNameRule("enso_meal_", "meal_planner", "weekly_meal_plan"),
    ToolNameRule("enso_clawhub_", "clawhub", "clawhub_store"),
    ToolNameRule("enso_plugins_", "plugin_discovery", "plugin_catalog_list"),
    ToolNameRule("enso_researcher_", "researcher", "research_board"),
    ToolNameRule("enso_city_", "city_research", "city_research_board"),
    ToolNameRule("enso_browser_", "browser", "remote_browser"),
    ToolNameRule("enso_tooling_", "enso_tooling", "tool_console"),
)

# Prefixes dynamic discovery must never claim.
KNOWN_PREFIXES: frozenset[str] = frozenset(rule.prefix for rule in TOOL_NAME_RULES)
