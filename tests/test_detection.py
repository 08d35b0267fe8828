"""
Detection engine tests.

Covers:
  - Tool-name rules with keyword sub-signatures
  - Capability-suffix fallback for foreign prefixes
  - Data-shape predicates and runtime data hints
  - infer(): same-family refinement and precedence
  - Totality over odd inputs
"""

import pytest

from signature_router.detection.engine import (
    DEFAULT_SUFFIX_MIN_MATCH,
    SUFFIX_MIN_MATCH_ENV,
    by_data_shape,
    by_tool_name,
    infer,
    suffix_min_match,
)
from signature_router.signatures.schemas import RuntimeDataHint, TemplateDescriptor

from tests._fakes import FakeTool, catalog_entry, mail_entry, make_state


def _ids(descriptor):
    return None if descriptor is None else (descriptor.family, descriptor.signature_id)


# ---------------------------------------------------------------------------
# By tool name
# ---------------------------------------------------------------------------

class TestByToolName:
    def setup_method(self):
        self.state = make_state()

    @pytest.mark.parametrize(
        "tool_name,expected",
        [
            ("alpharank_latest_predictions", ("alpharank", "ranked_predictions_table")),
            ("alpharank_market_regime", ("alpharank", "market_regime_snapshot")),
            ("alpharank_run_daily_routine", ("alpharank", "routine_execution_report")),
            ("alpharank_portfolio_checkin", ("alpharank", "portfolio_health")),
            ("alpharank_ticker_lookup", ("alpharank", "ticker_detail")),
            ("enso_fs_list_directory", ("filesystem", "directory_listing")),
            ("enso_media_scan_library", ("multimedia", "media_gallery")),
            ("enso_ws_list_repos", ("code_workspace", "workspace_inventory")),
            ("enso_travel_plan_trip", ("travel_planner", "itinerary_board")),
            ("enso_meal_plan_week", ("meal_planner", "weekly_meal_plan")),
            ("enso_plugins_search_plugins", ("plugin_discovery", "plugin_catalog_list")),
            ("enso_tooling_overview", ("enso_tooling", "tool_console")),
        ],
    )
    def test_rules(self, tool_name, expected):
        assert _ids(by_tool_name(self.state, tool_name)) == expected

    @pytest.mark.parametrize("tool_name", [None, "", "weather_forecast", 42])
    def test_unmatched(self, tool_name):
        assert by_tool_name(self.state, tool_name) is None


class TestCapabilitySuffixFallback:
    def test_foreign_prefix_with_family_suffixes(self):
        state = make_state(catalog_entry("acme_files", [
            FakeTool("acme_list_directory"),
            FakeTool("acme_read_text_file"),
            FakeTool("acme_stat_path"),
        ]))
        assert _ids(by_tool_name(state, "acme_read_text_file")) == ("filesystem", "directory_listing")

    def test_single_overlap_not_enough(self):
        state = make_state(catalog_entry("solo", [FakeTool("solo_plan_trip")]))
        descriptor = by_tool_name(state, "solo_plan_trip")
        assert descriptor is not None
        assert descriptor.family != "travel_planner"

    def test_raised_threshold_from_environment(self, monkeypatch):
        state = make_state(catalog_entry("acme_files", [
            FakeTool("acme_list_directory"),
            FakeTool("acme_read_text_file"),
            FakeTool("acme_stat_path"),
        ]))
        monkeypatch.setenv(SUFFIX_MIN_MATCH_ENV, "4")
        assert by_tool_name(state, "acme_read_text_file").family == "system_acme_files"
        monkeypatch.setenv(SUFFIX_MIN_MATCH_ENV, "3")
        assert by_tool_name(state, "acme_read_text_file").family == "filesystem"

    def test_invalid_threshold_uses_default(self, monkeypatch):
        monkeypatch.setenv(SUFFIX_MIN_MATCH_ENV, "many")
        assert suffix_min_match() == DEFAULT_SUFFIX_MIN_MATCH
        monkeypatch.delenv(SUFFIX_MIN_MATCH_ENV)
        assert suffix_min_match() == DEFAULT_SUFFIX_MIN_MATCH

    def test_undeclared_tool_ignored(self):
        state = make_state()
        assert by_tool_name(state, "acme_list_directory") is None


class TestDynamicPrefixes:
    def test_discovered_family(self):
        state = make_state(mail_entry())
        descriptor = by_tool_name(state, "official_mail_read_thread")
        assert _ids(descriptor) == ("system_official_mail", "system_auto_official_mail")
        assert descriptor.template_id == "system-auto-official-mail-v1"
        assert "read_thread" in descriptor.supported_actions

    def test_longest_discovered_prefix_wins(self):
        state = make_state(
            catalog_entry("weather", [FakeTool("weather_forecast"), FakeTool("weather_alerts")]),
            catalog_entry("weather_pro", [FakeTool("weather_pro_radar"), FakeTool("weather_pro_maps")]),
        )
        assert by_tool_name(state, "weather_pro_radar").signature_id == "system_auto_weather_pro"
        assert by_tool_name(state, "weather_forecast").signature_id == "system_auto_weather"


# ---------------------------------------------------------------------------
# By data shape
# ---------------------------------------------------------------------------

class TestByDataShape:
    def setup_method(self):
        self.state = make_state()

    @pytest.mark.parametrize(
        "payload,expected",
        [
            ({"items": [{"name": "a.txt", "type": "file"}]}, ("filesystem", "directory_listing")),
            ({"files": [{"name": "b.md"}]}, ("filesystem", "directory_listing")),
            ([{"name": "c.py"}], ("filesystem", "directory_listing")),
            ({"single_ticker_data": {"ticker": "AAPL"}}, ("alpharank", "ticker_detail")),
            ({"picks": [{"ticker": "AAPL"}]}, ("alpharank", "ranked_predictions_table")),
            ({"ticker": "AAPL", "factors": []}, ("alpharank", "ticker_detail")),
            ({"regime": "bull", "regimeConfidence": 0.8}, ("alpharank", "market_regime_snapshot")),
            ({"steps": [], "status": "ok"}, ("alpharank", "routine_execution_report")),
            ({"rows": [], "columns": []}, ("data_explorer", "table_explorer")),
            ({"steps": [], "logs": []}, ("tool_inspector", "tool_run_summary")),
            ({"mediaItems": [{"id": 1}]}, ("multimedia", "media_gallery")),
            ({"repos": []}, ("code_workspace", "workspace_inventory")),
            ({"itinerary": []}, ("travel_planner", "itinerary_board")),
            ({"mealPlan": []}, ("meal_planner", "weekly_meal_plan")),
            ({"skills": []}, ("clawhub", "clawhub_store")),
            ({"plugins": [{"name": "x"}]}, ("plugin_discovery", "plugin_catalog_list")),
            ({"keyFindings": []}, ("researcher", "research_board")),
            ({"places": []}, ("city_research", "city_research_board")),
            ({"screenshot": "b64", "url": "https://example.com"}, ("browser", "remote_browser")),
            ({"families": []}, ("enso_tooling", "tool_console")),
        ],
    )
    def test_shapes(self, payload, expected):
        assert _ids(by_data_shape(self.state, payload)) == expected

    @pytest.mark.parametrize(
        "payload",
        [None, 3, "text", [], [1, 2], {}, {"items": "x"}, {"items": [{"id": 1}]}, {"a": {"b": [None]}}],
    )
    def test_total_over_odd_inputs(self, payload):
        assert by_data_shape(self.state, payload) is None


class TestRuntimeHints:
    def setup_method(self):
        self.state = make_state()
        for signature_id in ("weekly_workout_plan", "workout_log"):
            self.state.signatures.register(TemplateDescriptor(
                family="workout_planner",
                signature_id=signature_id,
                template_id=f"generated-{signature_id}-v1",
            ))

    def test_hint_matches_when_all_keys_present(self):
        self.state.signatures.register_hint(RuntimeDataHint(
            family="workout_planner", signature_id="weekly_workout_plan", required_keys=["workouts", "week"],
        ))
        assert _ids(by_data_shape(self.state, {"workouts": [], "week": 1})) == (
            "workout_planner", "weekly_workout_plan",
        )
        assert by_data_shape(self.state, {"workouts": []}) is None

    def test_first_registered_hint_wins(self):
        self.state.signatures.register_hint(RuntimeDataHint(
            family="workout_planner", signature_id="workout_log", required_keys=["workouts"],
        ))
        self.state.signatures.register_hint(RuntimeDataHint(
            family="workout_planner", signature_id="weekly_workout_plan", required_keys=["workouts"],
        ))
        assert by_data_shape(self.state, {"workouts": []}).signature_id == "workout_log"

    def test_builtin_shapes_checked_before_hints(self):
        self.state.signatures.register_hint(RuntimeDataHint(
            family="workout_planner", signature_id="workout_log", required_keys=["plugins"],
        ))
        assert by_data_shape(self.state, {"plugins": []}).signature_id == "plugin_catalog_list"


class TestDeterminism:
    def test_repeated_calls_agree(self):
        state = make_state(mail_entry())
        payload = {"regime": "bull", "regimeConfidence": 0.8}
        first = (by_tool_name(state, "official_mail_read_thread"), by_data_shape(state, payload))
        second = (by_tool_name(state, "official_mail_read_thread"), by_data_shape(state, payload))
        assert first == second
        assert _ids(first[1]) == ("alpharank", "market_regime_snapshot")


# ---------------------------------------------------------------------------
# infer
# ---------------------------------------------------------------------------

class TestInfer:
    def setup_method(self):
        self.state = make_state()

    def test_shape_refines_within_family(self):
        descriptor = infer(
            self.state, "alpharank_latest_predictions", {"ticker": "AAPL", "factors": []}
        )
        assert _ids(descriptor) == ("alpharank", "ticker_detail")

    def test_tool_name_wins_across_families(self):
        descriptor = infer(self.state, "enso_fs_list_directory", {"regime": "bull"})
        assert _ids(descriptor) == ("filesystem", "directory_listing")

    def test_shape_alone(self):
        descriptor = infer(self.state, None, {"items": [{"name": "a.txt"}]})
        assert _ids(descriptor) == ("filesystem", "directory_listing")

    def test_unknown_tool_falls_back_to_shape(self):
        descriptor = infer(self.state, "weather_forecast", {"plugins": []})
        assert _ids(descriptor) == ("plugin_discovery", "plugin_catalog_list")

    def test_nothing_matches(self):
        assert infer(self.state, "weather_forecast", {"temp": 20}) is None
        assert infer(self.state) is None
