"""
Capability catalog tests.

Covers:
  - Prefix derivation from declared tool names
  - Observed action suffixes under a prefix
  - Tool metadata listing (dedupe, prefix filter, broken factories skipped)
  - Capability-suffix family catalog (built-ins, runtime additions)
"""

from signature_router.catalog.families import CapabilityFamilyCatalog
from signature_router.catalog.reader import (
    StaticCatalogReader,
    capability_prefix,
    list_tool_metadata,
    observed_suffixes,
    prefix_for_tool,
)
from signature_router.catalog.schemas import CapabilityEntry, CapabilityFamily

from tests._fakes import FakeTool, catalog_entry, mail_entry


# ---------------------------------------------------------------------------
# Prefix derivation
# ---------------------------------------------------------------------------

class TestCapabilityPrefix:
    def test_single_name_cut_at_last_underscore(self):
        assert capability_prefix("cap", ["foo_bar_baz"]) == "foo_bar_"

    def test_no_names_falls_back_to_capability_id(self):
        assert capability_prefix("cap", []) == "cap_"

    def test_single_name_without_underscore(self):
        assert capability_prefix("cap", ["foo"]) == "cap_"

    def test_common_prefix_of_several_names(self):
        names = ["official_mail_list_threads", "official_mail_read_thread"]
        assert capability_prefix("official_mail", names) == "official_mail_"

    def test_common_prefix_trimmed_back_to_underscore(self):
        assert capability_prefix("cap", ["acme_list_a", "acme_lookup_b"]) == "acme_"

    def test_disjoint_names_fall_back(self):
        assert capability_prefix("cap", ["abc_one", "xyz_two"]) == "cap_"

    def test_prefix_for_tool(self):
        reader = StaticCatalogReader([mail_entry()])
        assert prefix_for_tool(reader, "official_mail_read_thread") == "official_mail_"
        assert prefix_for_tool(reader, "unknown_tool") is None


class TestObservedSuffixes:
    def test_distinct_in_declaration_order(self):
        reader = StaticCatalogReader([
            mail_entry(),
            catalog_entry("mail_copy", [FakeTool("official_mail_read_thread")]),
        ])
        assert observed_suffixes(reader, "official_mail_") == [
            "list_threads",
            "read_thread",
            "archive_thread",
        ]

    def test_bare_prefix_name_ignored(self):
        reader = StaticCatalogReader([catalog_entry("x", [FakeTool("x_"), FakeTool("x_run")])])
        assert observed_suffixes(reader, "x_") == ["run"]


# ---------------------------------------------------------------------------
# Tool metadata
# ---------------------------------------------------------------------------

class TestToolMetadata:
    def test_lists_declared_tools(self):
        reader = StaticCatalogReader([mail_entry()])
        names = [t.name for t in list_tool_metadata(reader)]
        assert names == [
            "official_mail_list_threads",
            "official_mail_read_thread",
            "official_mail_archive_thread",
        ]

    def test_metadata_fields(self):
        reader = StaticCatalogReader([mail_entry()])
        read = [t for t in list_tool_metadata(reader) if t.name == "official_mail_read_thread"][0]
        assert read.capability_id == "official_mail"
        assert read.description.startswith("Read a thread")
        assert read.parameters["required"] == ["id"]

    def test_dedupes_by_name(self):
        reader = StaticCatalogReader([
            catalog_entry("a", [FakeTool("shared_tool")]),
            catalog_entry("b", [FakeTool("shared_tool")]),
        ])
        tools = list_tool_metadata(reader)
        assert len(tools) == 1
        assert tools[0].capability_id == "a"

    def test_prefix_filter(self):
        reader = StaticCatalogReader([
            mail_entry(),
            catalog_entry("weather", [FakeTool("weather_forecast")]),
        ])
        assert [t.name for t in list_tool_metadata(reader, prefix="weather_")] == ["weather_forecast"]

    def test_broken_factory_skipped(self):
        def explode(ctx):
            raise RuntimeError("factory failed")

        reader = StaticCatalogReader([
            CapabilityEntry(capability_id="broken", factory=explode, declared_names=["broken_tool"]),
            catalog_entry("weather", [FakeTool("weather_forecast")]),
        ])
        assert [t.name for t in list_tool_metadata(reader)] == ["weather_forecast"]

    def test_single_object_factory(self):
        tool = FakeTool("solo_tool")
        reader = StaticCatalogReader([
            CapabilityEntry(capability_id="solo", factory=lambda ctx: tool, declared_names=["solo_tool"]),
        ])
        assert [t.name for t in list_tool_metadata(reader)] == ["solo_tool"]


class TestStaticCatalogReader:
    def test_add_and_remove(self):
        reader = StaticCatalogReader()
        reader.add(mail_entry())
        reader.add(mail_entry())
        assert len(reader.entries()) == 2
        assert reader.remove("official_mail") == 2
        assert reader.entries() == []


# ---------------------------------------------------------------------------
# Capability families
# ---------------------------------------------------------------------------

class TestCapabilityFamilyCatalog:
    def setup_method(self):
        self.catalog = CapabilityFamilyCatalog()

    def test_builtin_families_loaded(self):
        families = [f.family for f in self.catalog.list_all()]
        assert families[0] == "alpharank"
        assert "filesystem" in families
        assert self.catalog.get("filesystem").signature_id == "directory_listing"
        assert self.catalog.dynamic() == []

    def test_add_runtime_family(self):
        family = CapabilityFamily(
            family="workout_planner",
            action_suffixes=["plan_week", "swap_exercise"],
            signature_id="weekly_workout_plan",
        )
        assert self.catalog.add(family) is True
        assert self.catalog.add(family) is False
        assert [f.family for f in self.catalog.dynamic()] == ["workout_planner"]
        assert self.catalog.list_all()[-1].family == "workout_planner"

    def test_remove(self):
        count = self.catalog.count
        assert self.catalog.remove("meal_planner") is True
        assert self.catalog.remove("meal_planner") is False
        assert self.catalog.count == count - 1
