"""
Block plugin tests

Pure unit tests: row helpers, plugin configuration, cleaning, validation
and render contexts. No database is involved.
"""

from __future__ import annotations

import dataclasses
import json

import pytest

from sitewidgets.blocks.base import BlockMeta, BlockPlugin, SettingField
from sitewidgets.blocks.executives import ExecutivesBlock
from sitewidgets.blocks.insights_search import SEARCH_ENDPOINT, InsightsSearchBlock
from sitewidgets.blocks.investment_cards import MAX_CARDS, InvestmentCardsBlock
from sitewidgets.blocks.map_pins import MapPinsBlock
from sitewidgets.blocks.registry import BlockRegistry, register_builtin_blocks
from sitewidgets.blocks.rows import FieldSpec, drop_flagged, is_flagged, overlay_rows, strip_flags, to_coordinate, to_fid
from sitewidgets.blocks.video_callout import VideoCalloutBlock

# ══════════════════════════════════════════════════════════════════════════════
# 1. Row helpers
# ══════════════════════════════════════════════════════════════════════════════


class TestRowHelpers:
    def test_overlay_matches_by_index(self):
        working = [{"city": "Lima", "x": 0.1}, {"city": "Quito", "x": 0.2}]
        merged = overlay_rows(working, [{"city": "Bogota"}])
        assert merged == [{"city": "Bogota", "x": 0.1}, {"city": "Quito", "x": 0.2}]

    def test_overlay_appends_extra_submitted_rows(self):
        merged = overlay_rows([{"city": "Lima"}], [{}, {"city": "Quito"}])
        assert merged == [{"city": "Lima"}, {"city": "Quito"}]

    def test_overlay_without_submission_copies(self):
        working = [{"city": "Lima"}]
        merged = overlay_rows(working, None)
        merged[0]["city"] = "Cusco"
        assert working[0]["city"] == "Lima"

    @pytest.mark.parametrize("value,expected", [("1", True), ("on", True), ("", False), ("0", False), (None, False)])
    def test_is_flagged(self, value, expected):
        assert is_flagged(value) is expected

    def test_drop_flagged(self):
        rows = [{"city": "A", "remove": "1"}, {"city": "B"}, {"city": "C", "remove": ""}]
        assert [r["city"] for r in drop_flagged(rows)] == ["B", "C"]

    def test_strip_flags(self):
        rows = [{"city": "A", "remove": "1"}, {"city": "B"}]
        assert strip_flags(rows) == [{"city": "A"}, {"city": "B"}]
        assert rows[0]["remove"] == "1"

    def test_unknown_field_kind(self):
        with pytest.raises(ValueError):
            FieldSpec("city", "City", kind="color")

    def test_unknown_setting_kind(self):
        with pytest.raises(ValueError):
            SettingField("map_src", "Map image", kind="file")

    @pytest.mark.parametrize(
        "value,expected",
        [("0.25", 0.25), (1.7, 1.0), (-3, 0.0), ("abc", None), (None, None), (float("nan"), None), (True, None)],
    )
    def test_to_coordinate(self, value, expected):
        assert to_coordinate(value) == expected

    @pytest.mark.parametrize("value,expected", [("42", 42), (7, 7), ("", None), (0, None), ("x", None)])
    def test_to_fid(self, value, expected):
        assert to_fid(value) == expected


# ══════════════════════════════════════════════════════════════════════════════
# 2. Registry and base class
# ══════════════════════════════════════════════════════════════════════════════


class TestBlockRegistry:
    def test_builtin_blocks_registered(self):
        registry = register_builtin_blocks(BlockRegistry())
        ids = {plugin.meta.plugin_id for plugin in registry.all_plugins()}
        assert ids == {"executives", "map_pins", "investment_cards", "video_callout", "insights_search"}

    def test_unknown_plugin(self):
        registry = BlockRegistry()
        assert registry.get("missing") is None
        assert registry.is_registered("missing") is False

    def test_blockmeta_is_dataclass(self):
        assert dataclasses.is_dataclass(BlockMeta)
        assert BlockMeta(plugin_id="x", label="X").category == "Site widgets"

    def test_blockplugin_is_abstract(self):
        with pytest.raises(TypeError):
            BlockPlugin()


class TestConfiguration:
    def test_stored_values_override_defaults(self):
        config = MapPinsBlock().configuration({"map_alt": "Americas"})
        assert config["map_alt"] == "Americas"
        assert config["map_src"] == "/static/images/places-map.png"
        assert config["pins"] == []

    def test_defaults_are_not_shared(self):
        plugin = ExecutivesBlock()
        plugin.configuration(None)["executives"].append({"name": "x"})
        assert plugin.configuration(None)["executives"] == []

    def test_submit_replaces_collection(self):
        plugin = MapPinsBlock()
        config = plugin.submit({"pins": [{"city": "old"}]}, {"map_src": "/m.png", "map_alt": ""}, [{"city": "new"}])
        assert config["pins"] == [{"city": "new"}]
        assert config["map_src"] == "/m.png"


# ══════════════════════════════════════════════════════════════════════════════
# 3. Map pins
# ══════════════════════════════════════════════════════════════════════════════


class TestMapPins:
    def test_clean_row_clamps_and_defaults_aria(self):
        clean = MapPinsBlock().clean_row({"city": " Lima ", "x": "1.4", "y": "0.3", "txt": "Office"})
        assert clean == {"city": "Lima", "x": 1.0, "y": 0.3, "txt": "Office", "aria": "Lima"}

    def test_non_numeric_coordinate_drops_row(self):
        assert MapPinsBlock().clean_row({"city": "Lima", "x": "left", "y": "0.3"}) is None

    def test_row_without_city_dropped(self):
        assert MapPinsBlock().clean_row({"city": "", "x": 0.1, "y": 0.1}) is None

    def test_default_row_is_centered(self):
        assert MapPinsBlock().default_row() == {"city": "", "x": 0.5, "y": 0.5, "txt": "", "aria": ""}

    def test_map_source_required(self):
        plugin = MapPinsBlock()
        settings = plugin.clean_settings({"map_src": "javascript:alert(1)", "map_alt": ""})
        assert settings["map_src"] == ""
        assert "map_src" in plugin.validate(settings, [])

    def test_build_skips_invalid_pins(self):
        context = MapPinsBlock().build({"pins": [{"city": "Lima", "x": 0.2, "y": 0.4}, {"city": "", "x": 0, "y": 0}]})
        assert [pin["city"] for pin in context["pins"]] == ["Lima"]


# ══════════════════════════════════════════════════════════════════════════════
# 4. Executives
# ══════════════════════════════════════════════════════════════════════════════


class TestExecutives:
    def test_cv_is_filtered(self):
        clean = ExecutivesBlock().clean_row(
            {"name": "Ana", "cv_html": "<p>Career</p><script>x()</script>", "linkedin": "javascript:x()"}
        )
        assert clean["cv_html"].startswith("<p>Career</p>")
        assert "<script>" not in clean["cv_html"]
        assert clean["linkedin"] == ""

    def test_build_defaults_section_id(self):
        context = ExecutivesBlock().build({"section_id": "", "executives": [{"name": "Ana", "photo_fid": 3}]})
        assert context["section_id"] == "principal-executives"
        assert "photo_fid" not in context["executives"][0]


# ══════════════════════════════════════════════════════════════════════════════
# 5. Investment cards
# ══════════════════════════════════════════════════════════════════════════════


class TestInvestmentCards:
    def test_row_cap(self):
        assert InvestmentCardsBlock.row_spec.max_rows == MAX_CARDS == 12

    def test_legacy_json_rows_are_upgraded(self):
        legacy = json.dumps([{"title": "Funds", "text": "Mutual funds"}, "garbage"])
        rows = InvestmentCardsBlock().collection_rows({"cards": [], "cards_json": legacy})
        assert rows == [{"title": "Funds", "header": "Funds", "text": "Mutual funds", "url": "#"}]

    def test_malformed_legacy_json_is_ignored(self):
        assert InvestmentCardsBlock().collection_rows({"cards_json": "{not json"}) == []

    def test_stored_rows_win_over_legacy(self):
        rows = InvestmentCardsBlock().collection_rows(
            {"cards": [{"header": "New"}], "cards_json": json.dumps([{"header": "Old"}])}
        )
        assert rows == [{"header": "New"}]

    def test_submit_drops_legacy_copy(self):
        config = InvestmentCardsBlock().submit({"cards_json": "[]"}, {}, [])
        assert "cards_json" not in config

    def test_empty_url_falls_back_to_hash(self):
        assert InvestmentCardsBlock().clean_row({"header": "Funds", "url": ""})["url"] == "#"


# ══════════════════════════════════════════════════════════════════════════════
# 6. Video callout and insights search
# ══════════════════════════════════════════════════════════════════════════════


class TestVideoCallout:
    def _settings(self, **overrides):
        values = {"title_html": "<strong>Watch</strong>", "video_url": "https://youtu.be/dQw4w9WgXcQ"}
        values.update(overrides)
        return VideoCalloutBlock().clean_settings(values)

    def test_valid_settings(self):
        settings = self._settings()
        assert VideoCalloutBlock().validate(settings, []) == {}
        assert settings["controls"] is True

    def test_relative_video_url_rejected(self):
        errors = VideoCalloutBlock().validate(self._settings(video_url="/videos/1"), [])
        assert errors["video_url"] == "The URL is not valid."

    def test_unknown_provider_rejected(self):
        errors = VideoCalloutBlock().validate(self._settings(video_url="https://example.com/v.mp4"), [])
        assert errors["video_url"].startswith("Unrecognized provider.")

    def test_negative_start_clamped(self):
        assert self._settings(start_sec="-5")["start_sec"] == 0

    def test_heading_required(self):
        errors = VideoCalloutBlock().validate(self._settings(title_html=""), [])
        assert "title_html" in errors

    def test_build_embeds_video(self):
        context = VideoCalloutBlock().build({"title_html": "Hi", "video_url": "https://vimeo.com/76979871"})
        assert "player.vimeo.com/video/76979871" in context["embed_html"]


class TestInsightsSearchBlock:
    def test_page_size_range(self):
        plugin = InsightsSearchBlock()
        errors = plugin.validate(plugin.clean_settings({"page_size": "80"}), [])
        assert errors["page_size"] == "Results per page must be at most 50."

    def test_build_points_at_endpoint(self):
        assert InsightsSearchBlock().build({})["endpoint"] == SEARCH_ENDPOINT
