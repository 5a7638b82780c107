"""
Map Pins Block

A map image with pins placed at relative coordinates (0..1 on each axis).
"""

from __future__ import annotations

from typing import Any

from sitewidgets.blocks.base import BlockMeta, BlockPlugin, SettingField
from sitewidgets.blocks.rows import FieldSpec, RowSpec
from sitewidgets.utils.sanitize import sanitize_url

DEFAULT_MAP_SRC = "/static/images/places-map.png"
DEFAULT_MAP_ALT = "World map"

_META = BlockMeta(
    plugin_id="map_pins",
    label="Map with pins",
    description="Map image with city pins and tooltips",
)


class MapPinsBlock(BlockPlugin):
    settings_fields = [
        SettingField("map_src", "Map image", kind="url", required=True),
        SettingField("map_alt", "Map alternative text"),
    ]

    row_spec = RowSpec(
        collection="pins",
        identifying_field="city",
        fields=[
            FieldSpec("city", "City"),
            FieldSpec("x", "X", kind="coordinate", default=0.5),
            FieldSpec("y", "Y", kind="coordinate", default=0.5),
            FieldSpec("txt", "Tooltip", kind="textarea"),
            FieldSpec("aria", "Accessible label"),
        ],
    )

    @property
    def meta(self) -> BlockMeta:
        return _META

    def default_configuration(self) -> dict[str, Any]:
        return {"map_src": DEFAULT_MAP_SRC, "map_alt": DEFAULT_MAP_ALT, "pins": []}

    def clean_settings(self, values):
        clean = super().clean_settings(values)
        clean["map_src"] = sanitize_url(clean["map_src"])
        return clean

    def clean_row(self, row):
        clean = super().clean_row(row)
        if clean is not None and not clean["aria"]:
            clean["aria"] = clean["city"]
        return clean

    def build(self, config: dict[str, Any]) -> dict[str, Any]:
        config = self.configuration(config)
        return {
            "map_src": config.get("map_src") or DEFAULT_MAP_SRC,
            "map_alt": config.get("map_alt") or DEFAULT_MAP_ALT,
            "pins": [pin for pin in (self.clean_row(row) for row in self.collection_rows(config)) if pin],
        }
