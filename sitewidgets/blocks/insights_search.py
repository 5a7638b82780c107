"""
Insights Search Block

Search box and result list backed by the insights search endpoint.
"""

from __future__ import annotations

from typing import Any

from sitewidgets.blocks.base import BlockMeta, BlockPlugin, SettingField

SEARCH_ENDPOINT = "/api/v1/insights/search"

_META = BlockMeta(
    plugin_id="insights_search",
    label="Insights search",
    description="Keyword search over published insights",
)


class InsightsSearchBlock(BlockPlugin):
    settings_fields = [
        SettingField("title", "Title"),
        SettingField("placeholder", "Search placeholder"),
        SettingField("page_size", "Results per page", kind="int", required=True, minimum=1, maximum=50),
    ]

    @property
    def meta(self) -> BlockMeta:
        return _META

    def default_configuration(self) -> dict[str, Any]:
        return {"title": "Insights", "placeholder": "Search insights", "page_size": 10}

    def build(self, config: dict[str, Any]) -> dict[str, Any]:
        config = self.configuration(config)
        return {
            "title": config.get("title", ""),
            "placeholder": config.get("placeholder", ""),
            "page_size": config.get("page_size") or 10,
            "endpoint": SEARCH_ENDPOINT,
        }
