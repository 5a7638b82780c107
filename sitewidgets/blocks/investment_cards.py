"""
Investment Cards Block

Carousel of "ways to invest" cards. Each card carries a desktop and a mobile
image slot; uploads for either slot are promoted on save.
"""

from __future__ import annotations

from typing import Any

from sitewidgets.blocks.base import BlockMeta, BlockPlugin, SettingField
from sitewidgets.blocks.rows import FieldSpec, RowSpec
from sitewidgets.exceptions import AssetPromotionError
from sitewidgets.services.asset_promoter import is_ok

MAX_CARDS = 12
DEFAULT_URL = "#"
IMAGE_KEYS = ("image_fid", "mobile_image_fid", "desktop_img", "mobile_img", "image_url")

_META = BlockMeta(
    plugin_id="investment_cards",
    label="Ways to invest",
    description="Carousel of investment cards with responsive images",
)


class InvestmentCardsBlock(BlockPlugin):
    settings_fields = [
        SettingField("header", "Header"),
        SettingField("header_accent", "Header accent"),
        SettingField("aria_label", "Carousel label"),
        SettingField("prev_label", "Previous button label"),
        SettingField("next_label", "Next button label"),
    ]

    row_spec = RowSpec(
        collection="cards",
        identifying_field="header",
        max_rows=MAX_CARDS,
        legacy_key="cards_json",
        fields=[
            FieldSpec("header", "Header"),
            FieldSpec("text", "Text", kind="textarea"),
            FieldSpec("url", "Link", kind="url", default=DEFAULT_URL),
            FieldSpec("image_fid", "Desktop image upload", kind="file", default=None),
            FieldSpec("mobile_image_fid", "Mobile image upload", kind="file", default=None),
            FieldSpec("desktop_img", "Desktop image URL", kind="url"),
            FieldSpec("mobile_img", "Mobile image URL", kind="url"),
            FieldSpec("image_url", "Image URL", kind="url"),
        ],
    )

    @property
    def meta(self) -> BlockMeta:
        return _META

    def default_configuration(self) -> dict[str, Any]:
        return {
            "header": "Discover our",
            "header_accent": "ways to invest",
            "aria_label": "Ways to invest",
            "prev_label": "Previous",
            "next_label": "Next",
            "cards": [],
        }

    def upgrade_legacy_row(self, row):
        # Older payloads named the header "title"
        return {
            **row,
            "header": str(row.get("header", row.get("title", ""))),
            "text": str(row.get("text", "")),
            "url": str(row.get("url", DEFAULT_URL)),
        }

    def clean_row(self, row):
        clean = super().clean_row(row)
        if clean is not None and not clean["url"]:
            clean["url"] = DEFAULT_URL
        return clean

    async def promote_assets(self, rows, promoter):
        promoted = []
        for row in rows:
            result = await promoter.promote_row(row)
            if not is_ok(result):
                raise AssetPromotionError(result["message"], result["code"])
            promoted.append({**row, **{key: result.get(key) for key in IMAGE_KEYS}})
        return promoted

    def build(self, config: dict[str, Any]) -> dict[str, Any]:
        config = self.configuration(config)
        cards = [card for card in (self.clean_row(row) for row in self.collection_rows(config)) if card]
        return {
            "header": config.get("header", ""),
            "header_accent": config.get("header_accent", ""),
            "aria_label": config.get("aria_label", ""),
            "prev_label": config.get("prev_label", ""),
            "next_label": config.get("next_label", ""),
            "cards": cards[:MAX_CARDS],
        }
