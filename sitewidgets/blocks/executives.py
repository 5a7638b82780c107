"""
Executives Block

A grid of executive bios: name, title, photo, LinkedIn link and a short CV.
Photos may be uploaded; the upload is promoted when the block is saved.
"""

from __future__ import annotations

import logging
from typing import Any

from sitewidgets.blocks.base import BlockMeta, BlockPlugin, SettingField
from sitewidgets.blocks.rows import FieldSpec, RowSpec
from sitewidgets.exceptions import AssetPromotionError
from sitewidgets.services.asset_promoter import is_ok

logger = logging.getLogger(__name__)

DEFAULT_SECTION_ID = "principal-executives"

_META = BlockMeta(
    plugin_id="executives",
    label="Executives",
    description="Executive bios with photo, LinkedIn link and CV",
)


class ExecutivesBlock(BlockPlugin):
    settings_fields = [
        SettingField("title", "Title"),
        SettingField("section_id", "Section id"),
    ]

    row_spec = RowSpec(
        collection="executives",
        identifying_field="name",
        fields=[
            FieldSpec("name", "Name"),
            FieldSpec("title", "Position"),
            FieldSpec("photo", "Photo URL", kind="url"),
            FieldSpec("photo_fid", "Photo upload", kind="file", default=None),
            FieldSpec("linkedin", "LinkedIn URL", kind="url"),
            FieldSpec("cv_html", "CV", kind="html"),
        ],
    )

    @property
    def meta(self) -> BlockMeta:
        return _META

    def default_configuration(self) -> dict[str, Any]:
        return {"title": "", "section_id": DEFAULT_SECTION_ID, "executives": []}

    async def promote_assets(self, rows, promoter):
        promoted = []
        for row in rows:
            fid = row.get("photo_fid")
            if fid:
                result = await promoter.promote(fid)
                if not is_ok(result):
                    raise AssetPromotionError(result["message"], result["code"], file_id=fid)
                row = {**row, "photo": result["url"], "photo_fid": result["fid"]}
            promoted.append(row)
        return promoted

    def build(self, config: dict[str, Any]) -> dict[str, Any]:
        config = self.configuration(config)
        executives = []
        for row in self.collection_rows(config):
            clean = self.clean_row(row)
            if clean is None:
                continue
            clean.pop("photo_fid", None)
            executives.append(clean)

        return {
            "title": str(config.get("title") or "").strip(),
            "section_id": str(config.get("section_id") or "").strip() or DEFAULT_SECTION_ID,
            "executives": executives,
        }
