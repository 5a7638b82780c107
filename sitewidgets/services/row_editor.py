"""
Row-Collection Editor

Keeps the in-progress row list of a block between admin requests.

A working copy starts ``initial`` (a snapshot of the resolved rows), moves to
``editing`` on the first add/remove and returns to ``initial``, seeded with
the saved rows, once the block is persisted.

When a session has no working copy yet, rows are resolved in this order:
the session's own copy, the parent editing context's copy, rows submitted
with the request, the persisted configuration.
"""

import logging
import uuid
from collections.abc import Awaitable, Callable
from typing import Any

from sitewidgets.blocks.base import BlockPlugin
from sitewidgets.blocks.rows import drop_flagged, overlay_rows, strip_flags
from sitewidgets.exceptions import InvalidOperationError, ValidationError
from sitewidgets.services.asset_promoter import AssetPromoter
from sitewidgets.services.working_copy_store import WorkingCopy, WorkingCopyStatus

logger = logging.getLogger(__name__)

Rows = list[dict[str, Any]]


class RowEditor:
    def __init__(self, store, promoter: AssetPromoter | None = None):
        self.store = store
        self.promoter = promoter

    @staticmethod
    def _require_rows(plugin: BlockPlugin) -> None:
        if plugin.row_spec is None:
            raise InvalidOperationError(f'Block type "{plugin.meta.plugin_id}" has no editable rows')

    async def _bound_copy(self, session_id: str, block_id: int) -> WorkingCopy | None:
        working = await self.store.get(session_id)
        if working is not None and working.block_id != block_id:
            raise InvalidOperationError(
                "Editing session belongs to another block",
                details={"session_id": session_id, "block_id": block_id},
            )
        return working

    async def open(
        self,
        block_id: int,
        plugin: BlockPlugin,
        config: dict[str, Any],
        session_id: str | None = None,
        parent_session_id: str | None = None,
        submitted_rows: Rows | None = None,
    ) -> WorkingCopy:
        """Return the session's working copy, creating it on first use."""
        self._require_rows(plugin)

        if session_id:
            working = await self._bound_copy(session_id, block_id)
            if working is not None:
                return working

        rows: Rows | None = None
        if parent_session_id:
            parent = await self.store.get(parent_session_id)
            if parent is not None and parent.block_id == block_id:
                rows = [dict(row) for row in parent.rows]
        if rows is None and submitted_rows is not None:
            rows = strip_flags(submitted_rows)
        if rows is None:
            rows = plugin.collection_rows(config)

        working = WorkingCopy(
            session_id=session_id or uuid.uuid4().hex,
            block_id=block_id,
            rows=rows,
            parent_session_id=parent_session_id,
            status=WorkingCopyStatus.INITIAL,
        )
        await self.store.put(working)
        logger.info(
            f"Opened working copy {working.session_id} for block {block_id} with {len(rows)} rows",
            extra={"block_id": block_id, "session_id": working.session_id},
        )
        return working

    async def add_row(
        self,
        block_id: int,
        plugin: BlockPlugin,
        config: dict[str, Any],
        session_id: str,
        submitted_rows: Rows | None = None,
    ) -> WorkingCopy:
        """Append the plugin's default row, keeping any values typed into the current rows."""
        working = await self.open(block_id, plugin, config, session_id=session_id)
        working.rows = strip_flags(overlay_rows(working.rows, submitted_rows))

        max_rows = plugin.row_spec.max_rows
        if max_rows is not None and len(working.rows) >= max_rows:
            raise InvalidOperationError(
                f"A maximum of {max_rows} rows is allowed",
                details={"max_rows": max_rows},
            )

        working.rows.append(plugin.default_row())
        working.status = WorkingCopyStatus.EDITING
        await self.store.put(working)
        return working

    async def remove_row(
        self, block_id: int, plugin: BlockPlugin, config: dict[str, Any], session_id: str, index: int
    ) -> WorkingCopy:
        """Drop the row at ``index``; out-of-range indexes leave the rows untouched."""
        working = await self.open(block_id, plugin, config, session_id=session_id)

        if 0 <= index < len(working.rows):
            del working.rows[index]
            working.status = WorkingCopyStatus.EDITING
            await self.store.put(working)
        return working

    async def remove_selected(
        self, block_id: int, plugin: BlockPlugin, config: dict[str, Any], session_id: str, submitted_rows: Rows
    ) -> WorkingCopy:
        """Overlay the submitted values and drop every row flagged for removal."""
        working = await self.open(block_id, plugin, config, session_id=session_id)

        working.rows = drop_flagged(overlay_rows(working.rows, submitted_rows))
        working.status = WorkingCopyStatus.EDITING
        await self.store.put(working)
        return working

    async def save(
        self,
        block_id: int,
        plugin: BlockPlugin,
        config: dict[str, Any],
        session_id: str | None,
        submitted_rows: Rows | None,
        submitted_settings: dict[str, Any],
        persist: Callable[[dict[str, Any]], Awaitable[None]],
    ) -> dict[str, Any]:
        """
        Clean, validate and persist the working copy.

        Raises:
            ValidationError: Settings failed validation; nothing is persisted
            AssetPromotionError: An upload could not be promoted; nothing is persisted
        """
        settings = plugin.clean_settings(submitted_settings)
        rows: Rows = []

        if plugin.row_spec is not None:
            working = await self.open(block_id, plugin, config, session_id=session_id, submitted_rows=submitted_rows)
            session_id = working.session_id
            merged = drop_flagged(overlay_rows(working.rows, submitted_rows))
            rows = [clean for clean in (plugin.clean_row(row) for row in merged) if clean is not None]

        errors = plugin.validate(settings, rows)
        if errors:
            raise ValidationError("Block settings are invalid", errors=errors)

        if rows and self.promoter is not None:
            rows = await plugin.promote_assets(rows, self.promoter)

        new_config = plugin.submit(config, settings, rows)
        await persist(new_config)

        if plugin.row_spec is not None:
            await self.store.put(
                WorkingCopy(
                    session_id=session_id,
                    block_id=block_id,
                    rows=[dict(row) for row in rows],
                    status=WorkingCopyStatus.INITIAL,
                )
            )
        logger.info(
            f"Saved block {block_id} with {len(rows)} rows",
            extra={"block_id": block_id, "session_id": session_id},
        )
        return new_config
