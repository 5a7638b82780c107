"""
Block Service

Placement and persistence of widget instances.
"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sitewidgets.blocks.base import BlockPlugin
from sitewidgets.blocks.registry import BlockRegistry, block_registry
from sitewidgets.exceptions import BlockNotFoundError, DatabaseError, ValidationError
from sitewidgets.models.block import BlockInstance

logger = logging.getLogger(__name__)


class BlockService:
    def __init__(self, db: AsyncSession, registry: BlockRegistry | None = None):
        self.db = db
        self.registry = registry or block_registry

    def plugin_for(self, plugin_id: str) -> BlockPlugin:
        plugin = self.registry.get(plugin_id)
        if plugin is None:
            raise ValidationError(f'Unknown block type "{plugin_id}"', field="plugin_id")
        return plugin

    async def create(self, plugin_id: str, label: str, settings: dict[str, Any] | None = None) -> BlockInstance:
        """Place a new block with the plugin defaults overlaid by ``settings``."""
        plugin = self.plugin_for(plugin_id)
        label = (label or "").strip() or plugin.meta.label

        block = BlockInstance(plugin_id=plugin_id, label=label, settings=plugin.configuration(settings))
        self.db.add(block)
        await self.db.commit()
        await self.db.refresh(block)

        logger.info(f"Created {plugin_id} block {block.id}", extra={"block_id": block.id})
        return block

    async def get(self, block_id: int) -> BlockInstance:
        block = await self.db.get(BlockInstance, block_id)
        if block is None:
            raise BlockNotFoundError(block_id)
        return block

    async def list_blocks(self) -> list[BlockInstance]:
        result = await self.db.execute(select(BlockInstance).order_by(BlockInstance.id))
        return list(result.scalars().all())

    def configuration(self, block: BlockInstance) -> dict[str, Any]:
        return self.plugin_for(block.plugin_id).configuration(block.settings)

    def render(self, block: BlockInstance) -> dict[str, Any]:
        plugin = self.plugin_for(block.plugin_id)
        return plugin.build(block.settings or {})

    def persister(self, block: BlockInstance):
        """Callback replacing the block configuration in the current transaction."""

        async def persist(config: dict[str, Any]) -> None:
            block_id = block.id
            block.settings = config
            try:
                await self.db.commit()
            except SQLAlchemyError as e:
                await self.db.rollback()
                logger.error(f"Failed to save block {block_id}: {e}", extra={"block_id": block_id})
                raise DatabaseError("Unable to save block configuration", operation="save_block") from e
            await self.db.refresh(block)

        return persist
