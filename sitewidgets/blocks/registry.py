"""
Block Registry

In-process singleton mapping plugin ids to widget implementations.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sitewidgets.blocks.base import BlockPlugin

logger = logging.getLogger(__name__)


class BlockRegistry:
    def __init__(self) -> None:
        self._plugins: dict[str, BlockPlugin] = {}

    def register(self, plugin: BlockPlugin) -> None:
        self._plugins[plugin.meta.plugin_id] = plugin
        logger.info("Block plugin registered: %s", plugin.meta.plugin_id)

    def get(self, plugin_id: str) -> BlockPlugin | None:
        """Return the plugin with the given id, or None if not registered."""
        return self._plugins.get(plugin_id)

    def all_plugins(self) -> list[BlockPlugin]:
        return list(self._plugins.values())

    def is_registered(self, plugin_id: str) -> bool:
        return plugin_id in self._plugins


# Import this wherever a plugin must be resolved from a block instance.
block_registry = BlockRegistry()


def register_builtin_blocks(registry: BlockRegistry | None = None) -> BlockRegistry:
    """
    Register every built-in widget type.

    Deferred imports keep the plugin modules from importing the registry
    at module load time.
    """
    from sitewidgets.blocks.executives import ExecutivesBlock
    from sitewidgets.blocks.insights_search import InsightsSearchBlock
    from sitewidgets.blocks.investment_cards import InvestmentCardsBlock
    from sitewidgets.blocks.map_pins import MapPinsBlock
    from sitewidgets.blocks.video_callout import VideoCalloutBlock

    registry = registry or block_registry
    for plugin_class in [ExecutivesBlock, MapPinsBlock, InvestmentCardsBlock, VideoCalloutBlock, InsightsSearchBlock]:
        registry.register(plugin_class())
    return registry
