"""
Widget types (blocks)

Public API:
    BlockMeta: widget metadata dataclass
    BlockPlugin: abstract base class for widget types
    BlockRegistry: plugin id to widget lookup
    block_registry: global singleton registry instance
"""

from .base import BlockMeta, BlockPlugin, SettingField
from .registry import BlockRegistry, block_registry, register_builtin_blocks
from .rows import FieldSpec, RowSpec

__all__ = [
    "BlockMeta",
    "BlockPlugin",
    "BlockRegistry",
    "FieldSpec",
    "RowSpec",
    "SettingField",
    "block_registry",
    "register_builtin_blocks",
]
