"""
Block Plugin Base Classes

BlockMeta: declarative metadata for a widget type.
BlockPlugin: abstract base class every widget type subclasses.
"""

from __future__ import annotations

import copy
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sitewidgets.blocks import rows as row_helpers
from sitewidgets.blocks.rows import RowSpec

if TYPE_CHECKING:
    from sitewidgets.services.asset_promoter import AssetPromoter

logger = logging.getLogger(__name__)

SETTING_KINDS = ("text", "textarea", "url", "int", "bool")


@dataclass
class BlockMeta:
    """
    Declarative metadata describing a widget type.

    Attributes:
        plugin_id:   Machine name stored on block instances, e.g. "map_pins".
        label:       Human-readable name shown in the admin UI.
        category:    Grouping in the admin UI.
        description: One-line description.
    """

    plugin_id: str
    label: str
    category: str = "Site widgets"
    description: str = ""


@dataclass
class SettingField:
    """A scalar (non-row) configuration value."""

    name: str
    label: str
    kind: str = "text"
    required: bool = False
    minimum: int | None = None
    maximum: int | None = None

    def __post_init__(self):
        if self.kind not in SETTING_KINDS:
            raise ValueError(f"Unknown setting kind '{self.kind}' for '{self.name}'")


class BlockPlugin(ABC):
    """
    Abstract base class for widget types.

    Subclasses must implement ``meta``, ``default_configuration`` and
    ``build``. Row-editing widgets also set ``row_spec``.
    """

    settings_fields: list[SettingField] = []
    row_spec: RowSpec | None = None

    @property
    @abstractmethod
    def meta(self) -> BlockMeta: ...

    @abstractmethod
    def default_configuration(self) -> dict[str, Any]: ...

    @abstractmethod
    def build(self, config: dict[str, Any]) -> dict[str, Any]:
        """Return the render context for a saved configuration."""

    # ── Configuration ─────────────────────────────────────────────────────────

    def configuration(self, stored: dict[str, Any] | None) -> dict[str, Any]:
        """Stored configuration layered over the defaults."""
        config = copy.deepcopy(self.default_configuration())
        config.update(stored or {})
        return config

    def settings_values(self, config: dict[str, Any]) -> dict[str, Any]:
        return {f.name: config.get(f.name) for f in self.settings_fields}

    def clean_settings(self, values: dict[str, Any]) -> dict[str, Any]:
        """Coerce submitted scalar settings to their declared kinds."""
        clean: dict[str, Any] = {}
        for setting in self.settings_fields:
            value = values.get(setting.name)
            if setting.kind == "bool":
                clean[setting.name] = row_helpers.is_flagged(value) if value is not None else False
            elif setting.kind == "int":
                try:
                    clean[setting.name] = int(value)
                except (TypeError, ValueError):
                    clean[setting.name] = None
            else:
                clean[setting.name] = str(value).strip() if value is not None else ""
        return clean

    def validate(self, settings: dict[str, Any], rows: list[dict[str, Any]]) -> dict[str, str]:
        """
        Check cleaned settings and rows.

        Returns:
            Field name to error message; empty when valid
        """
        errors: dict[str, str] = {}
        for setting in self.settings_fields:
            value = settings.get(setting.name)
            if setting.required and value in (None, ""):
                errors[setting.name] = f"{setting.label} field is required."
            elif setting.kind == "int" and value is not None:
                if setting.minimum is not None and value < setting.minimum:
                    errors[setting.name] = f"{setting.label} must be at least {setting.minimum}."
                elif setting.maximum is not None and value > setting.maximum:
                    errors[setting.name] = f"{setting.label} must be at most {setting.maximum}."
        return errors

    def submit(self, config: dict[str, Any], settings: dict[str, Any], rows: list[dict[str, Any]]) -> dict[str, Any]:
        """Produce the configuration to persist."""
        new_config = self.configuration(config)
        new_config.update(settings)
        if self.row_spec is not None:
            new_config[self.row_spec.collection] = rows
            if self.row_spec.legacy_key:
                new_config.pop(self.row_spec.legacy_key, None)
        return new_config

    # ── Rows ──────────────────────────────────────────────────────────────────

    def default_row(self) -> dict[str, Any]:
        return self.row_spec.default_row() if self.row_spec else {}

    def collection_rows(self, config: dict[str, Any]) -> list[dict[str, Any]]:
        """Persisted rows, falling back to the legacy JSON copy when present."""
        if self.row_spec is None:
            return []

        stored = config.get(self.row_spec.collection)
        if isinstance(stored, list) and stored:
            return [dict(row) for row in stored if isinstance(row, dict)]

        legacy = config.get(self.row_spec.legacy_key) if self.row_spec.legacy_key else None
        if isinstance(legacy, str) and legacy.strip():
            try:
                decoded = json.loads(legacy)
            except json.JSONDecodeError:
                logger.warning(f"Ignoring malformed {self.row_spec.legacy_key} on {self.meta.plugin_id}")
                return []
            if isinstance(decoded, list):
                return [self.upgrade_legacy_row(row) for row in decoded if isinstance(row, dict)]
        return []

    def upgrade_legacy_row(self, row: dict[str, Any]) -> dict[str, Any]:
        return dict(row)

    def clean_row(self, row: dict[str, Any]) -> dict[str, Any] | None:
        if self.row_spec is None:
            return None
        return row_helpers.clean_row(self.row_spec, row)

    async def promote_assets(self, rows: list[dict[str, Any]], promoter: AssetPromoter) -> list[dict[str, Any]]:
        """
        Promote uploads referenced by the rows.

        Raises:
            AssetPromotionError: On the first failed promotion
        """
        return rows
