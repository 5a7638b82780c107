"""
Settings Service

Reads and writes the ``suite.settings`` configuration object.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from sitewidgets.exceptions import ValidationError
from sitewidgets.models.config_object import ConfigObject
from sitewidgets.schemas.settings import SuiteSettingsResponse, SuiteSettingsUpdate

logger = logging.getLogger(__name__)

SUITE_SETTINGS = "suite.settings"

DEFAULT_SUITE_SETTINGS: dict[str, Any] = {
    "api_endpoint": None,
    "api_key": None,
    "secret_token": None,
    "enable_logging": False,
}


async def load_config(db: AsyncSession, name: str, defaults: dict[str, Any] | None = None) -> dict[str, Any]:
    """Return a configuration object's data layered over ``defaults``."""
    data = dict(defaults or {})
    stored = await db.get(ConfigObject, name)
    if stored is not None and stored.data:
        data.update(stored.data)
    return data


async def save_config(db: AsyncSession, name: str, data: dict[str, Any]) -> None:
    stored = await db.get(ConfigObject, name)
    if stored is None:
        db.add(ConfigObject(name=name, data=data))
    else:
        stored.data = data
    await db.commit()


class SettingsService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self) -> dict[str, Any]:
        return await load_config(self.db, SUITE_SETTINGS, DEFAULT_SUITE_SETTINGS)

    async def get_public(self) -> SuiteSettingsResponse:
        data = await self.get()
        return SuiteSettingsResponse(
            api_endpoint=data.get("api_endpoint"),
            api_key=data.get("api_key"),
            secret_token_set=bool(data.get("secret_token")),
            enable_logging=bool(data.get("enable_logging")),
        )

    async def update(self, payload: SuiteSettingsUpdate) -> SuiteSettingsResponse:
        """
        Validate and store new settings.

        Raises:
            ValidationError: If the API endpoint is missing; nothing is written
        """
        if not (payload.api_endpoint or "").strip():
            raise ValidationError("API endpoint field is required.", field="api_endpoint")

        data = await self.get()
        data["api_endpoint"] = payload.api_endpoint
        data["api_key"] = payload.api_key
        data["enable_logging"] = bool(payload.enable_logging)
        # An empty token keeps the stored secret
        if payload.secret_token:
            data["secret_token"] = payload.secret_token

        await save_config(self.db, SUITE_SETTINGS, data)
        logger.info("Suite settings updated")
        return await self.get_public()
