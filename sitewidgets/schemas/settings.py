"""
Suite Settings Schemas
"""

from pydantic import BaseModel, Field


class SuiteSettingsUpdate(BaseModel):
    """Payload for updating suite settings"""

    api_endpoint: str | None = Field(None, description="Base endpoint used for remote content federation")
    api_key: str | None = Field(None, description="Key provided by the external content service")
    secret_token: str | None = Field(None, description="Signing secret; leave empty to keep the stored one")
    enable_logging: bool = False


class SuiteSettingsResponse(BaseModel):
    """Stored suite settings; the secret token itself is never returned"""

    api_endpoint: str | None = None
    api_key: str | None = None
    secret_token_set: bool = False
    enable_logging: bool = False
