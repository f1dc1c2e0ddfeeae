"""
Application settings loaded from environment variables.
"""

import json
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Credential(BaseModel):
    """One AngelList API credential (client id + access token)."""

    client_id: str = Field(alias="clientId")
    token: str

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Settings(BaseSettings):
    """Application configuration from environment."""

    # AngelList API
    angellist_api_url: str = "https://api.angel.co/1"
    angellist_client_id: str = ""
    angellist_token: str = ""
    # JSON list of {"clientId": ..., "token": ...} for credential failover
    angellist_credentials: Annotated[list[Credential], NoDecode] = []

    @field_validator("angellist_credentials", mode="before")
    @classmethod
    def parse_credentials(cls, v):
        """Accept a JSON string (as read from env or .env, possibly empty) as well as a list."""
        if isinstance(v, str):
            v = v.strip()
            return json.loads(v) if v else []
        return v

    @property
    def credential_pool(self) -> list[Credential]:
        """Configured credentials, falling back to the single client id/token pair."""
        if self.angellist_credentials:
            return list(self.angellist_credentials)
        if self.angellist_client_id and self.angellist_token:
            return [Credential(client_id=self.angellist_client_id, token=self.angellist_token)]
        return []

    # Directory search
    search_type_filter: str = "Startup"

    # HTTP
    request_timeout: int = 30  # Directory API timeout (seconds)
    scrape_timeout: int = 15  # Profile page fetch timeout (seconds)
    max_connections: int = 20
    max_keepalive: int = 10

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Create settings instance at import time (singleton pattern)
# All code should import: from ..config.settings import settings
settings = Settings()
