"""
Configuration management for the Artwork Indexer.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = Field(default="Artwork Indexer")
    debug: bool = Field(default=False)
    environment: str = Field(default="development")

    # Database
    database_url: str = Field(default="sqlite:///./artwork_indexer.db")

    # Chain
    rpc_url: Optional[str] = Field(
        default=None,
        description="JSON-RPC endpoint used to read tokenURI during mints. Unset = no chain reads.",
    )

    # IPFS
    ipfs_gateway_url: str = Field(
        default="https://ipfs.io/ipfs",
        description="Gateway prefix used both to fetch metadata and to build canonical metadata URIs.",
    )
    ipfs_timeout_seconds: float = Field(default=30.0)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings
