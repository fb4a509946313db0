"""
Configuration management for the edge router.
Supports environment variables and config files.
"""
from typing import Dict, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8787
    reload: bool = False

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = "edge_router.log"

    # Routing config store
    config_store: str = "sqlite"  # "sqlite" | "file"
    config_db_path: str = "edge_router_config.db"
    config_file_path: str = "routing_config.json"
    config_key: str = "config"
    config_cache_ttl_seconds: float = 60.0

    # Backends (binding name -> upstream base URL), e.g.
    # EDGE_ROUTER_BACKENDS='{"APP_V0_1_0_27_LITE": "http://10.0.0.5:8080", "APP_LITE": "http://10.0.0.6:8080"}'
    backends: Dict[str, str] = {}
    upstream_timeout_seconds: float = 30.0

    # Admin surface
    admin_enabled: bool = True
    admin_prefix: str = "/__router"
    admin_token: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="EDGE_ROUTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
