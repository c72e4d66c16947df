from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str = "127.0.0.1"
    port: int = 3100
    debug: bool = False
    cors_origins: list[str] = []
    counter_key: str = "shipmentCounter"  # Document id of the shipment number counter
    counter_max_attempts: int = 5  # Compare-and-swap attempts before giving up
    counter_timeout_ms: int = 2000  # Passed to pymongo as timeoutMS
    # Build metadata injected during Docker build via environment variables
    git_commit_hash: str = "unknown"
    build_time: str = "unknown"

    model_config = {
        "env_file": [".env"],
        "env_prefix": "ENVIOS_",
        "extra": "ignore",
    }
