import os
from dataclasses import dataclass, field
from typing import List

# Runtime settings, read once from the environment.


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    host: str = field(default_factory=lambda: os.getenv("FARMSTORE_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", 8085)))
    log_dir: str = field(default_factory=lambda: os.getenv("FARMSTORE_LOG_DIR", "data/logs"))
    log_level: str = field(default_factory=lambda: os.getenv("FARMSTORE_LOG_LEVEL", "INFO").upper())
    seed_on_startup: bool = field(default_factory=lambda: _env_bool("FARMSTORE_SEED_ON_STARTUP", True))
    idempotency_max: int = field(default_factory=lambda: int(os.getenv("FARMSTORE_IDEMPOTENCY_MAX", 1000)))
    cors_origins: List[str] = field(
        default_factory=lambda: [o.strip() for o in os.getenv("FARMSTORE_CORS_ORIGINS", "*").split(",") if o.strip()]
    )


settings = Settings()
