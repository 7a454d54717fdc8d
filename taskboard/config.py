"""
Settings loaded once at startup from the environment (+ optional .env).

Nothing else in the package reads environment variables: the Settings
object is handed to create_app, which passes the pieces on.
"""
import logging
import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_JWT_SECRET = "your-secret-key-change-in-production"


def _env_int(name, default):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    storage_dir: Path = Path("data/storage")
    jwt_secret: str = DEFAULT_JWT_SECRET
    token_ttl: timedelta = timedelta(hours=24)
    env: str = "development"
    api_delay_ms: int = 0
    cors_origins: list = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 5000

    @property
    def users_file(self):
        return self.storage_dir / "users.json"

    @property
    def tasks_file(self):
        return self.storage_dir / "tasks.json"

    @property
    def is_development(self):
        return self.env == "development"

    @classmethod
    def from_env(cls):
        load_dotenv(find_dotenv(usecwd=True), override=False)

        secret = os.getenv("JWT_SECRET") or ""
        if not secret:
            logger.warning("JWT_SECRET is not set, falling back to an insecure default")
            secret = DEFAULT_JWT_SECRET

        origins = os.getenv("CORS_ORIGINS") or "*"
        return cls(
            storage_dir=Path(os.getenv("STORAGE_PATH") or "data/storage").expanduser(),
            jwt_secret=secret,
            token_ttl=timedelta(hours=_env_int("TOKEN_TTL_HOURS", 24)),
            env=(os.getenv("APP_ENV") or "development").strip().lower(),
            api_delay_ms=max(0, _env_int("API_DELAY_MS", 0)),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
            host=os.getenv("HOST") or "0.0.0.0",
            port=_env_int("PORT", 5000),
        )
