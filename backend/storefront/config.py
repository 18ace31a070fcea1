"""Application settings.

Values come from environment variables (a local ``.env`` file is loaded
first). Development falls back to obvious placeholder credentials; a
production deployment (``APP_ENV=production``) must set the secret and the
admin credentials explicitly or startup fails.
"""

import os
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Mapping, Optional

from dotenv import load_dotenv

from storefront.errors import ConfigError

load_dotenv()

# Development-only fallbacks. Never used when APP_ENV=production.
DEV_JWT_SECRET = "DEV_ONLY_SECRET_7a6cdd2f-d4e2-4c37-9b60-df09af6c853b"
DEV_ADMIN_USERNAME = "dev_admin"
DEV_ADMIN_PASSWORD = "dev_password_only"

SESSION_COOKIE_NAME = "admin_auth_token"

_EXPIRY_UNITS = {"s": 1, "m": 60, "h": 3600, "d": 86400, "w": 604800}
_EXPIRY_RE = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$", re.IGNORECASE)


def parse_expiry(value: str) -> int:
    """
    Convert an expiry string to seconds.

    Accepts plain seconds ("3600") or a number with a unit suffix
    ("30m", "12h", "7d", "2w").

    Raises:
      - ConfigError if the value can't be parsed or is not positive
    """
    match = _EXPIRY_RE.match(value or "")
    if not match:
        raise ConfigError(f"Invalid token expiry: '{value}'. Expected e.g. '7d', '12h' or seconds.")
    amount = int(match.group(1))
    unit = (match.group(2) or "s").lower()
    seconds = amount * _EXPIRY_UNITS[unit]
    if seconds <= 0:
        raise ConfigError(f"Token expiry must be positive, got '{value}'")
    return seconds


def _flag(value: Optional[str]) -> bool:
    return (value or "").lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class StorageSettings:
    """Connection details for the S3-compatible image bucket."""

    endpoint_url: str = ""
    access_key_id: str = ""
    secret_access_key: str = ""
    region: str = "auto"
    bucket: str = "images"
    folder: str = "products-services"
    public_base_url: str = ""

    @property
    def is_configured(self) -> bool:
        return bool(self.endpoint_url and self.access_key_id and self.secret_access_key)


@dataclass(frozen=True)
class Settings:
    app_name: str = "Storefront API"
    environment: str = "development"
    jwt_secret: str = DEV_JWT_SECRET
    token_expiry_seconds: int = 7 * 24 * 60 * 60
    admin_username: str = DEV_ADMIN_USERNAME
    admin_password: str = DEV_ADMIN_PASSWORD
    database_url: str = "sqlite:///./storefront.db"
    sql_echo: bool = False
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"])
    protected_prefixes: List[str] = field(default_factory=lambda: ["/admin"])
    public_paths: List[str] = field(default_factory=lambda: ["/admin/login", "/api/auth/login"])
    login_path: str = "/admin/login"
    storage: StorageSettings = field(default_factory=StorageSettings)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment (or an explicit mapping, for tests)."""
    env = os.environ if environ is None else environ
    environment = env.get("APP_ENV", "development").strip().lower() or "development"
    production = environment == "production"

    missing = [name for name in ("JWT_SECRET", "ADMIN_USERNAME", "ADMIN_PASSWORD") if not env.get(name)]
    if production and missing:
        raise ConfigError(f"Missing required environment variables in production: {', '.join(missing)}")

    cors_origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
    extra = env.get("CORS_ORIGINS", "")
    if extra:
        cors_origins.extend(o.strip() for o in extra.split(",") if o.strip())

    storage = StorageSettings(
        endpoint_url=env.get("STORAGE_ENDPOINT_URL", ""),
        access_key_id=env.get("STORAGE_ACCESS_KEY_ID", ""),
        secret_access_key=env.get("STORAGE_SECRET_ACCESS_KEY", ""),
        region=env.get("STORAGE_REGION", "auto"),
        bucket=env.get("STORAGE_BUCKET", "images"),
        folder=env.get("STORAGE_FOLDER", "products-services"),
        public_base_url=env.get("STORAGE_PUBLIC_BASE_URL", ""),
    )

    return Settings(
        environment=environment,
        jwt_secret=env.get("JWT_SECRET") or DEV_JWT_SECRET,
        token_expiry_seconds=parse_expiry(env.get("JWT_EXPIRY", "7d")),
        admin_username=env.get("ADMIN_USERNAME") or DEV_ADMIN_USERNAME,
        admin_password=env.get("ADMIN_PASSWORD") or DEV_ADMIN_PASSWORD,
        database_url=env.get("DATABASE_URL", "sqlite:///./storefront.db"),
        sql_echo=_flag(env.get("SQL_ECHO")),
        log_level=env.get("LOG_LEVEL", "INFO"),
        cors_origins=cors_origins,
        storage=storage,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once."""
    return load_settings()
