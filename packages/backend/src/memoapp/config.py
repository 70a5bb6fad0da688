"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with MEMO_ prefix.
No YAML files, no file-based config — just env vars (12-factor app style).

Learn: The JWT secret is NOT a field here. It has no default and must
never sit in an ambient singleton, so TokenService.from_environment()
reads it once at startup (see memoapp.auth.token).
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All app configuration. Set via MEMO_* env vars."""

    # Database — sqlite+aiosqlite or postgresql+asyncpg
    database_url: str = "sqlite+aiosqlite:///./memo.db"

    # Redis (rate limiting only). Empty string disables it.
    redis_url: str = ""

    # Account/note storage: "sql" (database_url) or "memory" (dev only)
    store_backend: Literal["sql", "memory"] = "sql"

    # Argon2id cost parameters
    argon2_time_cost: int = Field(default=3, ge=1)
    argon2_memory_cost: int = Field(default=65536, ge=8)  # KiB
    argon2_parallelism: int = Field(default=4, ge=1)

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    # Rate limiting
    rate_limit_rpm: int = 100  # requests per minute per IP
    rate_limit_auth_rpm: int = 10  # stricter limit for login/signup

    model_config = {"env_prefix": "MEMO_"}


# Singleton — import this everywhere
settings = Settings()
