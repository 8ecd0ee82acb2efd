"""
Process configuration read from environment variables.

Everything is resolved once at startup by `load_settings()`; a missing
`DATABASE_URL` is a configuration error and the app refuses to start before
any connection attempt is made.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

SSL_MODES = ("verify-full", "disable")


class ConfigurationError(RuntimeError):
    pass


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}.") from e


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}.") from e


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    database_url: str
    database_ssl: str = "verify-full"
    database_ca_file: str | None = None
    pool_min_size: int = 1
    pool_max_size: int = 5
    command_timeout_s: float = 30.0
    init_max_attempts: int = 5
    init_retry_delay_s: float = 5.0
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    log_json: bool = False

    def __post_init__(self) -> None:
        if not (self.database_url or "").strip():
            raise ConfigurationError("DATABASE_URL is not set.")
        if self.database_ssl not in SSL_MODES:
            raise ConfigurationError(
                f"DATABASE_SSL must be one of {', '.join(SSL_MODES)}; got {self.database_ssl!r}."
            )
        if self.pool_min_size < 0 or self.pool_max_size < max(self.pool_min_size, 1):
            raise ConfigurationError("DB pool sizes must satisfy 0 <= min <= max and max >= 1.")
        if self.init_max_attempts < 1:
            raise ConfigurationError("DB_INIT_MAX_ATTEMPTS must be at least 1.")
        if self.init_retry_delay_s < 0:
            raise ConfigurationError("DB_INIT_RETRY_DELAY must not be negative.")


def load_settings() -> Settings:
    """
    Build `Settings` from the current environment.
    """
    return Settings(
        database_url=os.environ.get("DATABASE_URL", "").strip(),
        database_ssl=_env_str("DATABASE_SSL", "verify-full").lower(),
        database_ca_file=os.environ.get("DATABASE_CA_FILE", "").strip() or None,
        pool_min_size=_env_int("DB_POOL_MIN_SIZE", 1),
        pool_max_size=_env_int("DB_POOL_MAX_SIZE", 5),
        command_timeout_s=_env_float("DB_COMMAND_TIMEOUT", 30.0),
        init_max_attempts=_env_int("DB_INIT_MAX_ATTEMPTS", 5),
        init_retry_delay_s=_env_float("DB_INIT_RETRY_DELAY", 5.0),
        host=_env_str("HOST", "0.0.0.0"),
        port=_env_int("PORT", 3000),
        log_level=_env_str("LOG_LEVEL", "INFO").upper(),
        log_json=_env_bool("LOG_JSON"),
    )
