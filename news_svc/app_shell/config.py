"""Environment-sourced configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from functools import lru_cache

from news_svc.adapters.mongo.client import build_mongo_uri

_TRUTHY = {"1", "true", "yes", "on"}


class ConfigError(ValueError):
    """Raised when an environment variable holds an unusable value."""


def _env_bool(env: Mapping[str, str], key: str, default: bool = False) -> bool:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in _TRUTHY


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from e


def _env_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{key} must be a number, got {raw!r}") from e


class Settings:
    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        env = os.environ if env is None else env

        # Server
        self.server_host = env.get("SERVER_HOST", "0.0.0.0")
        self.server_port = _env_int(env, "SERVER_PORT", 8080)
        self.is_dev = _env_bool(env, "SERVER_IS_DEV")
        self.shutdown_timeout = _env_float(env, "SERVER_SHUTDOWN_TIMEOUT", 5.0)

        # Mongo
        self.mongo_host = env.get("MONGO_HOST", "localhost")
        self.mongo_port = _env_int(env, "MONGO_PORT", 27017)
        self.mongo_user = env.get("MONGO_USER", "")
        self.mongo_password = env.get("MONGO_PASSWORD", "")
        self.mongo_name = env.get("MONGO_NAME", "news")
        self.mongo_connect_timeout = _env_float(env, "MONGO_CONNECT_TIMEOUT", 10.0)
        self.mongo_operation_timeout = _env_float(env, "MONGO_OPERATION_TIMEOUT", 10.0)

    @property
    def mongo_uri(self) -> str:
        return build_mongo_uri(
            self.mongo_user, self.mongo_password, self.mongo_host, self.mongo_port
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
