from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, TypeVar

from dotenv import load_dotenv

PREFIX = "SAAS_ADMIN_"
TRUTHY = {"1", "true", "yes", "on"}

N = TypeVar("N", int, float)


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    env_name: str
    api_base_url: str
    connect_timeout_seconds: float = 5.0
    read_timeout_seconds: float = 10.0
    retries: int = 0
    retry_backoff_seconds: float = 0.3
    max_connections: int = 20
    verify_ssl: bool = True
    default_page_size: int = 10

    @property
    def normalized_env(self) -> str:
        return self.env_name.strip().lower()


def _env(name: str) -> str:
    return (os.getenv(PREFIX + name) or "").strip()


def _number(name: str, default: N, cast: Callable[[str], N], *, minimum: N, strict: bool = False) -> N:
    """Read ``SAAS_ADMIN_<name>`` and enforce a lower bound.

    ``strict`` rejects the bound itself (timeouts must be positive, retries may be zero).
    """
    key = PREFIX + name
    raw = _env(name)
    if not raw:
        value = default
    else:
        try:
            value = cast(raw)
        except ValueError as exc:
            raise ConfigError(f"{key} must be a {cast.__name__}, not {raw!r}") from exc
    too_small = value <= minimum if strict else value < minimum
    if too_small:
        bound = ">" if strict else ">="
        raise ConfigError(f"{key} must be {bound} {minimum}, not {value}")
    return value


def _flag(name: str, default: bool) -> bool:
    raw = _env(name)
    return raw.lower() in TRUTHY if raw else default


def load_config(env_file: str | None = None) -> ClientConfig:
    """Build a ``ClientConfig`` from ``SAAS_ADMIN_*`` variables.

    A ``.env`` file is read first without overriding the real environment.
    ``SAAS_ADMIN_API_BASE_URL_<ENV>`` wins over the plain base URL so one
    file can carry several deployments.
    """
    load_dotenv(env_file)

    env_name = _env("ENV") or "dev"
    api_base_url = _env(f"API_BASE_URL_{env_name.upper()}") or _env("API_BASE_URL")
    if not api_base_url:
        raise ConfigError(f"{PREFIX}API_BASE_URL is not set (nor {PREFIX}API_BASE_URL_{env_name.upper()})")

    timeout = _number("TIMEOUT_SECONDS", 10.0, float, minimum=0.0, strict=True)
    connect_timeout = _number("CONNECT_TIMEOUT_SECONDS", min(timeout, 5.0), float, minimum=0.0, strict=True)

    return ClientConfig(
        env_name=env_name,
        api_base_url=api_base_url.rstrip("/"),
        connect_timeout_seconds=connect_timeout,
        read_timeout_seconds=_number(
            "READ_TIMEOUT_SECONDS", max(timeout, connect_timeout), float, minimum=0.0, strict=True
        ),
        retries=_number("RETRIES", 0, int, minimum=0),
        retry_backoff_seconds=_number("RETRY_BACKOFF_SECONDS", 0.3, float, minimum=0.0),
        max_connections=_number("MAX_CONNECTIONS", 20, int, minimum=1),
        verify_ssl=_flag("VERIFY_SSL", True),
        default_page_size=_number("PAGE_SIZE", 10, int, minimum=1),
    )
