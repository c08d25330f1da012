from __future__ import annotations

import sys
from pathlib import Path

import pytest

BASE_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = BASE_DIR / "src"

sys.path.insert(0, str(SRC_DIR))

from saas_admin_console.notifications import NotificationCenter  # noqa: E402
from saas_admin_sdk.config import ClientConfig, load_config  # noqa: E402
from saas_admin_sdk.http_client import HttpClient, TraceContext  # noqa: E402

BASE_URL = "https://api.example.com"


@pytest.fixture
def config(monkeypatch: pytest.MonkeyPatch) -> ClientConfig:
    monkeypatch.setenv("SAAS_ADMIN_API_BASE_URL", BASE_URL)
    monkeypatch.delenv("SAAS_ADMIN_ENV", raising=False)
    monkeypatch.delenv("SAAS_ADMIN_API_BASE_URL_DEV", raising=False)
    return load_config()


@pytest.fixture
def http(config: ClientConfig) -> HttpClient:
    return HttpClient(config, trace=TraceContext())


@pytest.fixture
def notifications() -> NotificationCenter:
    return NotificationCenter()
