from __future__ import annotations

from concurrent.futures import Executor
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Callable

from saas_admin_sdk.auth_store import AuthSession, AuthStore
from saas_admin_sdk.clients import SystemMetricsClient
from saas_admin_sdk.config import ClientConfig
from saas_admin_sdk.http_client import HttpClient
from saas_admin_sdk.models import SystemMetrics

from .logger import get_logger, log_action
from .notifications import NotificationService
from .page import ResourcePage
from .resources import RESOURCES, ResourceConfig
from .state import Action, AsyncSlice, AsyncState, Store, register_fetch
from .ui.filters import Scheduler

logger = get_logger(__name__)


class MetricsLoader:
    """Single-object slice for the system metrics dashboard."""

    def __init__(self, client: SystemMetricsClient, store: Store, name: str = "systemMetrics") -> None:
        self.client = client
        self.store = store
        self.slice = store.add_slice(AsyncSlice(name))
        register_fetch(store, self.slice, lambda _: self.client.get_metrics())

    def load(self) -> Action:
        return self.store.dispatch(self.slice.request())

    @property
    def state(self) -> AsyncState[SystemMetrics]:
        return self.store.get_state(self.slice.name)

    def dismiss_error(self) -> None:
        self.store.dispatch(self.slice.clear_error())


@dataclass
class Console:
    http: HttpClient
    store: Store
    notifications: NotificationService
    pages: dict[str, ResourcePage]
    metrics: MetricsLoader
    session: AuthSession | None = None
    _clients: list[Any] = field(default_factory=list)

    def page(self, name: str) -> ResourcePage:
        try:
            return self.pages[name]
        except KeyError:
            raise KeyError(f"unknown page {name!r}; expected one of {sorted(self.pages)}") from None

    def set_token(self, token: str | None) -> None:
        for client in self._clients:
            client.access_token = token

    def sign_in(self, token: str, user: dict[str, Any] | None = None) -> None:
        if self.session is not None:
            self.session.establish(token, user)
        self.set_token(token)
        log_action(logger, "console", "sign_in", "success")

    def sign_out(self) -> None:
        if self.session is not None:
            self.session.logout()
        self.set_token(None)
        log_action(logger, "console", "sign_out", "success")


def build_console(
    config: ClientConfig,
    notifications: NotificationService,
    auth_store: AuthStore | None = None,
    executor: Executor | None = None,
    *,
    resources: tuple[ResourceConfig, ...] = RESOURCES,
    export_dir: str | Path | None = None,
    scheduler: Scheduler | None = None,
    today: Callable[[], date] | None = None,
) -> Console:
    session = AuthSession(auth_store) if auth_store is not None else None
    if session is not None:
        session.restore()
    store = Store(executor=executor)
    console: Console | None = None

    def on_auth_error(error: Any) -> None:
        log_action(logger, "console", "session", "expired", trace_id=getattr(error, "trace_id", None))
        if console is not None:
            console.sign_out()
        elif session is not None:
            session.handle_auth_error(error)

    http = HttpClient(config, on_auth_error=on_auth_error)
    token = session.token if session else None

    clients: list[Any] = []
    pages: dict[str, ResourcePage] = {}
    for resource in resources:
        client = resource.client_type(http, access_token=token)
        clients.append(client)
        pages[resource.name] = ResourcePage(
            resource,
            client,
            store,
            notifications,
            page_size=config.default_page_size,
            export_dir=export_dir,
            scheduler=scheduler,
            today=today,
        )
    metrics_client = SystemMetricsClient(http, access_token=token)
    clients.append(metrics_client)

    console = Console(
        http=http,
        store=store,
        notifications=notifications,
        pages=pages,
        metrics=MetricsLoader(metrics_client, store),
        session=session,
        _clients=clients,
    )
    return console
