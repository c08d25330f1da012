from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Callable

from saas_admin_sdk.exceptions import ApiError, ValidationError
from saas_admin_sdk.listing import ListQuery, Page
from saas_admin_sdk.models import ExportFormat

from .error_presenter import present_error
from .export import export_current_view, save_bytes, save_export
from .logger import get_logger, log_action
from .notifications import NotificationService
from .resources import ActionSpec, ResourceConfig
from .state import Action, AsyncSlice, AsyncState, Store, register_fetch
from .ui.filters import FilterPanel, Scheduler, clean_filters, empty_filters
from .ui.forms import FormResult
from .ui.modal import ModalController, ModalMode
from .ui.pagination import PaginationControl, PaginationView, render_pagination
from .ui.table import TableView, cell_value, render_table, toggle_sort

logger = get_logger(__name__)


@dataclass(frozen=True)
class PageView:
    title: str
    filters: dict[str, Any]
    table: TableView
    pagination: PaginationView
    error: dict[str, Any] | None
    modal: dict[str, Any]
    loading: bool
    upload_progress: int | None = None


class ResourcePage:
    """One list screen: filters, table, pagination and modal around a slice."""

    def __init__(
        self,
        config: ResourceConfig,
        client: Any,
        store: Store,
        notifications: NotificationService,
        *,
        page_size: int = 10,
        export_dir: str | Path | None = None,
        scheduler: Scheduler | None = None,
        today: Callable[[], date] | None = None,
    ) -> None:
        self.config = config
        self.client = client
        self.store = store
        self.notifications = notifications
        self.export_dir = export_dir
        self._today = today or date.today
        # guards query against listeners running on effect threads
        self._lock = threading.RLock()
        self.slice = store.add_slice(AsyncSlice(config.name))
        register_fetch(store, self.slice, self._fetch)

        sort_by, sort_order = config.default_sort
        self.initial_filters = empty_filters(config.filters)
        self.query = ListQuery(page=1, limit=page_size, sort_by=sort_by, sort_order=sort_order, filters=self.initial_filters)
        self.filter_panel = FilterPanel(
            fields=config.filters,
            on_filter_change=self.on_filter_change,
            scheduler=scheduler,
            committed=dict(self.initial_filters),
        )
        self.pagination = PaginationControl(self.on_page_change, self.on_page_size_change)
        self.modal = ModalController()
        self.upload_progress: int | None = None
        self.mounted = False
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def state(self) -> AsyncState[Page[Any]]:
        return self.store.get_state(self.slice.name)

    @property
    def rows(self) -> tuple[Any, ...]:
        data = self.state.data
        return data.items if isinstance(data, Page) else ()

    def _fetch(self, query: ListQuery) -> Page[Any]:
        return self.client.list(query)

    def mount(self) -> Action:
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self._on_action)
        self.mounted = True
        return self.refresh()

    def unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.mounted = False

    def refresh(self) -> Action:
        with self._lock:
            return self.store.dispatch(self.slice.request(self.query))

    def _requery(self, query: ListQuery) -> Action:
        with self._lock:
            self.query = query
            return self.refresh()

    def _on_action(self, action: Action, store: Store) -> None:
        if action.type != self.slice.type("success") or not isinstance(action.payload, Page):
            return
        with self._lock:
            if self.slice.is_stale(store.get_state(self.slice.name), action):
                return
            clamped = self.query.clamped(action.payload.total_pages)
            if clamped.page != self.query.page:
                self._requery(clamped)

    def on_filter_change(self, filters: dict[str, Any]) -> None:
        with self._lock:
            query = self.query.with_filters({**self.initial_filters, **filters})
            self.filter_panel.sync(query.filters)
            self._requery(query)

    def on_sort(self, column_key: str) -> None:
        column = next((column for column in self.config.columns if column.key == column_key), None)
        if column is None or not column.sortable:
            raise ValueError(f"{column_key!r} is not a sortable column of {self.config.name}")
        with self._lock:
            sort_by, sort_order = toggle_sort(self.query.sort_by, self.query.sort_order, column.sort_key)
            self._requery(self.query.with_sort(sort_by, sort_order))

    def on_page_change(self, page: int) -> None:
        with self._lock:
            self._requery(self.query.with_page(page))

    def on_page_size_change(self, size: int) -> None:
        with self._lock:
            self._requery(self.query.with_limit(size))

    def go_to_page(self, page: int) -> bool:
        return self.pagination.go_to(self.query.page, self._total_pages(), page)

    def _total_pages(self) -> int:
        data = self.state.data
        return data.total_pages if isinstance(data, Page) else 1

    def dismiss_error(self) -> None:
        self.store.dispatch(self.slice.clear_error())

    def open_action(self, name: str, entity: Any = None) -> Any:
        spec = self.config.action(name)
        if entity is not None and not spec.visible(entity, self._today()):
            raise ValueError(f"{name!r} is not available for {getattr(entity, 'id', entity)!r}")
        if spec.mode is None:
            if spec.submit is None:
                raise ValueError(f"{name!r} is driven by its own page method")
            try:
                return self._run(spec, entity, {})
            except ApiError:
                return None
        initial = dict(spec.initial)
        if spec.load is not None:
            try:
                initial.update(spec.load(self.client, entity))
            except ApiError as exc:
                self._report_failure(spec, entity, exc)
                return None
        return self.modal.open(spec.mode, entity, action=name, initial=initial, today=self._today())

    def edit_modal(self, field_name: str, value: Any) -> None:
        self.modal.edit(field_name, value)

    def close_modal(self) -> None:
        self.modal.close()

    def submit_modal(self) -> FormResult | None:
        state = self.modal.state
        if not state.is_open or state.mode is ModalMode.DETAIL:
            return None
        spec = self.config.action(state.action or "")
        result = self.modal.validate(self._today())
        if not result.is_valid:
            return result
        self.modal.begin_submit()
        try:
            self._run(spec, state.target, result.values)
        except ApiError as exc:
            mapped = self.modal.apply_server_errors(exc.details) if isinstance(exc, ValidationError) else {}
            if not mapped:
                message = present_error(exc).message
                self.modal.fail(message)
                mapped = {"form": message}
            return FormResult(values=result.values, field_errors=mapped)
        self.modal.close()
        return result

    def _run(self, spec: ActionSpec, entity: Any, payload: dict[str, Any]) -> Any:
        entity_id = getattr(entity, "id", None)
        try:
            response = spec.submit(self.client, entity, payload)
        except ApiError as exc:
            self._report_failure(spec, entity, exc)
            raise
        log_action(logger, self.config.name, spec.name, "success", trace_id=self._trace_id(), entity_id=entity_id)
        if spec.download_name is not None and isinstance(response, bytes):
            path = save_bytes(response, spec.download_name(entity), self.export_dir)
            self.notifications.toast(level="success", message=spec.success_message, details={"path": str(path)})
            return path
        if spec.success_message:
            self.notifications.toast(level="success", message=spec.success_message)
        if spec.optimistic is not None and entity_id is not None:
            self.store.dispatch(self.slice.patch_item(entity_id, spec.optimistic(entity, payload)))
        if spec.refetch:
            self.refresh()
        return response

    def _report_failure(self, spec: ActionSpec, entity: Any, exc: ApiError) -> None:
        presented = present_error(exc)
        log_action(
            logger,
            self.config.name,
            spec.name,
            "failure",
            trace_id=presented.trace_id,
            entity_id=getattr(entity, "id", None),
            status_code=exc.status_code,
        )
        self.notifications.toast(level="error", message=presented.message, trace_id=presented.trace_id)

    def _trace_id(self) -> str | None:
        http = getattr(self.client, "http", None)
        trace = getattr(http, "trace", None)
        return getattr(trace, "trace_id", None)

    def bulk(self, name: str, ids: list[str]) -> Any:
        if name not in self.config.bulk_actions:
            raise KeyError(f"{self.config.name} has no bulk action {name!r}")
        if not ids:
            raise ValueError("select at least one row")
        try:
            response = self.config.bulk_actions[name](self.client, list(ids))
        except ApiError as exc:
            self._report_failure(ActionSpec(name=f"bulk_{name}", label=name), None, exc)
            return None
        log_action(logger, self.config.name, f"bulk_{name}", "success", trace_id=self._trace_id(), count=len(ids))
        self.notifications.toast(level="success", message=f"{len(ids)} item(s) processed")
        self.refresh()
        return response

    def export(self, export_format: ExportFormat | str) -> Path | None:
        fmt = ExportFormat(export_format)
        if fmt not in self.config.export_formats:
            raise ValueError(f"{self.config.name} cannot be exported as {fmt.value}")
        try:
            content = self.client.export(fmt, self.query)
        except ApiError as exc:
            self._report_failure(ActionSpec(name="export", label="Export"), None, exc)
            return None
        path = save_export(content, resource=self.config.title, export_format=fmt, directory=self.export_dir, today=self._today())
        log_action(logger, self.config.name, "export", "success", trace_id=self._trace_id(), format=fmt.value)
        self.notifications.toast(level="success", message=f"Exported {path.name}", details={"path": str(path)})
        return path

    def export_current_view(self) -> Path:
        columns = self.config.columns
        today = self._today()
        rows = [{column.key: cell_value(entity, column, today) for column in columns} for entity in self.rows]
        path = export_current_view(
            resource=self.config.title,
            rows=rows,
            headers=[column.key for column in columns],
            directory=self.export_dir,
            filters=clean_filters(self.query.filters),
        )
        self.notifications.toast(level="success", message=f"Exported {path.name}", details={"path": str(path)})
        return path

    def upload(
        self,
        document: Any,
        *,
        file_name: str,
        content: bytes,
        content_type: str = "application/octet-stream",
        on_progress: Callable[[int], None] | None = None,
    ) -> Any:
        upload_file = getattr(self.client, "upload_file", None)
        if upload_file is None:
            raise ValueError(f"{self.config.name} does not accept uploads")

        def track(percent: int) -> None:
            self.upload_progress = percent
            if on_progress:
                on_progress(percent)

        self.upload_progress = 0
        try:
            result = upload_file(
                document.id,
                file_name=file_name,
                content=content,
                content_type=content_type,
                on_progress=track,
            )
        except ApiError as exc:
            self.upload_progress = None
            self._report_failure(ActionSpec(name="upload", label="Upload"), document, exc)
            return None
        log_action(logger, self.config.name, "upload", "success", entity_id=document.id, file_size=len(content))
        self.notifications.toast(level="success", message=f"Uploaded {file_name}")
        self.upload_progress = None
        self.refresh()
        return result

    def render(self) -> PageView:
        state = self.state
        data = state.data if isinstance(state.data, Page) else None
        total = data.total if data else 0
        total_pages = data.total_pages if data else 1
        error = None
        if state.error:
            error = {"message": state.error, "trace_id": state.trace_id, "dismissible": True}
        return PageView(
            title=self.config.title,
            filters=self.filter_panel.render(),
            table=render_table(
                rows=self.rows,
                loading=state.loading,
                limit=self.query.limit,
                columns=self.config.columns,
                actions=self.config.row_actions,
                sort_by=self.query.sort_by,
                sort_order=self.query.sort_order,
                empty_message=self.config.empty_message,
                today=self._today(),
            ),
            pagination=render_pagination(self.query.page, total_pages, total, self.query.limit),
            error=error,
            modal=self.modal.state.render(),
            loading=state.loading,
            upload_progress=self.upload_progress,
        )
