from __future__ import annotations

import csv
from datetime import date, datetime
from pathlib import Path
from typing import Any

from platformdirs import user_downloads_dir

from saas_admin_sdk.models import ExportFormat

from .ui.table import sanitize_row


def default_export_dir() -> Path:
    return Path(user_downloads_dir())


def export_filename(resource: str, export_format: ExportFormat | str, today: date | None = None) -> str:
    fmt = ExportFormat(export_format)
    return f"{resource}_{(today or date.today()).isoformat()}.{fmt.extension}"


def save_bytes(content: bytes, filename: str, directory: str | Path | None = None) -> Path:
    destination = Path(directory) if directory else default_export_dir()
    destination.mkdir(parents=True, exist_ok=True)
    path = destination / filename
    path.write_bytes(content)
    return path


def save_export(
    content: bytes,
    *,
    resource: str,
    export_format: ExportFormat | str,
    directory: str | Path | None = None,
    today: date | None = None,
) -> Path:
    return save_bytes(content, export_filename(resource, export_format, today), directory)


def export_current_view(
    *,
    resource: str,
    rows: list[dict[str, Any]],
    headers: list[str],
    directory: str | Path | None = None,
    filters: dict[str, Any] | None = None,
    now: datetime | None = None,
) -> Path:
    """Write the rows on screen to CSV; sensitive columns are blanked."""
    destination = Path(directory) if directory else default_export_dir()
    destination.mkdir(parents=True, exist_ok=True)

    now = now or datetime.now().astimezone()
    path = destination / export_filename(resource, ExportFormat.CSV, now.date())

    with path.open("w", newline="", encoding="utf-8-sig") as handle:
        handle.write(f"# exported_at: {now.isoformat()}\n")
        handle.write(f"# resource: {resource}\n")
        handle.write(f"# filters: {filters or {}}\n")
        writer = csv.DictWriter(handle, fieldnames=headers, extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow(sanitize_row(row, headers=headers))

    return path
