# src/taskflow/transfer.py

"""
Export / import of local data (settings screen).

Export writes {user, tasks, exportDate}; `tasks` is the whole stored
collection, every user included. Import swaps the stored collection for
the document's `tasks` wholesale: no merge, no per-record checks.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any

from .accounts.account_models import User
from .core.clock import to_iso, utc_now
from .core.errors import InvalidImportFile
from .core.ports import TaskRepo

logger = logging.getLogger(__name__)


def export_document(user: User, tasks: TaskRepo, *, now: datetime | None = None) -> dict[str, Any]:
    return {
        "user": user.public().to_record(),
        "tasks": tasks.all_tasks(),
        "exportDate": to_iso(now or utc_now()),
    }


def export_filename(now: datetime | None = None) -> str:
    return f"taskflow-data-{(now or utc_now()).date().isoformat()}.json"


def export_to_file(
    user: User,
    tasks: TaskRepo,
    export_dir: str | Path,
    *,
    now: datetime | None = None,
) -> Path:
    now = now or utc_now()
    doc = export_document(user, tasks, now=now)
    out_dir = Path(export_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / export_filename(now)

    tmp = path.with_suffix(".tmp")
    tmp.write_text(json.dumps(doc, ensure_ascii=False, indent=2), "utf-8")
    os.replace(tmp, path)
    logger.info("Exported %d tasks to %s", len(doc["tasks"]), path)
    return path


def import_document(text: str, tasks: TaskRepo) -> int | None:
    """
    Apply an exported document. Returns the number of imported records,
    or None when the document carries no `tasks` (nothing changed).
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise InvalidImportFile(str(e)) from e
    if not isinstance(data, dict):
        raise InvalidImportFile("top-level JSON value is not an object")

    records = data.get("tasks")
    if records is None:
        logger.info("Import document has no tasks; store left unchanged.")
        return None
    if not isinstance(records, list):
        raise InvalidImportFile("'tasks' is not a list")

    tasks.replace_all(records)
    logger.info("Imported %d task records.", len(records))
    return len(records)


def import_from_file(path: str | Path, tasks: TaskRepo) -> int | None:
    try:
        text = Path(path).read_text("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidImportFile(str(e)) from e
    return import_document(text, tasks)
