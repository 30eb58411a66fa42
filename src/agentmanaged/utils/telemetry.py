"""Run events for managed-file commands, appended to ``telemetry.jsonl``.

Recording is best-effort: an unwritable log directory never changes the
outcome of a sync or a drift check.
"""

from __future__ import annotations

import json
import os
import time
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import jsonschema

from agentmanaged.app.managed_files.service import CheckReport, SyncReport
from agentmanaged.settings import RuntimeSettings

TELEMETRY_ENV = "AGENTMANAGED_TELEMETRY"

_DISABLE_VALUES = {"0", "false", "no", "off"}


def telemetry_enabled() -> bool:
    return os.getenv(TELEMETRY_ENV, "1").strip().lower() not in _DISABLE_VALUES


@lru_cache(maxsize=1)
def _validator() -> jsonschema.Draft202012Validator:
    schema_resource = resources.files("agentmanaged.resources") / "telemetry.schema.json"
    return jsonschema.Draft202012Validator(json.loads(schema_resource.read_text(encoding="utf-8")))


def _emit(settings: RuntimeSettings, record: dict[str, Any]) -> None:
    if not telemetry_enabled():
        return
    record["ts"] = time.time()
    _validator().validate(record)
    log_path = settings.telemetry_file
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        with log_path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(record, ensure_ascii=False) + "\n")
    except OSError:
        return


def record_sync(settings: RuntimeSettings, repo_root: Path, report: SyncReport, *, duration_ms: float) -> None:
    _emit(
        settings,
        {
            "event": "managed.sync",
            "level": "info",
            "status": "success",
            "component": "managed-files",
            "payload": {"repo_root": str(repo_root), "updated": report.updated, "unchanged": report.unchanged},
            "durationMs": duration_ms,
        },
    )


def record_check(settings: RuntimeSettings, repo_root: Path, report: CheckReport, *, duration_ms: float) -> None:
    _emit(
        settings,
        {
            "event": "managed.check",
            "level": "info" if report.passed else "warn",
            "status": "success" if report.passed else "drift",
            "component": "managed-files",
            "payload": {
                "repo_root": str(repo_root),
                "checked": report.checked,
                "mismatches": len(report.mismatches),
            },
            "durationMs": duration_ms,
        },
    )


def record_failure(
    settings: RuntimeSettings, mode: str, repo_root: Path, error: BaseException, *, duration_ms: float
) -> None:
    _emit(
        settings,
        {
            "event": f"managed.{mode}",
            "level": "error",
            "status": "error",
            "component": "managed-files",
            "payload": {"repo_root": str(repo_root), "error": str(error)},
            "durationMs": duration_ms,
        },
    )


def record_serve(settings: RuntimeSettings, host: str, port: int) -> None:
    _emit(
        settings,
        {
            "event": "health.serve",
            "level": "info",
            "status": "started",
            "component": "health",
            "payload": {"host": host, "port": port},
        },
    )


__all__ = ["record_check", "record_failure", "record_serve", "record_sync", "telemetry_enabled"]
