"""Application service for syncing and drift-checking managed files."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from agentmanaged.app.managed_files.content import (
    read_text_exact,
    resolve_expected_content,
    write_text_exact,
)
from agentmanaged.app.managed_files.context import RunContext
from agentmanaged.domain.manifest import ManagedFileEntry
from agentmanaged.domain.profiles import is_entry_active

REASON_DIFFERS = "content differs"
REASON_MISSING = "missing target file"


@dataclass(frozen=True)
class Mismatch:
    path: str
    reason: str
    expected_source: str

    def describe(self) -> str:
        return f"{self.path}: {self.reason} (expected from {self.expected_source})"

    def to_dict(self) -> Dict[str, str]:
        return {"path": self.path, "reason": self.reason, "expected_source": self.expected_source}


@dataclass
class CheckReport:
    checked: int
    mismatches: List[Mismatch] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.mismatches

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": "check",
            "checked": self.checked,
            "passed": self.passed,
            "mismatches": [item.to_dict() for item in self.mismatches],
        }


@dataclass
class SyncReport:
    updated: int = 0
    unchanged: int = 0
    synced: List[tuple[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": "sync",
            "updated": self.updated,
            "unchanged": self.unchanged,
            "synced": [{"path": path, "source": label} for path, label in self.synced],
        }


class DriftDetected(RuntimeError):
    """Raised by ``check`` once every mismatch has been collected."""

    def __init__(self, report: CheckReport) -> None:
        super().__init__(f"Managed file drift detected in {len(report.mismatches)} file(s)")
        self.report = report


class ManagedFilesService:
    def __init__(self, context: RunContext) -> None:
        self._context = context

    @property
    def context(self) -> RunContext:
        return self._context

    def active_entries(self) -> List[ManagedFileEntry]:
        active = self._context.active_profiles
        return [entry for entry in self._context.manifest.managed_files if is_entry_active(entry, active)]

    def check(self) -> CheckReport:
        entries = self.active_entries()
        report = CheckReport(checked=len(entries))
        for entry in entries:
            expected = resolve_expected_content(self._context, entry.path)
            target = self._context.repo_root / entry.normalized_path
            if not target.is_file():
                report.mismatches.append(Mismatch(entry.normalized_path, REASON_MISSING, expected.source_label))
                continue
            if read_text_exact(target) != expected.content:
                report.mismatches.append(Mismatch(entry.normalized_path, REASON_DIFFERS, expected.source_label))
        if report.mismatches:
            raise DriftDetected(report)
        return report

    def sync(self, on_update: Callable[[str, str], None] | None = None) -> SyncReport:
        report = SyncReport()
        for entry in self.active_entries():
            expected = resolve_expected_content(self._context, entry.path)
            target = self._context.repo_root / entry.normalized_path
            if target.is_file() and read_text_exact(target) == expected.content:
                report.unchanged += 1
                continue
            write_text_exact(target, expected.content)
            report.updated += 1
            report.synced.append((entry.normalized_path, expected.source_label))
            if on_update is not None:
                on_update(entry.normalized_path, expected.source_label)
        return report


__all__ = [
    "CheckReport",
    "DriftDetected",
    "ManagedFilesService",
    "Mismatch",
    "REASON_DIFFERS",
    "REASON_MISSING",
    "SyncReport",
]
