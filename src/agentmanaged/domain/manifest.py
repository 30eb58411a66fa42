"""Domain model for the managed-files manifest."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping

DEFAULT_MANIFEST_PATH = ".agent-managed.json"
DEFAULT_OVERRIDE_ROOT = ".agent-overrides"
DEFAULT_REF = "main"


class ManifestError(RuntimeError):
    """Raised when the manifest is missing or structurally invalid."""


def non_empty_string(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def normalize_string_list(value: Any) -> list[str]:
    """Trim, drop blanks and de-duplicate while keeping first-seen order."""

    if not isinstance(value, list):
        return []
    out: list[str] = []
    seen: set[str] = set()
    for item in value:
        text = non_empty_string(item)
        if text is None or text in seen:
            continue
        seen.add(text)
        out.append(text)
    return out


def to_posix(path: str) -> str:
    return "/".join(path.split(os.sep))


@dataclass(frozen=True)
class TemplateConfig:
    repo: str | None = None
    ref: str = DEFAULT_REF
    local_path: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> "TemplateConfig":
        if not isinstance(payload, dict):
            return cls()
        return cls(
            repo=non_empty_string(payload.get("repo")),
            ref=non_empty_string(payload.get("ref")) or DEFAULT_REF,
            local_path=non_empty_string(payload.get("localPath")),
        )


@dataclass(frozen=True)
class ManagedFileEntry:
    path: str
    profiles: tuple[str, ...] = ()

    @property
    def normalized_path(self) -> str:
        return to_posix(self.path)

    @classmethod
    def from_payload(cls, payload: Any) -> "ManagedFileEntry":
        if not isinstance(payload, dict):
            raise ManifestError("Each managed_files entry must include a non-empty path.")
        path = non_empty_string(payload.get("path"))
        if path is None:
            raise ManifestError("Each managed_files entry must include a non-empty path.")
        return cls(path=path, profiles=tuple(normalize_string_list(payload.get("profiles"))))


@dataclass(frozen=True)
class Manifest:
    managed_files: tuple[ManagedFileEntry, ...]
    profiles: tuple[str, ...] = ()
    template: TemplateConfig = field(default_factory=TemplateConfig)
    override_root: str = DEFAULT_OVERRIDE_ROOT
    source_path: Path | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], *, label: str = DEFAULT_MANIFEST_PATH) -> "Manifest":
        raw_entries = payload.get("managed_files") if isinstance(payload, Mapping) else None
        if not isinstance(raw_entries, list) or not raw_entries:
            raise ManifestError(f"{label} must define non-empty managed_files.")
        entries = tuple(ManagedFileEntry.from_payload(item) for item in raw_entries)
        return cls(
            managed_files=entries,
            profiles=tuple(normalize_string_list(payload.get("profiles"))),
            template=TemplateConfig.from_payload(payload.get("template")),
            override_root=non_empty_string(payload.get("overrideRoot")) or DEFAULT_OVERRIDE_ROOT,
        )

    @classmethod
    def load(cls, path: Path, *, display_root: Path | None = None) -> "Manifest":
        label = _display_path(path, display_root)
        if not path.exists():
            raise ManifestError(f"Managed manifest not found: {label}")
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ManifestError(f"Unable to parse JSON at {label}: {exc}") from exc
        if not isinstance(payload, dict):
            raise ManifestError(f"{label} must define non-empty managed_files.")
        return replace(cls.from_payload(payload, label=label), source_path=path)


def _display_path(path: Path, root: Path | None) -> str:
    if root is None:
        return to_posix(str(path))
    return to_posix(os.path.relpath(path, root))


__all__ = [
    "DEFAULT_MANIFEST_PATH",
    "DEFAULT_OVERRIDE_ROOT",
    "DEFAULT_REF",
    "ManagedFileEntry",
    "Manifest",
    "ManifestError",
    "TemplateConfig",
    "non_empty_string",
    "normalize_string_list",
    "to_posix",
]
