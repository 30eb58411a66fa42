"""Template source resolution and resolved-content value objects."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from agentmanaged.domain.manifest import TemplateConfig, non_empty_string


@dataclass(frozen=True)
class TemplateSource:
    """Where template content comes from for a single run."""

    local_root: Path | None
    local_available: bool
    prefer_remote: bool
    repo_slug: str | None
    ref: str

    @property
    def uses_local(self) -> bool:
        return not self.prefer_remote and self.local_available and self.local_root is not None

    def describe(self) -> str:
        parts: list[str] = []
        if self.local_root is not None:
            state = "available" if self.local_available else "missing"
            parts.append(f"local={self.local_root} ({state})")
        if self.repo_slug:
            parts.append(f"remote={self.repo_slug}@{self.ref}")
        if self.prefer_remote:
            parts.append("prefer-remote")
        return ", ".join(parts) or "no template source"


@dataclass(frozen=True)
class ResolvedContent:
    content: str
    source_label: str


def resolve_template_source(
    template: TemplateConfig,
    repo_root: Path,
    prefer_remote: bool,
    *,
    local_path_override: str | None = None,
) -> TemplateSource:
    """Build the run's :class:`TemplateSource` without touching the network.

    ``local_path_override`` comes from the environment and beats the
    manifest's ``localPath``. Relative paths resolve against ``repo_root``.
    """

    local_path = non_empty_string(local_path_override) or template.local_path
    local_root = Path(os.path.abspath(repo_root / Path(local_path).expanduser())) if local_path else None
    return TemplateSource(
        local_root=local_root,
        local_available=bool(local_root is not None and local_root.exists()),
        prefer_remote=prefer_remote,
        repo_slug=template.repo,
        ref=template.ref,
    )


__all__ = ["ResolvedContent", "TemplateSource", "resolve_template_source"]
