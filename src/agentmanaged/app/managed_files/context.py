"""Explicit per-run state for the managed-files engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Sequence

from agentmanaged.domain.manifest import DEFAULT_MANIFEST_PATH, Manifest
from agentmanaged.domain.profiles import resolve_active_profiles
from agentmanaged.domain.source import TemplateSource, resolve_template_source
from agentmanaged.ports.remote_fetcher import RemoteTextFetcher


@dataclass
class RunContext:
    repo_root: Path
    manifest: Manifest
    active_profiles: frozenset[str]
    source: TemplateSource
    fetcher: RemoteTextFetcher
    cache: Dict[str, str] = field(default_factory=dict)

    @property
    def override_root(self) -> str:
        return self.manifest.override_root


def build_run_context(
    repo_root: Path,
    fetcher: RemoteTextFetcher,
    *,
    manifest_path: str = DEFAULT_MANIFEST_PATH,
    prefer_remote: bool = False,
    profiles_override: Sequence[str] | None = None,
    local_path_override: str | None = None,
) -> RunContext:
    """Load the manifest and resolve profiles and template source once."""

    manifest = Manifest.load(repo_root / manifest_path, display_root=repo_root)
    return RunContext(
        repo_root=repo_root,
        manifest=manifest,
        active_profiles=resolve_active_profiles(manifest, profiles_override),
        source=resolve_template_source(
            manifest.template,
            repo_root,
            prefer_remote,
            local_path_override=local_path_override,
        ),
        fetcher=fetcher,
    )


__all__ = ["RunContext", "build_run_context"]
