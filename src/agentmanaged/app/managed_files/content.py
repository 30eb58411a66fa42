"""Expected-content resolution: override, local template, remote template."""

from __future__ import annotations

import os
from pathlib import Path

from agentmanaged.app.managed_files.context import RunContext
from agentmanaged.domain.manifest import to_posix
from agentmanaged.domain.source import ResolvedContent


class SourceUnavailableError(RuntimeError):
    """Raised when no configured template source can supply a file."""


def read_text_exact(path: Path) -> str:
    """Read UTF-8 text without newline translation.

    Invalid byte sequences decode to U+FFFD, so a file that is not valid
    UTF-8 compares as different content instead of aborting the run.
    """

    with path.open("r", encoding="utf-8", errors="replace", newline="") as fh:
        return fh.read()


def write_text_exact(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as fh:
        fh.write(content)


def cache_key(repo_slug: str, ref: str, normalized_path: str) -> str:
    return f"{repo_slug}@{ref}:{normalized_path}"


def _relative_label(path: Path, root: Path) -> str:
    return to_posix(os.path.relpath(path, root))


def _template_content(context: RunContext, relative_path: str) -> ResolvedContent:
    source = context.source
    normalized = to_posix(relative_path)

    if source.uses_local and source.local_root is not None:
        local_file = source.local_root / normalized
        if local_file.is_file():
            return ResolvedContent(
                content=read_text_exact(local_file),
                source_label=f"template-local:{_relative_label(local_file, context.repo_root)}",
            )

    if not source.repo_slug:
        if source.local_available and source.local_root is not None:
            raise SourceUnavailableError(f"Template file missing locally: {normalized}")
        raise SourceUnavailableError(
            f"No template repo configured and local template path unavailable for {normalized}"
        )

    label = f"template-remote:{source.repo_slug}@{source.ref}/{normalized}"
    key = cache_key(source.repo_slug, source.ref, normalized)
    cached = context.cache.get(key)
    if cached is not None:
        return ResolvedContent(content=cached, source_label=label)

    url = context.fetcher.build_url(source.repo_slug, source.ref, normalized)
    content = context.fetcher.fetch_text(url)
    context.cache[key] = content
    return ResolvedContent(content=content, source_label=label)


def get_template_file_content(context: RunContext, relative_path: str) -> str:
    return _template_content(context, relative_path).content


def resolve_expected_content(context: RunContext, relative_path: str) -> ResolvedContent:
    """Return what ``relative_path`` should contain and where it came from.

    A file under the override root always wins; otherwise the template source
    decides (local unless remote is preferred, then the cached remote copy).
    """

    normalized = to_posix(relative_path)
    if context.override_root:
        override_path = context.repo_root / context.override_root / normalized
        if override_path.is_file():
            return ResolvedContent(
                content=read_text_exact(override_path),
                source_label=f"override:{_relative_label(override_path, context.repo_root)}",
            )
    return _template_content(context, normalized)


__all__ = [
    "SourceUnavailableError",
    "cache_key",
    "get_template_file_content",
    "read_text_exact",
    "resolve_expected_content",
    "write_text_exact",
]
