from __future__ import annotations

from pathlib import Path

import pytest

from agentmanaged.app.managed_files.content import (
    SourceUnavailableError,
    get_template_file_content,
    read_text_exact,
    resolve_expected_content,
)
from agentmanaged.app.managed_files.context import RunContext
from agentmanaged.domain.manifest import ManagedFileEntry, Manifest, TemplateConfig
from agentmanaged.domain.source import resolve_template_source


def _context(
    repo: Path,
    fetcher,
    *,
    repo_slug: str | None = "org/template",
    local_path: str | None = None,
    prefer_remote: bool = False,
    override_root: str = ".agent-overrides",
) -> RunContext:
    template = TemplateConfig(repo=repo_slug, ref="main", local_path=local_path)
    manifest = Manifest(
        managed_files=(ManagedFileEntry("README.md"),),
        template=template,
        override_root=override_root,
    )
    return RunContext(
        repo_root=repo,
        manifest=manifest,
        active_profiles=frozenset({"base"}),
        source=resolve_template_source(template, repo, prefer_remote),
        fetcher=fetcher,
    )


@pytest.fixture()
def repo(tmp_path: Path) -> Path:
    root = tmp_path / "repo"
    root.mkdir()
    return root


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(text.encode("utf-8"))


def test_override_beats_local_and_remote(repo: Path, fake_fetcher) -> None:
    _write(repo / ".agent-overrides" / "docs" / "RULES.md", "override\n")
    _write(repo / "tpl" / "docs" / "RULES.md", "local\n")
    fake_fetcher.add("org/template", "main", "docs/RULES.md", "remote\n")
    context = _context(repo, fake_fetcher, local_path="tpl")

    resolved = resolve_expected_content(context, "docs/RULES.md")

    assert resolved.content == "override\n"
    assert resolved.source_label == "override:.agent-overrides/docs/RULES.md"
    assert fake_fetcher.calls == []


def test_override_wins_even_when_remote_preferred(repo: Path, fake_fetcher) -> None:
    _write(repo / ".agent-overrides" / "README.md", "override\n")
    fake_fetcher.add("org/template", "main", "README.md", "remote\n")
    context = _context(repo, fake_fetcher, prefer_remote=True)

    assert resolve_expected_content(context, "README.md").content == "override\n"


def test_local_beats_remote(repo: Path, fake_fetcher) -> None:
    _write(repo / "tpl" / "README.md", "local\n")
    fake_fetcher.add("org/template", "main", "README.md", "remote\n")
    context = _context(repo, fake_fetcher, local_path="tpl")

    resolved = resolve_expected_content(context, "README.md")

    assert resolved.content == "local\n"
    assert resolved.source_label == "template-local:tpl/README.md"
    assert fake_fetcher.calls == []


def test_prefer_remote_skips_local(repo: Path, fake_fetcher) -> None:
    _write(repo / "tpl" / "README.md", "local\n")
    fake_fetcher.add("org/template", "main", "README.md", "remote\n")
    context = _context(repo, fake_fetcher, local_path="tpl", prefer_remote=True)

    resolved = resolve_expected_content(context, "README.md")

    assert resolved.content == "remote\n"
    assert resolved.source_label == "template-remote:org/template@main/README.md"


def test_local_miss_falls_back_to_remote_with_remote_label(repo: Path, fake_fetcher) -> None:
    (repo / "tpl").mkdir()
    fake_fetcher.add("org/template", "main", "README.md", "remote\n")
    context = _context(repo, fake_fetcher, local_path="tpl")

    resolved = resolve_expected_content(context, "README.md")

    assert resolved.content == "remote\n"
    assert resolved.source_label.startswith("template-remote:")


def test_remote_fetches_are_cached(repo: Path, fake_fetcher) -> None:
    fake_fetcher.add("org/template", "main", "README.md", "remote\n")
    context = _context(repo, fake_fetcher)

    first = get_template_file_content(context, "README.md")
    second = get_template_file_content(context, "README.md")

    assert first == second == "remote\n"
    assert len(fake_fetcher.calls) == 1
    assert context.cache == {"org/template@main:README.md": "remote\n"}


def test_missing_locally_without_repo(repo: Path, fake_fetcher) -> None:
    (repo / "tpl").mkdir()
    context = _context(repo, fake_fetcher, repo_slug=None, local_path="tpl")
    with pytest.raises(SourceUnavailableError, match="Template file missing locally: README.md"):
        get_template_file_content(context, "README.md")


def test_no_source_at_all(repo: Path, fake_fetcher) -> None:
    context = _context(repo, fake_fetcher, repo_slug=None, local_path="does-not-exist")
    with pytest.raises(SourceUnavailableError, match="No template repo configured"):
        get_template_file_content(context, "README.md")


def test_read_text_exact_keeps_crlf(tmp_path: Path) -> None:
    target = tmp_path / "crlf.txt"
    target.write_bytes(b"a\r\nb\r\n")
    assert read_text_exact(target) == "a\r\nb\r\n"
