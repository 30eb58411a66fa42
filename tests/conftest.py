from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Dict, List

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
PYTEST_TEMP = Path(os.environ.get("PYTEST_DEBUG_TEMPROOT", "/tmp/agentmanaged-pytest")).resolve()
os.environ.setdefault("PYTEST_DEBUG_TEMPROOT", str(PYTEST_TEMP))
PYTEST_TEMP.mkdir(parents=True, exist_ok=True)
os.environ.setdefault("AGENTMANAGED_HOME", str(PYTEST_TEMP / "global-home"))
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from agentmanaged.ports.remote_fetcher import NetworkError, RemoteTextFetcher  # noqa: E402


class FakeFetcher(RemoteTextFetcher):
    """In-memory remote keyed by ``repo@ref:path``."""

    def __init__(self) -> None:
        self.files: Dict[str, str] = {}
        self.calls: List[str] = []

    def add(self, repo_slug: str, ref: str, path: str, content: str) -> None:
        self.files[self.build_url(repo_slug, ref, path)] = content

    def build_url(self, repo_slug: str, ref: str, relative_path: str) -> str:
        return f"fake://{repo_slug}@{ref}/{relative_path}"

    def fetch_text(self, url: str) -> str:
        self.calls.append(url)
        if url not in self.files:
            raise NetworkError(f"HTTP 404 for {url}: 404: Not Found", status_code=404)
        return self.files[url]


@pytest.fixture()
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()
