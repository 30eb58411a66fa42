"""Raw GitHub content fetcher."""

from __future__ import annotations

from urllib.parse import quote, urljoin

import requests

from agentmanaged import __version__
from agentmanaged.ports.remote_fetcher import NetworkError, RemoteTextFetcher
from agentmanaged.settings import DEFAULT_FETCH_TIMEOUT, DEFAULT_MAX_REDIRECTS

RAW_BASE_URL = "https://raw.githubusercontent.com"
REDIRECT_STATUSES = frozenset({301, 302, 307, 308})
ERROR_BODY_LIMIT = 180

# characters encodeURIComponent leaves alone on top of quote()'s defaults
_URI_COMPONENT_SAFE = "!*'()"


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def build_raw_github_url(repo_slug: str, ref: str, relative_path: str) -> str:
    encoded_path = "/".join(encode_uri_component(part) for part in relative_path.split("/"))
    return f"{RAW_BASE_URL}/{repo_slug}/{encode_uri_component(ref)}/{encoded_path}"


class RawGitHubFetcher(RemoteTextFetcher):
    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
    ) -> None:
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._timeout = timeout
        self._max_redirects = max_redirects
        self._headers = {
            "User-Agent": f"agent-managed-files/{__version__}",
            "Accept": "text/plain",
        }

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def build_url(self, repo_slug: str, ref: str, relative_path: str) -> str:
        return build_raw_github_url(repo_slug, ref, relative_path)

    def fetch_text(self, url: str) -> str:
        current = url
        hops = 0
        while True:
            try:
                response = self._session.get(
                    current,
                    headers=self._headers,
                    timeout=self._timeout,
                    allow_redirects=False,
                )
            except requests.RequestException as exc:
                raise NetworkError(f"Request failed for {current}: {exc}") from exc

            status = response.status_code
            if status in REDIRECT_STATUSES:
                location = response.headers.get("Location")
                if not location:
                    raise NetworkError(f"Redirect without location for {current}", status_code=status)
                hops += 1
                if hops > self._max_redirects:
                    raise NetworkError(
                        f"Too many redirects ({hops}) while fetching {url}", status_code=status
                    )
                current = urljoin(current, location)
                continue

            body = response.content.decode("utf-8", errors="replace")
            if status < 200 or status >= 300:
                suffix = f": {body[:ERROR_BODY_LIMIT]}" if body else ""
                raise NetworkError(f"HTTP {status} for {current}{suffix}", status_code=status)
            return body


__all__ = ["RawGitHubFetcher", "build_raw_github_url", "encode_uri_component"]
