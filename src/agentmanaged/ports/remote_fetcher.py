"""Port definition for fetching template files from a remote source."""

from __future__ import annotations

from abc import ABC, abstractmethod


class NetworkError(RuntimeError):
    """Raised when a remote template file cannot be retrieved."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RemoteTextFetcher(ABC):
    @abstractmethod
    def build_url(self, repo_slug: str, ref: str, relative_path: str) -> str:
        """Return the URL serving ``relative_path`` of ``repo_slug`` at ``ref``."""

    @abstractmethod
    def fetch_text(self, url: str) -> str:
        """Return the decoded body for ``url`` or raise :class:`NetworkError`."""

    def close(self) -> None:
        """Release any connections held by the fetcher."""

    def __enter__(self) -> RemoteTextFetcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


__all__ = ["NetworkError", "RemoteTextFetcher"]
