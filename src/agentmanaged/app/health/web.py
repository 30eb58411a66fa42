"""Liveness endpoints served over a lightweight HTTP server."""

from __future__ import annotations

import json
from dataclasses import dataclass
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, HTTPServer
from socketserver import ThreadingMixIn
from urllib.parse import urlparse

HEALTH_PATHS = frozenset({"/healthz", "/api/health"})
HEALTH_PAYLOAD: dict[str, object] = {"ok": True}


@dataclass
class HealthServerConfig:
    host: str = "127.0.0.1"
    port: int = 3000


class ThreadedHTTPServer(ThreadingMixIn, HTTPServer):
    daemon_threads = True


class HealthApp:
    """Answers ``GET /healthz`` and ``GET /api/health`` with ``{"ok": true}``."""

    def __init__(self, config: HealthServerConfig) -> None:
        self._config = config

    @property
    def config(self) -> HealthServerConfig:
        return self._config

    def create_server(self) -> ThreadedHTTPServer:
        class Handler(BaseHTTPRequestHandler):
            def log_message(self, format: str, *args: object) -> None:  # noqa: A003 - silence default logging
                return

            def _write_json(self, status: HTTPStatus, payload: dict[str, object]) -> None:
                data = json.dumps(payload).encode("utf-8")
                self.send_response(status)
                self.send_header("Content-Type", "application/json; charset=utf-8")
                self.send_header("Content-Length", str(len(data)))
                self.end_headers()
                self.wfile.write(data)

            def do_GET(self) -> None:  # noqa: N802
                if urlparse(self.path).path in HEALTH_PATHS:
                    self._write_json(HTTPStatus.OK, HEALTH_PAYLOAD)
                    return
                self._write_json(HTTPStatus.NOT_FOUND, {"ok": False, "error": "not found"})

        return ThreadedHTTPServer((self._config.host, self._config.port), Handler)


__all__ = ["HEALTH_PATHS", "HealthApp", "HealthServerConfig", "ThreadedHTTPServer"]
