from __future__ import annotations

import http.client
import json
import threading
from typing import Iterator, Tuple

import pytest

from agentmanaged.app.health import HealthApp, HealthServerConfig


@pytest.fixture()
def server_port() -> Iterator[int]:
    app = HealthApp(HealthServerConfig(host="127.0.0.1", port=0))
    server = app.create_server()
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server.server_address[1]
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=2)


def _get(port: int, path: str) -> Tuple[int, str, dict]:
    conn = http.client.HTTPConnection("127.0.0.1", port, timeout=5)
    try:
        conn.request("GET", path)
        resp = conn.getresponse()
        return resp.status, resp.getheader("Content-Type", ""), json.loads(resp.read().decode("utf-8"))
    finally:
        conn.close()


@pytest.mark.parametrize("path", ["/healthz", "/api/health", "/healthz?verbose=1"])
def test_health_routes(server_port: int, path: str) -> None:
    status, content_type, payload = _get(server_port, path)
    assert status == 200
    assert content_type.startswith("application/json")
    assert payload == {"ok": True}


def test_unknown_route_is_404(server_port: int) -> None:
    status, _, payload = _get(server_port, "/api/other")
    assert status == 404
    assert payload["ok"] is False
