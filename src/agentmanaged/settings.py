"""Runtime settings for the agent-managed CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from agentmanaged import __version__

HOME_ENV = "AGENTMANAGED_HOME"
TEMPLATE_LOCAL_PATH_ENV = "AGENT_TEMPLATE_LOCAL_PATH"
FETCH_TIMEOUT_ENV = "AGENTMANAGED_FETCH_TIMEOUT"
MAX_REDIRECTS_ENV = "AGENTMANAGED_MAX_REDIRECTS"

DEFAULT_FETCH_TIMEOUT = 30.0
DEFAULT_MAX_REDIRECTS = 5


@dataclass(frozen=True)
class RuntimeSettings:
    home_dir: Path
    state_dir: Path
    log_dir: Path
    template_local_path: str | None = None
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    cli_version: str = __version__

    @property
    def telemetry_file(self) -> Path:
        return self.log_dir / "telemetry.jsonl"


def _default_home_dir(environ: Mapping[str, str]) -> Path:
    override = environ.get(HOME_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".agentmanaged"


def _float_env(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _int_env(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= 0 else default


def load_settings(environ: Mapping[str, str] | None = None) -> RuntimeSettings:
    env = os.environ if environ is None else environ
    base = _default_home_dir(env)
    local_path = env.get(TEMPLATE_LOCAL_PATH_ENV, "").strip() or None
    return RuntimeSettings(
        home_dir=base,
        state_dir=base / "state",
        log_dir=base / "logs",
        template_local_path=local_path,
        fetch_timeout=_float_env(env, FETCH_TIMEOUT_ENV, DEFAULT_FETCH_TIMEOUT),
        max_redirects=_int_env(env, MAX_REDIRECTS_ENV, DEFAULT_MAX_REDIRECTS),
    )


SETTINGS = load_settings()
