#!/usr/bin/env python3
"""Entry point for the agent-managed CLI."""

from __future__ import annotations

import argparse
import json
import subprocess
import sys
import time
from pathlib import Path
from textwrap import dedent

from agentmanaged import __version__
from agentmanaged.adapters.github_raw import RawGitHubFetcher
from agentmanaged.app.health import HealthApp, HealthServerConfig
from agentmanaged.app.managed_files import (
    DriftDetected,
    ManagedFilesService,
    RunContext,
    SourceUnavailableError,
    build_run_context,
)
from agentmanaged.domain.manifest import DEFAULT_MANIFEST_PATH, ManifestError
from agentmanaged.domain.profiles import parse_profile_list
from agentmanaged.ports.remote_fetcher import NetworkError
from agentmanaged.settings import SETTINGS
from agentmanaged.utils.telemetry import record_check, record_failure, record_serve, record_sync

PROG = "agent-managed"

HELP_OVERVIEW = dedent(
    """
    Keep template-managed files in sync with their template source.

      agent-managed check   - report drift without touching files (CI gate)
      agent-managed sync    - rewrite drifted or missing files
      agent-managed serve   - run the health-check HTTP endpoints

    Precedence: override dir > local template > remote template.
    Set AGENT_TEMPLATE_LOCAL_PATH to point at a local template checkout.
    """
)


def _resolve_repo_root(path_arg: str | None) -> Path:
    if path_arg:
        return Path(path_arg).expanduser().resolve()
    cwd = Path.cwd()
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError:
        return cwd
    top = result.stdout.strip()
    if result.returncode == 0 and top:
        return Path(top).resolve()
    return cwd


def _profiles_arg(raw: str) -> list[str]:
    profiles = parse_profile_list(raw)
    if not profiles:
        raise argparse.ArgumentTypeError("Missing value for --profiles")
    return profiles


def _build_context(args: argparse.Namespace, fetcher: RawGitHubFetcher) -> RunContext:
    return build_run_context(
        _resolve_repo_root(getattr(args, "path", None)),
        fetcher,
        manifest_path=args.manifest,
        prefer_remote=args.prefer_remote,
        profiles_override=args.profiles,
        local_path_override=SETTINGS.template_local_path,
    )


def _managed_files_cmd(args: argparse.Namespace) -> int:
    mode = args.command
    as_json = bool(getattr(args, "json", False))
    started = time.monotonic()
    with RawGitHubFetcher(timeout=SETTINGS.fetch_timeout, max_redirects=SETTINGS.max_redirects) as fetcher:
        try:
            context = _build_context(args, fetcher)
        except ManifestError as exc:
            print(str(exc), file=sys.stderr)
            return 1

        service = ManagedFilesService(context)
        if not service.active_entries():
            print("No managed files selected for active profiles; nothing to do.")
            return 0

        try:
            if mode == "check":
                return _run_check(service, as_json=as_json, started=started)
            return _run_sync(service, as_json=as_json, started=started)
        except (SourceUnavailableError, NetworkError, OSError) as exc:
            record_failure(SETTINGS, mode, context.repo_root, exc, duration_ms=_elapsed_ms(started))
            print(f"Managed files command failed: {exc}", file=sys.stderr)
            return 1


def _run_check(service: ManagedFilesService, *, as_json: bool, started: float) -> int:
    repo_root = service.context.repo_root
    try:
        report = service.check()
    except DriftDetected as exc:
        report = exc.report
        record_check(SETTINGS, repo_root, report, duration_ms=_elapsed_ms(started))
        if as_json:
            print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
        print("Managed file drift detected:", file=sys.stderr)
        for mismatch in report.mismatches:
            print(f"- {mismatch.describe()}", file=sys.stderr)
        print(f"Run: {PROG} sync", file=sys.stderr)
        return 1

    record_check(SETTINGS, repo_root, report, duration_ms=_elapsed_ms(started))
    if as_json:
        print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(f"Managed file drift check passed ({report.checked} files).")
    return 0


def _run_sync(service: ManagedFilesService, *, as_json: bool, started: float) -> int:
    def _announce(path: str, label: str) -> None:
        if not as_json:
            print(f"synced {path} <- {label}")

    report = service.sync(on_update=_announce)
    record_sync(SETTINGS, service.context.repo_root, report, duration_ms=_elapsed_ms(started))
    if as_json:
        print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(f"Managed file sync complete. Updated: {report.updated}, unchanged: {report.unchanged}.")
    return 0


def _serve_cmd(args: argparse.Namespace) -> int:
    app = HealthApp(HealthServerConfig(host=args.host, port=args.port))
    server = app.create_server()
    host, port = server.server_address[:2]
    record_serve(SETTINGS, str(host), int(port))
    print(f"Health endpoints listening on http://{host}:{port} (/healthz, /api/health)")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("Stopping health server")
    finally:
        server.server_close()
    return 0


def _elapsed_ms(started: float) -> float:
    return round((time.monotonic() - started) * 1000, 3)


def _add_managed_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--manifest",
        default=DEFAULT_MANIFEST_PATH,
        help=f"Manifest path relative to the repo root (default: {DEFAULT_MANIFEST_PATH})",
    )
    parser.add_argument(
        "--prefer-remote",
        action="store_true",
        help="Fetch template files remotely even when a local template is available",
    )
    parser.add_argument(
        "--profiles",
        type=_profiles_arg,
        help="Comma-separated active profiles (overrides the manifest)",
    )
    parser.add_argument("--path", help="Repository root (default: git toplevel or current directory)")
    parser.add_argument("--json", action="store_true", help="Emit the report as JSON")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description=HELP_OVERVIEW,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"{PROG} {__version__}")

    sub = parser.add_subparsers(dest="command", required=True)

    sync_cmd = sub.add_parser("sync", help="Write managed files from their template source")
    _add_managed_arguments(sync_cmd)
    sync_cmd.set_defaults(func=_managed_files_cmd)

    check_cmd = sub.add_parser("check", help="Report managed files that drifted from the template")
    _add_managed_arguments(check_cmd)
    check_cmd.set_defaults(func=_managed_files_cmd)

    serve_cmd = sub.add_parser("serve", help="Serve /healthz and /api/health")
    serve_cmd.add_argument("--host", default="127.0.0.1")
    serve_cmd.add_argument("--port", type=int, default=3000)
    serve_cmd.set_defaults(func=_serve_cmd)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
