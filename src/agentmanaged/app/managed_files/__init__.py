"""Managed-files sync and drift-check services."""

from .content import SourceUnavailableError, get_template_file_content, resolve_expected_content
from .context import RunContext, build_run_context
from .service import CheckReport, DriftDetected, ManagedFilesService, Mismatch, SyncReport

__all__ = [
    "CheckReport",
    "DriftDetected",
    "ManagedFilesService",
    "Mismatch",
    "RunContext",
    "SourceUnavailableError",
    "SyncReport",
    "build_run_context",
    "get_template_file_content",
    "resolve_expected_content",
]
