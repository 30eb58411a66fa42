"""Managed-files domain exports."""

from .manifest import (
    DEFAULT_MANIFEST_PATH,
    DEFAULT_OVERRIDE_ROOT,
    DEFAULT_REF,
    ManagedFileEntry,
    Manifest,
    ManifestError,
    TemplateConfig,
)
from .profiles import DEFAULT_PROFILES, is_entry_active, parse_profile_list, resolve_active_profiles
from .source import ResolvedContent, TemplateSource, resolve_template_source

__all__ = [
    "DEFAULT_MANIFEST_PATH",
    "DEFAULT_OVERRIDE_ROOT",
    "DEFAULT_PROFILES",
    "DEFAULT_REF",
    "ManagedFileEntry",
    "Manifest",
    "ManifestError",
    "ResolvedContent",
    "TemplateConfig",
    "TemplateSource",
    "is_entry_active",
    "parse_profile_list",
    "resolve_active_profiles",
    "resolve_template_source",
]
