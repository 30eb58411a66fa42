"""Profile selection for manifest entries."""

from __future__ import annotations

from typing import Iterable, Sequence

from agentmanaged.domain.manifest import ManagedFileEntry, Manifest

DEFAULT_PROFILES: tuple[str, ...] = ("base", "node-web")


def parse_profile_list(raw: str | None) -> list[str]:
    """Split a comma list from the command line into unique profile names."""

    if not raw:
        return []
    out: list[str] = []
    for part in raw.split(","):
        name = part.strip()
        if name and name not in out:
            out.append(name)
    return out


def resolve_active_profiles(manifest: Manifest, override: Sequence[str] | None = None) -> frozenset[str]:
    if override:
        return frozenset(override)
    if manifest.profiles:
        return frozenset(manifest.profiles)
    return frozenset(DEFAULT_PROFILES)


def is_entry_active(entry: ManagedFileEntry, active_profiles: Iterable[str]) -> bool:
    # one matching profile is enough
    if not entry.profiles:
        return True
    active = set(active_profiles)
    return any(profile in active for profile in entry.profiles)


__all__ = [
    "DEFAULT_PROFILES",
    "is_entry_active",
    "parse_profile_list",
    "resolve_active_profiles",
]
