"""Health-check HTTP surface."""

from .web import HealthApp, HealthServerConfig

__all__ = ["HealthApp", "HealthServerConfig"]
