"""Managed file synchronisation for template-derived repositories."""

__version__ = "0.3.0"

__all__ = ["__version__"]
