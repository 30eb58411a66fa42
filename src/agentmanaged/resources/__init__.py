"""Packaged resources for agent-managed."""
