"""Exceptions raised by the packing core."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Structurally invalid input (bad container, no orientations, unknown algorithm)."""
