"""Exception types raised by ParlayForge."""

from __future__ import annotations


class ParlayForgeError(Exception):
    """Base class for ParlayForge failures."""


class ConfigurationError(ParlayForgeError, ValueError):
    """Raised when a generation config is out of range."""


class LegRepositoryError(ParlayForgeError, RuntimeError):
    """Raised when the candidate leg store cannot be read."""
