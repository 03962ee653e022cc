from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when a board, catalog or config is built from invalid values."""
