"""Version information for file-lock-manager."""

__version__ = "1.0.0"
