"""Version information for the socklisten package."""

__version__ = "1.0.0"
