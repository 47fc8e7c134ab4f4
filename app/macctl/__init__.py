"""macctl - Declarative workstation configuration for macOS."""

__version__ = "0.3.0"
