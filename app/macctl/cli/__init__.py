"""Command-line interface for macctl."""
