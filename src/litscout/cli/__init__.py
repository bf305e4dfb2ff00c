"""Command-line interface for LitScout."""
