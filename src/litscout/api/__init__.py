"""HTTP API for LitScout."""
