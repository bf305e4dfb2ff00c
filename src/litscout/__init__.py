"""LitScout: search bibliographic databases in parallel and build a deduplicated corpus."""

__version__ = "0.1.0"
