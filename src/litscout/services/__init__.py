"""Search, deduplication, enrichment and export services."""
