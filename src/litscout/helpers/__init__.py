"""Pure parsing helpers shared by the source adapters."""
