"""HTTP clients for external bibliographic databases."""
