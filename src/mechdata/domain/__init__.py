"""Domain layer: model, parsers, reference catalog, ingestion and reconciliation."""
