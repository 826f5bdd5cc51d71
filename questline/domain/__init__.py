"""Domain layer: aggregates, entities and value objects."""
