"""Domain layer: entities, calculations and the error taxonomy."""
