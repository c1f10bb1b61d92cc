"""Domain layer: hub entities, value objects and exceptions."""
