"""Infrastructure layer: logging and wire serialization."""
