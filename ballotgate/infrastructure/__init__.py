"""Infrastructure layer: observability and in-memory port implementations."""
