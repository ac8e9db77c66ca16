"""Domain layer: message value objects and error types."""
