"""Infrastructure layer: processor adapters, stubs and observability."""
