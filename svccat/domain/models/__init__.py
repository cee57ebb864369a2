"""Domain models: value objects and policies shared across layers."""
