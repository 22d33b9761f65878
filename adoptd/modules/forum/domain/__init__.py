"""Domain layer: models, repository interfaces and services."""
