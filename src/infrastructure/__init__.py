"""Infrastructure layer: settings, logging, the database pool and repositories."""

__all__ = [
    "config",
    "logging",
    "persistence",
    "repositories",
]
