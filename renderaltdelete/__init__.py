"""Pick and bulk-delete services, Postgres and Redis instances from a Render workspace."""

__version__ = "0.1.0"
__all__ = ["client", "models", "tui"]