"""Block-paginated query service for indexed blockchain events."""

__version__ = "0.1.0"

__all__ = ["__version__"]
