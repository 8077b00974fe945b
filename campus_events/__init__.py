"""Campus Events: role-based college event approval service."""

__version__ = "0.1.0"
