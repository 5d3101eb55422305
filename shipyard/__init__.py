"""Release tagging and multi-architecture image publishing."""

__version__ = "0.1.0"
