"""In-memory key-value server with lists, JSON documents, pub/sub and transactions."""

__version__ = "0.1.0"

__all__ = ["__version__"]