"""API route modules."""

from . import ai, auth, health, todos

__all__ = ["health", "ai", "auth", "todos"]
