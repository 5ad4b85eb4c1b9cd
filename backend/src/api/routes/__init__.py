"""API route modules."""

from . import drafts, health

__all__ = ["drafts", "health"]
