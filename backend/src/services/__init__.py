"""Services package for backend business logic.

draft_service is imported directly by callers; src.models depends on
draft_schema, so this package must not import modules that need src.models.
"""

from . import catalog_service

from .draft_errors import (
    DraftGenerationError,
    GenerationUnavailableError,
    ParseFailure,
)

__all__ = [
    "catalog_service",
    "DraftGenerationError",
    "GenerationUnavailableError",
    "ParseFailure",
]
