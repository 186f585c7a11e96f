"""
Spreadgraph Exceptions
======================

Exception hierarchy for the activation network.

Exception Hierarchy:
    SpreadGraphError (base)
    ├── IdCollisionError
    ├── ConceptNotFoundError
    ├── InvalidSelectionError (also TypeError)
    └── ConfigurationError (also ValueError)

Usage Guidelines:
    - Removal operations tolerate missing ids and return False instead of raising
    - Lookups and connections raise ConceptNotFoundError for unknown ids
    - Weights outside [0, 1] are clamped, never rejected
"""

from typing import Optional


class SpreadGraphError(Exception):
    """
    Base exception for all spreadgraph errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for the calling layer
        context: Additional context about the error
    """

    error_code: str = "SPREADGRAPH_ERROR"

    def __init__(self, message: str, context: Optional[dict] = None,
                 error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        if error_code is not None:
            self.error_code = error_code

    def to_dict(self) -> dict:
        """Serializable form for the calling layer."""
        return {
            'error': self.error_code,
            'message': self.message,
            'context': dict(self.context),
        }


class IdCollisionError(SpreadGraphError):
    """Raised when a concept is created with an id that already exists."""

    error_code = "ID_COLLISION"

    def __init__(self, concept_id: str):
        super().__init__(
            f"Concept with ID {concept_id} already exists",
            context={'concept_id': concept_id},
        )
        self.concept_id = concept_id


class ConceptNotFoundError(SpreadGraphError):
    """Raised when a lookup or connection references an unknown concept."""

    error_code = "CONCEPT_NOT_FOUND"

    def __init__(self, concept_id: str):
        super().__init__(
            f"Concept {concept_id} not found",
            context={'concept_id': concept_id},
        )
        self.concept_id = concept_id


class InvalidSelectionError(SpreadGraphError, TypeError):
    """Raised when initial activation is seeded with an unusable selection."""

    error_code = "INVALID_SELECTION"


class ConfigurationError(SpreadGraphError, ValueError):
    """Raised for invalid or unknown activation parameters."""

    error_code = "CONFIGURATION_ERROR"
