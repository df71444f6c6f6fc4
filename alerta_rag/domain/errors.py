"""Domain errors (typed) for business-rule retrieval.

Why: Unified error family for the Application layer, without Infra leaks.
Caller errors are returned to the interface; sub-system errors are caught
by the use case and degraded.
"""

from dataclasses import dataclass


class DomainError(Exception):
    """Base class for domain-specific errors."""


class ValidationError(DomainError):
    """Invalid input/domain state."""


@dataclass(frozen=True)
class ProjectNotFoundError(DomainError):
    """Requested project scope does not exist."""

    project_id: str

    def __str__(self) -> str:
        return f"project not found: {self.project_id}"


# Infrastructure-mapped errors
class EmbeddingError(DomainError):
    """Embedding backend failed or is misconfigured."""


class VectorStoreError(DomainError):
    """Vector store backend failed or is misconfigured."""


class AnswerGenerationError(DomainError):
    """Answer generator backend failed or is misconfigured."""


class RepositoryError(DomainError):
    """Rule/incident/ownership data could not be loaded."""
