"""Shared mapping from raw interface input to the application request DTO."""

from __future__ import annotations

from dataclasses import asdict
from enum import Enum
from typing import Any
from uuid import UUID

from alerta_rag.application.dto.query_dto import RetrievalRequest, RetrievalResponse
from alerta_rag.domain.errors import ProjectNotFoundError, ValidationError
from alerta_rag.domain.models import ExplainFocus


def build_request(
    question: str, focus: str | None, max_sources: int, project_id: str | None
) -> RetrievalRequest:
    """Raises ValidationError for an unknown focus and ProjectNotFoundError for a malformed id."""
    try:
        resolved_focus = ExplainFocus((focus or ExplainFocus.BUSINESS.value).upper())
    except ValueError as ex:
        raise ValidationError(f"unknown focus: {focus}") from ex
    project_uuid: UUID | None = None
    if project_id:
        try:
            project_uuid = UUID(project_id)
        except ValueError as ex:
            raise ProjectNotFoundError(project_id) from ex
    return RetrievalRequest(
        question=question,
        focus=resolved_focus,
        max_sources=max_sources,
        project_id=project_uuid,
    )


def response_to_dict(resp: RetrievalResponse) -> dict[str, Any]:
    """JSON-ready view of a response (enums as values, UUIDs as strings)."""
    data = asdict(resp)
    scope = data["project_scope"]
    if scope["project_id"] is not None:
        scope["project_id"] = str(scope["project_id"])
    return _plain(data)


def _plain(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    if isinstance(value, Enum):
        return value.value
    return value
