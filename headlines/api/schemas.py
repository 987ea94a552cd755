"""Pydantic request/response schemas for the Headlines API.

Article, ArticleDetail and DeleteResult domain models are returned
directly as response models; the schemas here cover what the domain
models do not: the note-creation request body, health, and errors.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CreateNoteRequest(BaseModel):
    """Body of ``POST /api/notes`` (JSON or form-encoded).

    ``_headlineId`` names the article to annotate.  Every other field is
    free-form Note content; ``title`` and ``body`` are the usual ones.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    headline_id: str = Field(alias="_headlineId", min_length=1, description="Target article id.")
    title: str = ""
    body: str = ""

    def note_content(self) -> dict[str, Any]:
        """Return the Note fields, without the target article id."""
        return self.model_dump(exclude={"headline_id"})


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    store: str
    source_url: str
    in_flight_writes: int


class ErrorResponse(BaseModel):
    """Standard error response body.

    ``detail`` carries the underlying store/transport message unchanged.
    """

    error: str
    detail: str | None = None
    provider: str | None = None
