"""Citation schemas for chunk-addressed source references.

A structured citation points a claim at an exact character range of an
ingested document. Its canonical string form is
``<document_id>.<page>.<start_offset>-<end_offset>``.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

EXCERPT_MAX_CHARS = 200


class StructuredCitation(BaseModel):
    """A reference from a claim to the exact chunk text supporting it."""

    model_config = ConfigDict(frozen=True)

    document_id: str = Field(
        ...,
        min_length=1,
        pattern=r"^\S+$",
        description="Source document id (non-empty, no whitespace)",
    )
    page: int = Field(..., ge=1, description="1-indexed page number")
    start_offset: int = Field(..., ge=0, description="Start character offset (inclusive)")
    end_offset: int = Field(..., ge=1, description="End character offset (exclusive)")
    excerpt: str = Field(default="", description="Excerpt of the cited text, truncated to 200 characters")
    chunk_id: Optional[str] = Field(None, description="Id of the chunk the citation was resolved from")

    @field_validator("excerpt", mode="before")
    @classmethod
    def _truncate_excerpt(cls, v):
        if isinstance(v, str):
            return v[:EXCERPT_MAX_CHARS]
        return v

    @model_validator(mode="after")
    def _check_span(self) -> "StructuredCitation":
        if self.end_offset <= self.start_offset:
            raise ValueError("end_offset must be greater than start_offset")
        return self

    @property
    def canonical(self) -> str:
        """Canonical citation string for this citation."""
        return f"{self.document_id}.{self.page}.{self.start_offset}-{self.end_offset}"

    def same_address(self, other: "StructuredCitation") -> bool:
        """Whether both citations address the same document range."""
        return self.canonical == other.canonical


class CitationExcerpt(BaseModel):
    """Canonical citation string paired with the excerpt it cites."""

    model_config = ConfigDict(frozen=True)

    citation: str = Field(..., description="Canonical citation string")
    excerpt: str = Field(default="", description="Cited excerpt")
