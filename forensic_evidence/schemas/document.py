"""Ingested document schema."""

from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """An OCR'd document as ingested. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, pattern=r"^\S+$", description="Document id")
    raw_text: str = Field(..., description="Full OCR text")
    content_hash: str = Field(..., description="Hex digest of raw_text")
    page_count: int = Field(..., ge=0, description="Number of detected pages")
