"""Entity and connection schemas for redaction-aware relationship graphs."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class EntityType(str, Enum):
    """Kinds of entities referenced by claims and connections."""

    PERSON = "person"
    ORG = "org"
    LOCATION = "location"
    EVENT = "event"
    DATE = "date"
    DOCUMENT = "document"


class EntityReference(BaseModel):
    """Reference to an entity, carrying its redaction flag."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Entity id")
    name: str = Field(default="", description="Display name or redaction placeholder")
    entity_type: EntityType = Field(default=EntityType.PERSON, description="Entity kind")
    is_redacted: bool = Field(..., strict=True, description="Whether the entity is redacted in source")
    description: Optional[str] = Field(None, description="Free-text description")


class Connection(BaseModel):
    """A relationship between two entities."""

    model_config = ConfigDict(frozen=True)

    relationship_type: str = Field(..., min_length=1, description="Machine relationship type, e.g. same_as")
    relationship_label: Optional[str] = Field(None, description="Human-readable relationship label")
    source_entity_id: Optional[str] = Field(None, description="Source entity id")
    target_entity_id: Optional[str] = Field(None, description="Target entity id")

    @property
    def normalized_type(self) -> str:
        """Relationship type lowercased with spaces and hyphens folded to underscores."""
        return "_".join(self.relationship_type.strip().lower().replace("-", " ").split())
