"""
Shared schema helpers.

Records are stored in the key-value store as camelCase JSON documents and
returned to clients in the same shape.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> Dict[str, Any]:
        """Serialize for the key-value store."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)

    @classmethod
    def from_document(cls, document: Dict[str, Any]):
        """Load a record from its stored document."""
        return cls.model_validate(document)


class SuccessResponse(CamelModel):
    """Envelope for successful mutations."""
    success: bool = True
    message: Optional[str] = None
