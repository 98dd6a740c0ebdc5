"""
Shared pieces of the secret record schemas.
"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict


class BaseRecordSchema(BaseModel):
    """Base schema for all secret record payloads."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )


class BaseRecordUpdate(BaseRecordSchema):
    """
    Base schema for partial updates.

    Every field is Optional[str]: None (absent or JSON null) leaves the column
    unchanged, "" clears it and any other string replaces it.
    """

    def present_fields(self) -> Dict[str, Optional[str]]:
        """Fields the caller actually supplied, keyed by attribute name."""
        return {name: value for name, value in self.model_dump().items() if value is not None}


def require_text(value: str, field_name: str) -> str:
    """Reject values that are empty once surrounding whitespace is ignored."""
    if not value or value.isspace():
        raise ValueError(f"{field_name} cannot be empty")
    return value
