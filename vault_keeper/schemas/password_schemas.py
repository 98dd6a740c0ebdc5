"""
Pydantic schemas for stored passwords.
"""

from typing import Optional

from pydantic import Field, field_validator

from .record_schemas import BaseRecordSchema, BaseRecordUpdate, require_text


class PasswordCreate(BaseRecordSchema):
    """Schema for storing a new password."""

    title: str = Field(..., min_length=1, max_length=255, description="Unique per owner")
    pwd: str = Field(..., min_length=1, description="Password in plaintext")
    description: str = Field(default="", description="Free-form note")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return require_text(v, "title")


class PasswordUpdate(BaseRecordUpdate):
    """Schema for a partial password update."""

    pwd: Optional[str] = Field(None, description="New password; empty string clears it")
    description: Optional[str] = Field(None, description="New description")


class PasswordRead(BaseRecordSchema):
    """A single decrypted password, as returned by get-by-title."""

    pwd: str = Field(..., description="Decrypted password")


class PasswordSummary(BaseRecordSchema):
    """List view of a password; never carries the secret."""

    title: str
    description: str = ""
