"""
Pydantic schemas for stored files.

Only metadata goes through these schemas; the payload travels as the raw
request or response body.
"""

import ntpath
import posixpath
from typing import Optional

from pydantic import Field, field_validator

from .record_schemas import BaseRecordSchema, BaseRecordUpdate, require_text


def base_name(path: str) -> str:
    """Strip any directory part, whichever separator the client used."""
    return posixpath.basename(ntpath.basename(path))


def _check_fname(value: str) -> str:
    require_text(value, "fname")
    if not base_name(value):
        raise ValueError("fname must name a file")
    return value


class FileCreate(BaseRecordSchema):
    """Metadata supplied with a file upload."""

    title: str = Field(..., min_length=1, max_length=255, description="Letters and digits only")
    fname: str = Field(..., min_length=1, description="Original file name or path")
    description: str = Field(default="", description="Free-form note")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if not v.isalnum():
            raise ValueError("title must contain only letters and digits")
        return v

    @field_validator("fname")
    @classmethod
    def validate_fname(cls, v):
        return _check_fname(v)

    @property
    def file_name(self) -> str:
        return base_name(self.fname)


class FileUpdate(BaseRecordUpdate):
    """Schema for a partial file metadata update."""

    fname: Optional[str] = Field(None, description="New file name")
    description: Optional[str] = Field(None, description="New description")

    @field_validator("fname")
    @classmethod
    def validate_fname(cls, v):
        return _check_fname(v) if v else v


class FileRead(BaseRecordSchema):
    """Metadata of one stored file."""

    title: str
    file_name: str
    description: str = ""
    cloud_id: str


class FileSummary(BaseRecordSchema):
    """List view of a file."""

    title: str
    file_name: str
    description: str = ""
