"""
Pydantic schemas for customers, principals and login.
"""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Shape check only: local@domain.tld
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class Principal(BaseModel):
    """The authenticated identity a request acts as."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Customer id; the tenant boundary")
    login: str = Field(..., min_length=1, description="Unique, email-shaped login")


class CustomerRegister(BaseModel):
    """Registration request.

    Name and login are trimmed; the master password is hashed exactly as sent.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(default="", max_length=200, description="Display name")
    login: str = Field(..., min_length=3, max_length=254, description="Email-shaped login")
    master_password: str = Field(
        ..., min_length=1, alias="masterpassword", description="Master password"
    )

    @field_validator("name", "login", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("login")
    @classmethod
    def validate_login(cls, v):
        """Validate login is email-shaped."""
        if not EMAIL_PATTERN.match(v):
            raise ValueError("login must be an email address")
        return v


class LoginRequest(BaseModel):
    """Login request."""

    model_config = ConfigDict(populate_by_name=True)

    login: str = Field(default="", description="Login")
    password: str = Field(default="", alias="pwd", description="Master password")

    @field_validator("login", mode="before")
    @classmethod
    def strip_login(cls, v):
        return v.strip() if isinstance(v, str) else v



class CustomerRead(BaseModel):
    """Customer as returned by the service; never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    login: str

    def to_principal(self) -> Principal:
        return Principal(id=self.id, login=self.login)
