"""
Pydantic schemas for payment cards.

Card numbers are 16 digits and must pass the Luhn checksum; the expiry is
four digits (MMYY) and the CVC three digits.
"""

from typing import Optional

from pydantic import Field, field_validator

from ..constants import CARD_MASK, CARD_VISIBLE_DIGITS
from .record_schemas import BaseRecordSchema, BaseRecordUpdate, require_text

CARD_NUMBER_LENGTH = 16
EXPIRY_LENGTH = 4
CVC_LENGTH = 3


def luhn_valid(number: str) -> bool:
    """Luhn checksum over a string of digits."""
    if not number.isdigit():
        return False
    total = 0
    for index, char in enumerate(reversed(number)):
        digit = int(char)
        if index % 2 == 1:
            digit *= 2
            if digit > 9:
                digit -= 9
        total += digit
    return total % 10 == 0


def _check_digits(value: str, length: int, field_name: str) -> str:
    if len(value) != length or not value.isascii() or not value.isdigit():
        raise ValueError(f"{field_name} must be exactly {length} digits")
    return value


def validate_card_number(value: str) -> str:
    _check_digits(value, CARD_NUMBER_LENGTH, "num")
    if not luhn_valid(value):
        raise ValueError("num is not a valid card number")
    return value


def mask_card_number(number: str) -> str:
    """Replace everything but the last four digits with a fixed mask."""
    return CARD_MASK + number[-CARD_VISIBLE_DIGITS:]


class CardCreate(BaseRecordSchema):
    """Schema for storing a new card."""

    title: str = Field(..., min_length=1, max_length=255, description="Unique per owner")
    num: str = Field(..., description="Card number")
    expires_at: str = Field(..., description="Expiry as MMYY")
    cvc: str = Field(..., description="Card verification code")
    description: str = Field(default="", description="Free-form note")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return require_text(v, "title")

    @field_validator("num")
    @classmethod
    def validate_num(cls, v):
        return validate_card_number(v)

    @field_validator("expires_at")
    @classmethod
    def validate_expiry(cls, v):
        return _check_digits(v, EXPIRY_LENGTH, "expires_at")

    @field_validator("cvc")
    @classmethod
    def validate_cvc(cls, v):
        return _check_digits(v, CVC_LENGTH, "cvc")


class CardUpdate(BaseRecordUpdate):
    """
    Schema for a partial card update.

    Values are validated only when present and non-empty, so "" still clears
    a column.
    """

    num: Optional[str] = Field(None, description="New card number")
    expires_at: Optional[str] = Field(None, description="New expiry")
    cvc: Optional[str] = Field(None, description="New CVC")
    description: Optional[str] = Field(None, description="New description")

    @field_validator("num")
    @classmethod
    def validate_num(cls, v):
        return validate_card_number(v) if v else v

    @field_validator("expires_at")
    @classmethod
    def validate_expiry(cls, v):
        return _check_digits(v, EXPIRY_LENGTH, "expires_at") if v else v

    @field_validator("cvc")
    @classmethod
    def validate_cvc(cls, v):
        return _check_digits(v, CVC_LENGTH, "cvc") if v else v


class CardRead(BaseRecordSchema):
    """A single decrypted card."""

    title: str
    num: str
    expires_at: str
    cvc: str
    description: str = ""


class CardSummary(BaseRecordSchema):
    """List view of a card; the number is masked."""

    title: str
    num: str = Field(..., description="Masked number, last four digits only")
    description: str = ""
