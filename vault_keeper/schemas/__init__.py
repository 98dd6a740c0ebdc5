"""Pydantic schemas for the vault."""

from .card_schemas import CardCreate, CardRead, CardSummary, CardUpdate, mask_card_number
from .customer_schemas import CustomerRead, CustomerRegister, LoginRequest, Principal
from .file_schemas import FileCreate, FileRead, FileSummary, FileUpdate
from .password_schemas import PasswordCreate, PasswordRead, PasswordSummary, PasswordUpdate

__all__ = [
    "CardCreate",
    "CardRead",
    "CardSummary",
    "CardUpdate",
    "mask_card_number",
    "CustomerRead",
    "CustomerRegister",
    "LoginRequest",
    "Principal",
    "FileCreate",
    "FileRead",
    "FileSummary",
    "FileUpdate",
    "PasswordCreate",
    "PasswordRead",
    "PasswordSummary",
    "PasswordUpdate",
]
