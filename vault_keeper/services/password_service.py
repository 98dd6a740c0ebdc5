"""
Stored passwords.
"""

from ..db.db_secret_models import PasswordRecord
from ..schemas.password_schemas import (
    PasswordCreate,
    PasswordRead,
    PasswordSummary,
    PasswordUpdate,
)
from .vault_record_service import VaultRecordService


class PasswordService(
    VaultRecordService[PasswordCreate, PasswordRead, PasswordSummary, PasswordUpdate]
):
    model = PasswordRecord
    resource_name = "Password"
    encrypted_fields = ("pwd",)

    def _to_read(self, record) -> PasswordRead:
        return PasswordRead(pwd=self._decrypted(record, "pwd"))

    def _to_summary(self, record) -> PasswordSummary:
        return PasswordSummary(title=record.title, description=record.description or "")
