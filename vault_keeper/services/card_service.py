"""
Stored payment cards.

Number, expiry and CVC are encrypted at rest; list views decrypt the number
only to mask it.
"""

from ..db.db_secret_models import CardRecord
from ..schemas.card_schemas import CardCreate, CardRead, CardSummary, CardUpdate, mask_card_number
from .vault_record_service import VaultRecordService


class CardService(VaultRecordService[CardCreate, CardRead, CardSummary, CardUpdate]):
    model = CardRecord
    resource_name = "Card"
    encrypted_fields = ("num", "expires_at", "cvc")

    def _to_read(self, record) -> CardRead:
        return CardRead(
            title=record.title,
            num=self._decrypted(record, "num"),
            expires_at=self._decrypted(record, "expires_at"),
            cvc=self._decrypted(record, "cvc"),
            description=record.description or "",
        )

    def _to_summary(self, record) -> CardSummary:
        return CardSummary(
            title=record.title,
            num=mask_card_number(self._decrypted(record, "num")),
            description=record.description or "",
        )
