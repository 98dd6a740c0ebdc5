"""
Secret record models: passwords, cards and file metadata.

Sensitive columns hold FieldCipher output (base64 text). Every table is scoped
by customer_id and titles are unique per customer.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, Text, UniqueConstraint

from .db_base import TimestampMixin
from .db_config import Base


class OwnedRecordMixin:
    """Columns shared by every secret record."""

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")


class PasswordRecord(Base, OwnedRecordMixin, TimestampMixin):
    __tablename__ = "pass"

    customer_id = Column(
        Integer, ForeignKey("customer.id", ondelete="CASCADE"), nullable=False, index=True
    )
    pwd = Column(Text, nullable=False)  # Encrypted

    __table_args__ = (UniqueConstraint("title", "customer_id", name="uq_pass_title_owner"),)


class CardRecord(Base, OwnedRecordMixin, TimestampMixin):
    __tablename__ = "card"

    customer_id = Column(
        Integer, ForeignKey("customer.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Encrypted
    num = Column(Text, nullable=False)
    expires_at = Column(Text, nullable=False)
    cvc = Column(Text, nullable=False)

    __table_args__ = (UniqueConstraint("title", "customer_id", name="uq_card_title_owner"),)


class FileRecord(Base, OwnedRecordMixin, TimestampMixin):
    """Metadata of a stored file; the payload lives in the object store under cloud_id."""

    __tablename__ = "bfile"

    customer_id = Column(
        Integer, ForeignKey("customer.id", ondelete="CASCADE"), nullable=False, index=True
    )
    file_name = Column(String(255), nullable=False)
    cloud_id = Column(String(36), nullable=False, unique=True)

    __table_args__ = (UniqueConstraint("title", "customer_id", name="uq_bfile_title_owner"),)
