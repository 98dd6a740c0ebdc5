"""
Customer and session token models.

Just the data structure; login, token issuing and verification live in the
services.
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text

from .db_base import TimestampMixin, utc_now
from .db_config import Base


class Customer(Base, TimestampMixin):
    """A registered user; its id is the tenant boundary for every record."""

    __tablename__ = "customer"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False, default="")
    login = Column(String(254), nullable=False, unique=True, index=True)
    master_password = Column(String(255), nullable=False)  # pbkdf2 hash, never plaintext


class SessionToken(Base):
    """One issued session token; at most one row per customer is valid."""

    __tablename__ = "session_token"

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_id = Column(
        Integer, ForeignKey("customer.id", ondelete="CASCADE"), nullable=False, index=True
    )
    token = Column(Text, nullable=False)
    is_valid = Column(Boolean, nullable=False, default=True)

    issued_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    __table_args__ = (
        Index("ix_session_token_lookup", "token", "is_valid"),
    )
