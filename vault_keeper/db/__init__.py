"""
SQLAlchemy models and connection management for the vault.
"""

# Import base definitions
from .db_base import TimestampMixin, utc_now

# Import configuration
from .db_config import (
    Base,
    DatabaseConfig,
    DatabaseManager,
    close_db,
    get_db_manager,
    import_all_models,
    initialize_db,
)

# Import models
from .db_customer_models import Customer, SessionToken
from .db_secret_models import CardRecord, FileRecord, PasswordRecord

__all__ = [
    # Base definitions
    "Base",
    "TimestampMixin",
    "utc_now",
    # Configuration
    "DatabaseConfig",
    "DatabaseManager",
    "close_db",
    "get_db_manager",
    "import_all_models",
    "initialize_db",
    # Models
    "Customer",
    "SessionToken",
    "PasswordRecord",
    "CardRecord",
    "FileRecord",
]
