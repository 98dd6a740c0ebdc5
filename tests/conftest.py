"""
Shared test fixtures for the vault.

Provides the SQLite in-memory database, a field cipher with a fixed test key,
registered customers and helpers to act as one of them.
"""

import pytest
from sqlalchemy.orm import Session

from vault_keeper.config import AppConfig, ObjectStoreConfig, SecurityConfig
from vault_keeper.db import DatabaseConfig, DatabaseManager, import_all_models
from vault_keeper.db.db_config import close_db, initialize_db
from vault_keeper.schemas.customer_schemas import CustomerRegister, Principal
from vault_keeper.services.customer_service import CustomerService
from vault_keeper.services.object_store import InMemoryObjectStore
from vault_keeper.utils.field_cipher import FieldCipher

# 32 bytes: a valid AES-256 key and long enough for HS256
TEST_SIGN_KEY = "k3y-for-tests-only-0123456789abc"


@pytest.fixture(scope="session")
def db_config() -> DatabaseConfig:
    """Create SQLite in-memory database configuration for testing."""
    return DatabaseConfig(
        db_type="sqlite",
        database=":memory:",
        echo=False,
        development_mode=True,
    )


@pytest.fixture(scope="session")
def db_manager(db_config: DatabaseConfig) -> DatabaseManager:
    """Create and initialize database manager with all models."""
    import_all_models()
    manager = initialize_db(db_config)
    yield manager
    close_db()


@pytest.fixture(scope="function")
def db_session(db_manager: DatabaseManager) -> Session:
    """
    Fresh tables and a fresh session for each test.
    """
    db_manager.create_tables()
    session = db_manager.new_session()

    yield session

    session.rollback()
    session.close()
    db_manager.drop_tables()


@pytest.fixture
def sign_key() -> bytes:
    return TEST_SIGN_KEY.encode("utf-8")


@pytest.fixture
def cipher(sign_key) -> FieldCipher:
    return FieldCipher(sign_key)


@pytest.fixture
def object_store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def app_config(tmp_path) -> AppConfig:
    """Config with test keys and an object store under tmp_path."""
    return AppConfig(
        environment="test",
        security=SecurityConfig(jwt_sign_key=TEST_SIGN_KEY, field_cipher_key=""),
        object_store=ObjectStoreConfig(root_dir=str(tmp_path / "objects"), bucket_name="vault"),
    )


@pytest.fixture
def customer_service(db_session) -> CustomerService:
    return CustomerService(session=db_session)


@pytest.fixture
def alice(customer_service) -> Principal:
    """Registered customer with login alice@example.com / alice-secret."""
    return customer_service.register(
        CustomerRegister(name="Alice", login="alice@example.com", masterpassword="alice-secret")
    )


@pytest.fixture
def bob(customer_service) -> Principal:
    """Registered customer with login bob@example.com / bob-secret."""
    return customer_service.register(
        CustomerRegister(name="Bob", login="bob@example.com", masterpassword="bob-secret")
    )
