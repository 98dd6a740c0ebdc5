"""
Service fixtures bound to the test session.
"""

import pytest

from vault_keeper.context.principal_context import principal_context
from vault_keeper.services.card_service import CardService
from vault_keeper.services.file_service import FileService
from vault_keeper.services.password_service import PasswordService


@pytest.fixture
def password_service(db_session, cipher):
    return PasswordService(cipher, session=db_session)


@pytest.fixture
def card_service(db_session, cipher):
    return CardService(cipher, session=db_session)


@pytest.fixture
def file_service(db_session, cipher, object_store):
    return FileService(cipher, object_store, session=db_session)


@pytest.fixture
def as_alice(alice):
    with principal_context(alice):
        yield alice


@pytest.fixture
def as_bob(bob):
    with principal_context(bob):
        yield bob
