"""Tests for session handling shared by all services."""

import pytest
from sqlalchemy import text

from vault_keeper.db import Customer
from vault_keeper.exceptions import UnauthenticatedError
from vault_keeper.services.base_service import SessionManagedService


class TestSessionOwnership:
    def test_borrowed_session_stays_open(self, db_session):
        service = SessionManagedService(session=db_session)
        service.close()

        assert service.session is db_session
        assert db_session.execute(text("SELECT 1")).scalar() == 1

    def test_opens_own_session_from_global_manager(self, db_session):
        service = SessionManagedService()
        try:
            assert service.session is not db_session
            assert service.session.execute(text("SELECT 1")).scalar() == 1
        finally:
            service.close()


class TestTransaction:
    def test_commits_on_success(self, db_session):
        service = SessionManagedService(session=db_session)

        with service.transaction() as session:
            session.add(Customer(name="", login="tx@example.com", master_password="h"))

        assert db_session.query(Customer).filter_by(login="tx@example.com").count() == 1

    def test_rolls_back_on_error(self, db_session):
        service = SessionManagedService(session=db_session)

        with pytest.raises(RuntimeError):
            with service.transaction() as session:
                session.add(Customer(name="", login="tx@example.com", master_password="h"))
                session.flush()
                raise RuntimeError("boom")

        assert db_session.query(Customer).filter_by(login="tx@example.com").count() == 0

    def test_principal_required(self, db_session):
        with pytest.raises(UnauthenticatedError):
            SessionManagedService(session=db_session)._current_principal_id()
