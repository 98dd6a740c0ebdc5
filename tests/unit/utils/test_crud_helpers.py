"""Tests for owner-scoped CRUD helpers."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from vault_keeper.db import PasswordRecord, SessionToken
from vault_keeper.exceptions import ConflictError, RepositoryError
from vault_keeper.utils.crud_helpers import (
    create_record,
    delete_records,
    get_record,
    list_records,
    record_exists,
    update_records,
)


def _password(title, description=""):
    return {"title": title, "pwd": "ciphertext", "description": description}


class TestCreateRecord:
    """Test scoped inserts."""

    def test_owner_is_forced(self, db_session, alice, bob):
        data = {**_password("mail"), "customer_id": bob.id}
        record = create_record(db_session, PasswordRecord, data, owner_id=alice.id)

        assert record.customer_id == alice.id

    def test_duplicate_title_for_same_owner(self, db_session, alice):
        create_record(db_session, PasswordRecord, _password("mail"), owner_id=alice.id)

        with pytest.raises(ConflictError):
            create_record(db_session, PasswordRecord, _password("mail"), owner_id=alice.id)

    def test_same_title_for_different_owners(self, db_session, alice, bob):
        create_record(db_session, PasswordRecord, _password("mail"), owner_id=alice.id)
        create_record(db_session, PasswordRecord, _password("mail"), owner_id=bob.id)

        assert record_exists(db_session, PasswordRecord, {"title": "mail"}, alice.id)
        assert record_exists(db_session, PasswordRecord, {"title": "mail"}, bob.id)

    def test_storage_failure_is_repository_error(self, db_session, alice):
        failure = OperationalError("INSERT", {}, Exception("disk I/O error"))
        with patch.object(db_session, "commit", side_effect=failure):
            with pytest.raises(RepositoryError) as exc_info:
                create_record(db_session, PasswordRecord, _password("mail"), owner_id=alice.id)

        assert exc_info.value.status_code == 500


class TestReadHelpers:
    """Test scoped reads."""

    def test_get_is_scoped(self, db_session, alice, bob):
        create_record(db_session, PasswordRecord, _password("mail"), owner_id=alice.id)

        assert get_record(db_session, PasswordRecord, {"title": "mail"}, alice.id) is not None
        assert get_record(db_session, PasswordRecord, {"title": "mail"}, bob.id) is None

    def test_list_is_scoped_and_ordered(self, db_session, alice, bob):
        for title in ("zeta", "alpha", "mid"):
            create_record(db_session, PasswordRecord, _password(title), owner_id=alice.id)
        create_record(db_session, PasswordRecord, _password("bobs"), owner_id=bob.id)

        records = list_records(db_session, PasswordRecord, alice.id, order_by="title")

        assert [r.title for r in records] == ["alpha", "mid", "zeta"]

    def test_list_limit_and_offset(self, db_session, alice):
        for title in ("a", "b", "c"):
            create_record(db_session, PasswordRecord, _password(title), owner_id=alice.id)

        records = list_records(db_session, PasswordRecord, alice.id, order_by="title", limit=1, offset=1)

        assert [r.title for r in records] == ["b"]


class TestWriteHelpers:
    """Test scoped updates and deletes."""

    def test_update_is_scoped(self, db_session, alice, bob):
        create_record(db_session, PasswordRecord, _password("mail", "a"), owner_id=alice.id)
        create_record(db_session, PasswordRecord, _password("mail", "b"), owner_id=bob.id)

        count = update_records(
            db_session, PasswordRecord, {"title": "mail"}, {"description": "x"}, owner_id=alice.id
        )

        db_session.expire_all()
        assert count == 1
        assert get_record(db_session, PasswordRecord, {"title": "mail"}, alice.id).description == "x"
        assert get_record(db_session, PasswordRecord, {"title": "mail"}, bob.id).description == "b"

    def test_update_model_without_updated_at(self, db_session, alice):
        from datetime import timedelta

        from vault_keeper.db import utc_now

        create_record(
            db_session,
            SessionToken,
            {"token": "t", "is_valid": True, "expires_at": utc_now() + timedelta(hours=1)},
            owner_id=alice.id,
        )

        assert update_records(db_session, SessionToken, {}, {"is_valid": False}, alice.id) == 1

    def test_delete_is_scoped(self, db_session, alice, bob):
        create_record(db_session, PasswordRecord, _password("mail"), owner_id=alice.id)

        assert delete_records(db_session, PasswordRecord, {"title": "mail"}, bob.id) == 0
        assert delete_records(db_session, PasswordRecord, {"title": "mail"}, alice.id) == 1
        assert not record_exists(db_session, PasswordRecord, {"title": "mail"}, alice.id)
