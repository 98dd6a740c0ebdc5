"""Tests for three-state partial updates."""

import pytest

from vault_keeper.db import PasswordRecord
from vault_keeper.schemas.card_schemas import CardUpdate
from vault_keeper.schemas.password_schemas import PasswordUpdate
from vault_keeper.utils.crud_helpers import create_record, get_record
from vault_keeper.utils.patch_builder import RecordPatch, apply_patch, build


class TestBuild:
    """Test turning patches into assignments."""

    def test_absent_fields_are_skipped(self):
        patch = build("mail", 7, PasswordUpdate(description="new note"))

        assert patch.assignments == {"description": "new note"}

    def test_explicit_empty_sets_empty(self):
        patch = build("mail", 7, PasswordUpdate(pwd="", description=None))

        assert patch.assignments == {"pwd": ""}

    def test_value_sets_value(self):
        patch = build("visa", 7, CardUpdate(cvc="123", description="x"))

        assert patch.assignments == {"cvc": "123", "description": "x"}

    def test_where_always_has_title_and_owner(self):
        for update in (PasswordUpdate(), PasswordUpdate(pwd="p"), PasswordUpdate(description="")):
            patch = build("mail", 7, update)
            assert patch.where == {"title": "mail", "customer_id": 7}

    def test_empty_patch(self):
        patch = build("mail", 7, PasswordUpdate())

        assert patch.is_empty
        assert patch.assignments == {}

    def test_json_null_is_absent(self):
        update = PasswordUpdate.model_validate({"pwd": None, "description": "d"})

        assert build("mail", 7, update).assignments == {"description": "d"}

    def test_accepts_mapping_and_column_map(self):
        patch = build("doc", 3, {"fname": "a.txt", "description": None}, {"fname": "file_name"})

        assert patch.assignments == {"file_name": "a.txt"}
        assert patch.where == {"title": "doc", "customer_id": 3}

    def test_to_statement_scopes_by_title_and_owner(self):
        stmt = build("mail", 7, PasswordUpdate(pwd="p")).to_statement(PasswordRecord)
        compiled = stmt.compile()

        sql = str(compiled)
        assert "UPDATE pass" in sql
        assert "pass.title" in sql
        assert "pass.customer_id" in sql
        assert "mail" in compiled.params.values()
        assert 7 in compiled.params.values()


class TestApplyPatch:
    """Test executing patches against the database."""

    @pytest.fixture
    def stored(self, db_session, alice):
        return create_record(
            db_session,
            PasswordRecord,
            {"title": "mail", "pwd": "cipher", "description": "old"},
            owner_id=alice.id,
        )

    def test_updates_only_present_columns(self, db_session, alice, stored):
        rowcount = apply_patch(db_session, PasswordRecord, build("mail", alice.id, {"description": ""}))

        db_session.expire_all()
        record = get_record(db_session, PasswordRecord, {"title": "mail"}, alice.id)
        assert rowcount == 1
        assert record.description == ""
        assert record.pwd == "cipher"

    def test_other_owner_matches_nothing(self, db_session, alice, bob, stored):
        rowcount = apply_patch(db_session, PasswordRecord, build("mail", bob.id, {"pwd": "x"}))

        db_session.expire_all()
        record = get_record(db_session, PasswordRecord, {"title": "mail"}, alice.id)
        assert rowcount == 0
        assert record.pwd == "cipher"

    def test_missing_title_is_zero_rows_not_error(self, db_session, alice):
        assert apply_patch(db_session, PasswordRecord, build("nope", alice.id, {"pwd": "x"})) == 0

    def test_empty_patch_issues_nothing(self, db_session, alice, stored):
        assert apply_patch(db_session, PasswordRecord, RecordPatch(where={"title": "mail"})) == 0
