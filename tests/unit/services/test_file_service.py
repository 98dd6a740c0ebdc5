"""Tests for FileService and its use of the object store."""

from unittest.mock import patch

import pytest

from vault_keeper.context.principal_context import principal_context
from vault_keeper.db import FileRecord
from vault_keeper.exceptions import ConflictError, RecordNotFoundError, RepositoryError
from vault_keeper.schemas.file_schemas import FileCreate, FileUpdate

PAYLOAD = b"\x00\x01binary payload\xff"


def _create(service, title="report", fname="/home/alice/docs/report.pdf", content=PAYLOAD):
    return service.create(FileCreate(title=title, fname=fname, description="q3"), content)


class TestFileService:
    """Test FileService operations."""

    def test_create_and_open(self, file_service, object_store, as_alice):
        created = _create(file_service)

        assert created.file_name == "report.pdf"
        assert created.cloud_id in object_store
        assert file_service.open_content("report") == PAYLOAD

    def test_get_metadata(self, file_service, as_alice):
        created = _create(file_service)

        metadata = file_service.get_by_title("report")
        assert metadata.cloud_id == created.cloud_id
        assert metadata.description == "q3"

    def test_duplicate_rejected_before_upload(self, file_service, object_store, as_alice):
        _create(file_service)

        with pytest.raises(ConflictError):
            _create(file_service, content=b"second")
        assert len(object_store) == 1

    def test_failed_insert_removes_object(self, file_service, object_store, as_alice):
        with patch(
            "vault_keeper.services.file_service.create_record",
            side_effect=RepositoryError("insert failed"),
        ):
            with pytest.raises(RepositoryError):
                _create(file_service)

        assert len(object_store) == 0

    def test_list(self, file_service, as_alice):
        _create(file_service, title="b", fname="b.txt")
        _create(file_service, title="a", fname="C:\\docs\\a.txt")

        assert [(s.title, s.file_name) for s in file_service.list_all()] == [
            ("a", "a.txt"),
            ("b", "b.txt"),
        ]

    def test_update_file_name(self, file_service, as_alice):
        _create(file_service)

        file_service.update("report", FileUpdate(fname="/tmp/renamed.pdf"))

        metadata = file_service.get_by_title("report")
        assert metadata.file_name == "renamed.pdf"
        assert metadata.description == "q3"

    def test_delete_removes_object(self, file_service, db_session, object_store, as_alice):
        created = _create(file_service)

        assert file_service.delete("report") is True
        assert created.cloud_id not in object_store
        assert db_session.query(FileRecord).count() == 0

    def test_tenant_isolation(self, file_service, object_store, alice, bob):
        with principal_context(alice):
            _create(file_service)
        with principal_context(bob):
            with pytest.raises(RecordNotFoundError):
                file_service.open_content("report")
            assert file_service.delete("report") is False
        assert len(object_store) == 1
