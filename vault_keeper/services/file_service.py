"""
Stored files: metadata rows plus payloads in the object store.

The metadata row points at the payload through cloud_id, a random UUID. The
payload is uploaded before the row is inserted and removed again if the
insert fails, so a row never points at a missing object.
"""

import uuid
from typing import Dict, Optional

from sqlalchemy.orm import Session

from ..db.db_secret_models import FileRecord
from ..exceptions import BaseError, duplicate
from ..schemas.file_schemas import FileCreate, FileRead, FileSummary, FileUpdate, base_name
from ..utils.crud_helpers import create_record, delete_records, get_record, record_exists
from ..utils.field_cipher import FieldCipher
from .object_store import ObjectStore
from .vault_record_service import VaultRecordService


class FileService(VaultRecordService[FileCreate, FileRead, FileSummary, FileUpdate]):
    model = FileRecord
    resource_name = "File"
    column_map = {"fname": "file_name"}

    def __init__(
        self,
        cipher: FieldCipher,
        object_store: ObjectStore,
        session: Optional[Session] = None,
    ):
        super().__init__(cipher, session=session)
        self.object_store = object_store

    def _to_read(self, record) -> FileRead:
        return FileRead(
            title=record.title,
            file_name=record.file_name,
            description=record.description or "",
            cloud_id=record.cloud_id,
        )

    def _to_summary(self, record) -> FileSummary:
        return FileSummary(
            title=record.title,
            file_name=record.file_name,
            description=record.description or "",
        )

    def _patch_values(self, patch: FileUpdate) -> Dict[str, Optional[str]]:
        values = patch.present_fields()
        if values.get("fname"):
            values["fname"] = base_name(values["fname"])
        return values

    def create(self, data: FileCreate, content: bytes = b"") -> FileRead:
        """
        Upload the payload and record its metadata.

        Raises:
            ConflictError: If the title is taken; checked before anything is uploaded
            ObjectStoreError: If the upload fails
        """
        owner_id = self._current_principal_id()
        if record_exists(self.session, FileRecord, {"title": data.title}, owner_id):
            raise duplicate(self.resource_name, title=data.title)

        cloud_id = str(uuid.uuid4())
        self.object_store.upload(cloud_id, content)

        try:
            record = create_record(
                self.session,
                FileRecord,
                {
                    "title": data.title,
                    "file_name": data.file_name,
                    "description": data.description,
                    "cloud_id": cloud_id,
                },
                owner_id,
            )
        except BaseError:
            self.object_store.delete(cloud_id)
            raise

        self.logger.info(
            "File stored",
            extra={"title": data.title, "cloud_id": cloud_id, "size_bytes": len(content)},
        )
        return self._to_read(record)

    def open_content(self, title: str) -> bytes:
        """
        Payload bytes of one file of the current principal.

        Raises:
            RecordNotFoundError: If the principal has no file with this title
        """
        return self.object_store.download(self.get_by_title(title).cloud_id)

    def delete(self, title: str) -> bool:
        """Remove the metadata row, then the stored object."""
        owner_id = self._current_principal_id()
        record = get_record(self.session, FileRecord, {"title": title}, owner_id)
        if record is None:
            return False

        cloud_id = record.cloud_id
        deleted = delete_records(self.session, FileRecord, {"title": title}, owner_id) > 0
        if deleted:
            self.object_store.delete(cloud_id)
        return deleted
