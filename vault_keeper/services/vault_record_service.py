"""
Owner-scoped CRUD for secret records.

VaultRecordService implements the operations every record kind shares:
create, get by title, list, partial update and delete, each restricted to the
principal bound to the request. Subclasses name the model, the schemas and
which columns are encrypted.
"""

from typing import Any, Dict, Generic, List, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..exceptions import duplicate, not_found
from ..schemas.record_schemas import BaseRecordUpdate
from ..utils.crud_helpers import (
    create_record,
    delete_records,
    get_record,
    list_records,
    record_exists,
)
from ..utils.field_cipher import FieldCipher
from ..utils.patch_builder import apply_patch, build
from .base_service import SessionManagedService

TCreate = TypeVar("TCreate", bound=BaseModel)
TRead = TypeVar("TRead", bound=BaseModel)
TSummary = TypeVar("TSummary", bound=BaseModel)
TUpdate = TypeVar("TUpdate", bound=BaseRecordUpdate)


class VaultRecordService(SessionManagedService, Generic[TCreate, TRead, TSummary, TUpdate]):
    """
    Base service for one kind of secret record.

    Class attributes set by subclasses:
        model: SQLAlchemy model
        resource_name: Name used in errors and logs
        encrypted_fields: Columns stored as FieldCipher output
        column_map: Update field name -> column name renames
    """

    model: Any = None
    resource_name: str = "Record"
    encrypted_fields: Tuple[str, ...] = ()
    column_map: Mapping[str, str] = {}

    def __init__(self, cipher: FieldCipher, session: Optional[Session] = None):
        super().__init__(session=session)
        self.cipher = cipher

    # Hooks

    def _to_row(self, data: TCreate) -> Dict[str, Any]:
        """Column values for a new row, before encryption."""
        return data.model_dump()

    def _to_read(self, record) -> TRead:
        raise NotImplementedError

    def _to_summary(self, record) -> TSummary:
        raise NotImplementedError

    def _encrypt(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return {
            column: self.cipher.encrypt_optional(value) if column in self.encrypted_fields else value
            for column, value in values.items()
        }

    def _decrypted(self, record, column: str) -> str:
        return self.cipher.decrypt_optional(getattr(record, column)) or ""

    # Operations

    def create(self, data: TCreate) -> None:
        """
        Encrypt and store a new record for the current principal.

        Raises:
            ConflictError: If the principal already has a record with this title
        """
        owner_id = self._current_principal_id()
        if record_exists(self.session, self.model, {"title": data.title}, owner_id):
            raise duplicate(self.resource_name, title=data.title)

        create_record(self.session, self.model, self._encrypt(self._to_row(data)), owner_id)

    def get_by_title(self, title: str) -> TRead:
        """
        Fetch and decrypt one record of the current principal.

        Raises:
            RecordNotFoundError: If absent, including when another principal owns the title
        """
        record = get_record(self.session, self.model, {"title": title}, self._current_principal_id())
        if record is None:
            raise not_found(self.resource_name, title=title)
        return self._to_read(record)

    def list_all(self) -> List[TSummary]:
        """Summaries of every record of the current principal, ordered by title."""
        records = list_records(
            self.session, self.model, self._current_principal_id(), order_by="title"
        )
        return [self._to_summary(record) for record in records]

    def update(self, title: str, patch: TUpdate) -> int:
        """
        Apply a partial update to one record of the current principal.

        Absent fields are left alone, empty strings clear a column.

        Returns:
            Number of rows updated (0 for a patch with no fields)

        Raises:
            RecordNotFoundError: If the principal has no record with this title
        """
        owner_id = self._current_principal_id()
        record_patch = build(
            title, owner_id, self._encrypt(self._patch_values(patch)), self.column_map
        )

        if record_patch.is_empty:
            if not record_exists(self.session, self.model, {"title": title}, owner_id):
                raise not_found(self.resource_name, title=title)
            return 0

        rowcount = apply_patch(self.session, self.model, record_patch)
        if rowcount == 0:
            raise not_found(self.resource_name, title=title)

        self.logger.info(
            f"Updated {self.resource_name}",
            extra={"title": title, "columns": sorted(record_patch.assignments)},
        )
        return rowcount

    def _patch_values(self, patch: TUpdate) -> Dict[str, Optional[str]]:
        return patch.present_fields()

    def delete(self, title: str) -> bool:
        """
        Delete one record of the current principal.

        Returns:
            True if a row was removed; a missing title is a no-op
        """
        return delete_records(
            self.session, self.model, {"title": title}, self._current_principal_id()
        ) > 0
