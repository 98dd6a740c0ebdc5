"""
Partial updates with three-state fields.

A patch field is either absent (None: leave the column alone), explicitly
empty ("" : clear the column) or a value (set it). The builder turns a patch
into column assignments plus a where clause that always pins both the title
and the owning customer, so an update can only touch the caller's own row.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..db.db_base import utc_now
from ..exceptions import RepositoryError, duplicate
from .logger import get_logger

PatchInput = Union[BaseModel, Mapping[str, Optional[str]]]


@dataclass(frozen=True)
class RecordPatch:
    """Column assignments and the scoping conditions of one update."""

    assignments: Dict[str, Any] = field(default_factory=dict)
    where: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.assignments

    def to_statement(self, model_class):
        """
        Build the UPDATE statement for a model.

        updated_at is bumped when the model has it; the where clause is the
        conjunction of every entry in `where`.
        """
        values = dict(self.assignments)
        if hasattr(model_class, "updated_at"):
            values["updated_at"] = utc_now()

        conditions = [getattr(model_class, column) == value for column, value in self.where.items()]
        # "evaluate" refreshes rows already loaded in the session
        return (
            update(model_class)
            .where(*conditions)
            .values(**values)
            .execution_options(synchronize_session="evaluate")
        )


def _present_fields(patch: PatchInput) -> Dict[str, Optional[str]]:
    if isinstance(patch, BaseModel):
        return patch.model_dump()
    return dict(patch)


def build(
    title: str,
    principal_id: int,
    patch: PatchInput,
    column_map: Optional[Mapping[str, str]] = None,
) -> RecordPatch:
    """
    Turn a patch into a RecordPatch.

    Args:
        title: Title of the record to update
        principal_id: Owning customer id
        patch: Update schema or mapping; None values are skipped
        column_map: Optional field name -> column name renames

    Returns:
        RecordPatch whose where clause is always title + customer_id
    """
    column_map = column_map or {}
    assignments = {
        column_map.get(name, name): value
        for name, value in _present_fields(patch).items()
        if value is not None
    }
    return RecordPatch(
        assignments=assignments,
        where={"title": title, "customer_id": principal_id},
    )


def apply_patch(session: Session, model_class, patch: RecordPatch) -> int:
    """
    Execute a RecordPatch and commit.

    An empty patch issues no statement and reports zero rows.

    Returns:
        Number of rows affected; the caller decides whether zero is an error
    """
    if patch.is_empty:
        return 0

    try:
        result = session.execute(patch.to_statement(model_class))
        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise duplicate(model_class.__name__, cause=e, title=patch.assignments.get("title"))
    except SQLAlchemyError as e:
        session.rollback()
        raise RepositoryError(
            f"Failed to update {model_class.__name__}",
            cause=e,
            model=model_class.__name__,
        )

    get_logger().debug(
        f"Patched {model_class.__name__}",
        extra={
            "model": model_class.__name__,
            "columns": sorted(patch.assignments),
            "rowcount": result.rowcount,
        },
    )
    return result.rowcount
