"""
Generic owner-scoped CRUD helpers.

Every helper takes the owning customer id and adds a customer_id filter to
the statement, so a record can never be read or written across tenants by
forgetting a filter at the call site.
"""

from typing import Any, Dict, List, Optional, Type, TypeVar

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..db.db_base import utc_now
from ..exceptions import RepositoryError, duplicate
from ..utils.logger import get_logger

T = TypeVar("T")

OWNER_COLUMN = "customer_id"


def _owner_conditions(model_class: Type[T], owner_id: int, filters: Optional[Dict[str, Any]]):
    conditions = [getattr(model_class, OWNER_COLUMN) == owner_id]
    for key, value in (filters or {}).items():
        if hasattr(model_class, key) and value is not None:
            conditions.append(getattr(model_class, key) == value)
    return conditions


def create_record(
    session: Session,
    model_class: Type[T],
    data: Dict[str, Any],
    owner_id: int,
    commit: bool = True,
) -> T:
    """
    Generic create operation for any owned model.

    Args:
        session: Database session
        model_class: SQLAlchemy model class
        data: Column values; customer_id is always overwritten with owner_id
        owner_id: Owning customer id
        commit: Commit after the insert (False to compose a larger transaction)

    Returns:
        Created record instance

    Raises:
        ConflictError: If a unique constraint is violated
        RepositoryError: If the insert fails for any other reason
    """
    logger = get_logger()
    data = {**data, OWNER_COLUMN: owner_id}

    try:
        record = model_class(**data)
        session.add(record)
        if commit:
            session.commit()
        else:
            session.flush()

        logger.info(
            f"Created {model_class.__name__}",
            extra={
                "model": model_class.__name__,
                "record_id": getattr(record, "id", None),
                "owner_id": owner_id,
            },
        )
        return record

    except IntegrityError as e:
        session.rollback()
        raise duplicate(model_class.__name__, cause=e, title=data.get("title"))
    except SQLAlchemyError as e:
        session.rollback()
        raise RepositoryError(
            f"Failed to create {model_class.__name__}",
            cause=e,
            model=model_class.__name__,
            owner_id=owner_id,
        )


def get_record(
    session: Session, model_class: Type[T], filters: Dict[str, Any], owner_id: int
) -> Optional[T]:
    """
    Generic get operation for any owned model.

    Returns:
        Record instance or None when absent or owned by someone else
    """
    try:
        return (
            session.query(model_class)
            .filter(*_owner_conditions(model_class, owner_id, filters))
            .first()
        )
    except SQLAlchemyError as e:
        raise RepositoryError(
            f"Failed to read {model_class.__name__}",
            cause=e,
            model=model_class.__name__,
            owner_id=owner_id,
        )


def list_records(
    session: Session,
    model_class: Type[T],
    owner_id: int,
    filters: Optional[Dict[str, Any]] = None,
    order_by: Optional[str] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> List[T]:
    """
    Generic list operation for any owned model.

    Args:
        session: Database session
        model_class: SQLAlchemy model class
        owner_id: Owning customer id
        filters: Optional filter conditions
        order_by: Optional order by field
        limit: Optional limit
        offset: Optional offset

    Returns:
        List of record instances
    """
    query = session.query(model_class).filter(*_owner_conditions(model_class, owner_id, filters))

    if order_by and hasattr(model_class, order_by):
        query = query.order_by(getattr(model_class, order_by))
    elif hasattr(model_class, "created_at"):
        query = query.order_by(model_class.created_at.desc())  # type: ignore[attr-defined]

    if offset:
        query = query.offset(offset)
    if limit:
        query = query.limit(limit)

    try:
        return query.all()
    except SQLAlchemyError as e:
        raise RepositoryError(
            f"Failed to list {model_class.__name__}",
            cause=e,
            model=model_class.__name__,
            owner_id=owner_id,
        )


def update_records(
    session: Session,
    model_class: Type[T],
    filters: Dict[str, Any],
    values: Dict[str, Any],
    owner_id: int,
    commit: bool = True,
) -> int:
    """
    Set columns on every owned row matching the filters.

    Returns:
        Number of rows affected; zero is not an error here
    """
    logger = get_logger()
    values = dict(values)
    if hasattr(model_class, "updated_at"):
        values["updated_at"] = utc_now()

    stmt = (
        update(model_class)
        .where(*_owner_conditions(model_class, owner_id, filters))
        .values(**values)
        .execution_options(synchronize_session="evaluate")
    )

    try:
        result = session.execute(stmt)
        if commit:
            session.commit()
    except IntegrityError as e:
        session.rollback()
        raise duplicate(model_class.__name__, cause=e, **filters)
    except SQLAlchemyError as e:
        session.rollback()
        raise RepositoryError(
            f"Failed to update {model_class.__name__}",
            cause=e,
            model=model_class.__name__,
            owner_id=owner_id,
        )

    logger.debug(
        f"Updated {model_class.__name__}",
        extra={"model": model_class.__name__, "rowcount": result.rowcount, "owner_id": owner_id},
    )
    return result.rowcount


def delete_records(
    session: Session,
    model_class: Type[T],
    filters: Dict[str, Any],
    owner_id: int,
    commit: bool = True,
) -> int:
    """
    Delete every owned row matching the filters.

    Returns:
        Number of rows deleted
    """
    logger = get_logger()
    stmt = (
        delete(model_class)
        .where(*_owner_conditions(model_class, owner_id, filters))
        .execution_options(synchronize_session="evaluate")
    )

    try:
        result = session.execute(stmt)
        if commit:
            session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise RepositoryError(
            f"Failed to delete {model_class.__name__}",
            cause=e,
            model=model_class.__name__,
            owner_id=owner_id,
        )

    logger.info(
        f"Deleted {model_class.__name__}",
        extra={"model": model_class.__name__, "rowcount": result.rowcount, "owner_id": owner_id},
    )
    return result.rowcount


def record_exists(
    session: Session, model_class: Type[T], filters: Dict[str, Any], owner_id: int
) -> bool:
    """
    Check if an owned record exists with the given filters.
    """
    return get_record(session, model_class, filters, owner_id) is not None
