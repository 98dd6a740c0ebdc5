"""Liveness endpoint; reachable without a token."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...utils.logger import get_logger
from ..deps import get_db_session

router = APIRouter(tags=["health"])


@router.get("/health")
def health(session: Session = Depends(get_db_session)):
    """Report whether the database answers."""
    try:
        session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        get_logger().warning("Health check failed", extra={"reason": str(e)})
        return JSONResponse({"status": "degraded", "database": "error"}, status_code=503)
    return {"status": "ok", "database": "ok"}
