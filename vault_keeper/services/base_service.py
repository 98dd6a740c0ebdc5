"""
Base service implementation with common functionality for all services.

Each service works on one SQLAlchemy session. The HTTP layer hands in a
request-scoped session; scripts and tests may let the service open its own
from the global database manager, in which case the service also closes it.
"""

import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy.orm import Session

from ..context.principal_context import PrincipalContext
from ..db.db_config import get_db_manager
from ..utils.logger import get_logger


class SessionManagedService:
    """
    Service that owns or borrows a database session.
    """

    def __init__(
        self,
        session: Optional[Session] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize service with a session.

        Args:
            session: Optional existing session (request scope or tests)
            logger: Optional logger instance
        """
        if session is not None:
            self.session = session
            self._owns_session = False
        else:
            self.session = get_db_manager().new_session()
            self._owns_session = True

        self.logger = logger or get_logger()

    def _current_principal_id(self) -> int:
        """Id of the principal bound to this request; raises 401 when none is."""
        return PrincipalContext.require_principal().id

    @contextmanager
    def transaction(self):
        """
        Context manager for multi-statement operations.

        Usage:
            with service.transaction() as session:
                ...
                # Commits on success, rolls back on exception
        """
        try:
            yield self.session
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def close(self):
        """Close the session if we own it."""
        if self._owns_session and self.session:
            self.session.close()
