"""
Base Service Module

Provides base classes and common functionality for domain services.
"""

import logging
from typing import Callable, TypeVar
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from backend.domains.shared.uow import SqlAlchemyUoW

T = TypeVar('T')

# Errors that mean another writer got there first; the operation is safe to re-run
# from a fresh read.
CONFLICT_ERRORS = (StaleDataError, IntegrityError)


class ServiceBase:
    """Base class for domain services providing common functionality."""

    def __init__(self):
        """Initialize base service."""
        self._logger = None

    @property
    def logger(self) -> logging.Logger:
        """
        Lazy-loaded logger property.

        Returns:
            Logger instance for this service
        """
        if self._logger is None:
            self._logger = logging.getLogger(self.__class__.__name__)
        return self._logger


class DomainServiceBase(ServiceBase):
    """
    Base class for domain services bound to a request session.

    Reads go through the request session. Writes run inside a fresh
    Unit of Work built from the same bind, so a failed attempt never
    leaves the request session in a half-flushed state.
    """

    def __init__(self, session: Session, conflict_retries: int = 0):
        """
        Initialize domain service with dependencies.

        Args:
            session: Request-scoped SQLAlchemy session
            conflict_retries: How many times a conflicting write is re-run
        """
        super().__init__()
        self.session = session
        self.conflict_retries = conflict_retries
        self._session_factory = sessionmaker(
            bind=session.bind,
            class_=session.__class__,
            autoflush=False,
            expire_on_commit=False,
        )

    def _create_session(self) -> Session:
        """Create a new session for UoW transactions."""
        return self._session_factory()

    @contextmanager
    def unit_of_work(self):
        """
        Context manager for UoW operations.

        Yields:
            Unit of Work instance
        """
        with SqlAlchemyUoW(self._create_session) as uow:
            yield uow

    def run_in_unit_of_work(self, operation: Callable[[SqlAlchemyUoW], T]) -> T:
        """
        Run a read-modify-write operation in its own transaction.

        The operation is re-run from scratch when the commit loses a race
        (stale version or unique-key collision), at most ``conflict_retries``
        extra times. The last conflict is re-raised once attempts run out.

        Args:
            operation: Callable receiving the UoW; must perform its own reads

        Returns:
            Whatever the operation returns
        """
        attempt = 0
        while True:
            try:
                with self.unit_of_work() as uow:
                    result = operation(uow)
                    uow.commit()
                    return result
            except CONFLICT_ERRORS as exc:
                if attempt >= self.conflict_retries:
                    raise
                attempt += 1
                self.logger.warning(
                    "Write conflict (%s), retrying %d/%d",
                    type(exc).__name__, attempt, self.conflict_retries,
                )
