# Copyright 2026 Dell Inc. or its subsidiaries. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Explicit transaction handles for the build record repository.

A ``UnitOfWork`` owns one SQLAlchemy session. Callers may open one,
pass it to several repository calls with ``uow=`` and decide at the end
whether the work is committed or, when marked rollback-only, discarded.
"""

import logging
from contextlib import contextmanager
from typing import Dict, Generator, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from build_audit.core.builds.exceptions import (
    BuildAuditError,
    ConflictError,
    StorageError,
)
from .models import BuildNodeModel
from .session import TRANSACTION_LOCK_KEY

logger = logging.getLogger(__name__)


UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when *exc* reports a unique or primary key violation.

    NOT NULL, foreign key and check failures are integrity errors too,
    but they are not conflicts with another writer.
    """
    if getattr(exc.orig, "pgcode", None) == UNIQUE_VIOLATION_SQLSTATE:
        return True
    text = str(exc.orig).lower()
    return "unique" in text or "duplicate" in text


@contextmanager
def storage_errors(
    operation: str,
    entity_type: str = "BuildRecord",
    entity_id: str = "",
) -> Generator[None, None, None]:
    """Translate SQLAlchemy failures raised inside the block.

    Unique constraint violations become ConflictError; any other
    SQLAlchemy error becomes StorageError with the original as cause.
    """
    try:
        yield
    except IntegrityError as exc:
        if not is_unique_violation(exc):
            raise StorageError(f"Integrity failure during {operation}: {exc.orig}") from exc
        raise ConflictError(
            entity_type=entity_type,
            entity_id=entity_id,
            message=f"{operation}: {exc.orig}",
        ) from exc
    except SQLAlchemyError as exc:
        raise StorageError(f"Storage failure during {operation}: {exc}") from exc


class UnitOfWork:
    """Transactional boundary around one session.

    Not safe for use from more than one thread at a time. When the
    session carries a transaction lock the unit of work holds it from
    begin() until the session is closed.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        """Initialize the unit of work.

        Args:
            session_factory: Factory producing sessions bound to the store.
        """
        self._session_factory = session_factory
        self._session: Optional[Session] = None
        self._rollback_only = False
        self._closed = False
        self._lock = None
        self.node_cache: Dict[str, BuildNodeModel] = {}

    def begin(self) -> "UnitOfWork":
        """Open the underlying session and transaction."""
        if self._closed:
            raise BuildAuditError("Unit of work has already ended")
        if self._session is None:
            session = self._session_factory()
            lock = session.info.get(TRANSACTION_LOCK_KEY)
            if lock is not None:
                lock.acquire()
            self._session, self._lock = session, lock
            try:
                with storage_errors("begin"):
                    session.begin()
            except BuildAuditError:
                self._close()
                raise
        return self

    @property
    def session(self) -> Session:
        """The active session.

        Raises:
            BuildAuditError: If the unit of work is not active.
        """
        if self._session is None or self._closed:
            raise BuildAuditError("Unit of work is not active")
        return self._session

    @property
    def is_active(self) -> bool:
        """True between begin() and end()."""
        return self._session is not None and not self._closed

    @property
    def is_rollback_only(self) -> bool:
        """True when the work will be discarded on end()."""
        return self._rollback_only

    def set_rollback_only(self) -> None:
        """Mark the unit of work so end() rolls back instead of committing."""
        self._rollback_only = True

    def commit(self) -> None:
        """Commit the transaction and close the session.

        Raises:
            BuildAuditError: If the unit of work is marked rollback-only.
            ConflictError: If a constraint fails at commit.
            StorageError: If the store fails at commit.
        """
        if self._rollback_only:
            raise BuildAuditError("Unit of work is marked rollback-only")
        session = self.session
        try:
            with storage_errors("commit"):
                session.commit()
        except BuildAuditError:
            self.rollback()
            raise
        self._close()

    def rollback(self) -> None:
        """Discard the transaction and close the session."""
        if not self.is_active:
            return
        try:
            self._session.rollback()
        finally:
            self._close()

    def end(self) -> None:
        """Commit, or roll back when marked rollback-only."""
        if not self.is_active:
            return
        if self._rollback_only:
            logger.debug("Rolling back rollback-only unit of work")
            self.rollback()
        else:
            self.commit()

    def _close(self) -> None:
        try:
            if self._session is not None:
                self._session.close()
        finally:
            if self._lock is not None:
                self._lock.release()
                self._lock = None
            self.node_cache.clear()
            self._closed = True

    def __enter__(self) -> "UnitOfWork":
        return self.begin()

    def __exit__(self, exc_type, exc, traceback) -> None:
        if exc_type is not None:
            self.rollback()
        else:
            self.end()
