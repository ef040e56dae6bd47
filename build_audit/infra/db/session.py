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

"""Database engine and session management.

SQLite gets the pysqlite transaction recipe from the SQLAlchemy docs so
that SAVEPOINTs work and writers take the database lock up front with
``BEGIN IMMEDIATE``. SQLite's built-in ``lower()`` folds ASCII only, so
connections get a Unicode-aware replacement. An in-memory database has a
single shared connection; its sessions carry a lock that units of work
hold for their whole transaction. Other backends get a sized connection
pool.
"""

import logging
import threading
from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .config import DatabaseConfig
from .models import Base

logger = logging.getLogger(__name__)

SQLITE_BUSY_TIMEOUT_SECONDS = 30

TRANSACTION_LOCK_KEY = "build_audit.transaction_lock"


def _unicode_lower(value) -> Optional[str]:
    if value is None:
        return None
    return str(value).lower()


def _install_sqlite_transaction_hooks(engine: Engine) -> None:
    """Let SQLAlchemy, not pysqlite, emit BEGIN for every transaction."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, _connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)

    @event.listens_for(engine, "begin")
    def _on_begin(connection):
        connection.exec_driver_sql("BEGIN IMMEDIATE")


def create_engine_from_config(config: DatabaseConfig) -> Engine:
    """Create the SQLAlchemy engine described by *config*.

    Raises:
        ConfigurationError: If the URL is missing or invalid.
    """
    url = config.url()
    if config.is_sqlite:
        kwargs = {
            "connect_args": {
                "check_same_thread": False,
                "timeout": SQLITE_BUSY_TIMEOUT_SECONDS,
            },
        }
        if config.is_memory:
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, echo=config.echo, **kwargs)
        _install_sqlite_transaction_hooks(engine)
    else:
        engine = create_engine(
            url,
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_recycle=config.pool_recycle,
            pool_pre_ping=True,
            echo=config.echo,
        )
    logger.info("Database engine created for backend: %s", url.get_backend_name())
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create the session factory used by repositories.

    Sessions over a single shared connection carry a re-entrant lock
    under ``TRANSACTION_LOCK_KEY`` in ``Session.info``.
    """
    info = {}
    if isinstance(engine.pool, StaticPool):
        info[TRANSACTION_LOCK_KEY] = threading.RLock()
    return sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
        info=info,
    )


def init_schema(engine: Engine) -> Engine:
    """Create all audit tables that do not exist yet.

    Returns:
        The same engine, so the call can be chained in providers.
    """
    Base.metadata.create_all(engine)
    logger.info("Build audit schema initialized")
    return engine
