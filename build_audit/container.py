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

"""Dependency Injector containers for the build audit store."""
# pylint: disable=c-extension-no-member

import os

from dependency_injector import containers, providers

from build_audit.common.config import BuildAuditConfig, load_config
from build_audit.common.logging_utils import configure_logging
from build_audit.infra.db.config import DatabaseConfig
from build_audit.infra.db.repositories import SqlBuildRecordRepository
from build_audit.infra.db.session import (
    create_engine_from_config,
    create_session_factory,
    init_schema,
)
from build_audit.infra.id_generator import BuildUUIDGenerator


def _create_engine(config: DatabaseConfig):
    """Create the engine and make sure the audit tables exist."""
    return init_schema(create_engine_from_config(config))


def _load_app_config() -> BuildAuditConfig:
    """Read settings from the INI file when configured, else the environment."""
    config_path = os.getenv("BUILD_AUDIT_CONFIG_PATH")
    if config_path:
        return load_config(config_path)
    return BuildAuditConfig(
        database=DatabaseConfig.from_env(),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def _database_config(app_config: BuildAuditConfig) -> DatabaseConfig:
    """Apply the configured log level and hand out the connection settings."""
    configure_logging(app_config.log_level)
    return app_config.database


class DevContainer(containers.DeclarativeContainer):  # pylint: disable=R0903
    """Development profile container.

    Uses an in-memory SQLite store for fast development and testing.
    No external database required.

    Activated when ENV=dev (default).
    """

    database_config = providers.Singleton(
        DatabaseConfig,
        database_url="sqlite:///:memory:",
    )

    engine = providers.Singleton(_create_engine, config=database_config)
    session_factory = providers.Singleton(create_session_factory, engine=engine)

    build_id_generator = providers.Singleton(BuildUUIDGenerator)

    build_record_repository = providers.Singleton(
        SqlBuildRecordRepository,
        session_factory=session_factory,
        id_generator=build_id_generator,
    )


class ProdContainer(containers.DeclarativeContainer):  # pylint: disable=R0903
    """Production profile container.

    Connects to the store named by BUILD_AUDIT_CONFIG_PATH or DATABASE_URL
    and applies the configured log level.

    Activated when ENV=prod.
    """

    app_config = providers.Singleton(_load_app_config)
    database_config = providers.Singleton(_database_config, app_config=app_config)

    engine = providers.Singleton(_create_engine, config=database_config)
    session_factory = providers.Singleton(create_session_factory, engine=engine)

    build_id_generator = providers.Singleton(BuildUUIDGenerator)

    build_record_repository = providers.Singleton(
        SqlBuildRecordRepository,
        session_factory=session_factory,
        id_generator=build_id_generator,
    )


def get_container_class():
    """Select container class based on ENV environment variable.

    Returns:
        DevContainer if ENV=dev (default)
        ProdContainer if ENV=prod
    """
    env = os.getenv("ENV", "dev").lower()

    if env == "prod":
        return ProdContainer

    return DevContainer


Container = get_container_class()

# Singleton container instance shared by callers
container = Container()

__all__ = ["Container", "container", "get_container_class", "DevContainer", "ProdContainer"]
