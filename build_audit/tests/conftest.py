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

"""Shared pytest fixtures for build audit tests."""

# pylint: disable=redefined-outer-name

import random
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Generator, List, Optional

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from build_audit.core.builds.entities import BuildNode, BuildParameter, BuildRecord
from build_audit.infra.db.config import DatabaseConfig
from build_audit.infra.db.repositories import SqlBuildRecordRepository
from build_audit.infra.db.session import (
    create_engine_from_config,
    create_session_factory,
    init_schema,
)

HOST_NAME = "MY_JENKINS"


def _token() -> str:
    return uuid.uuid4().hex[:10].upper()


def make_node(host_name: str = HOST_NAME, node_name: str = "MASTER") -> BuildNode:
    """Build a node whose URL is derived from host and node name."""
    return BuildNode(
        url=f"http://{host_name.lower()}.example.com:8080/computer/{node_name}/",
        master_host_name=host_name,
        master_address="10.0.0.1",
        name=node_name,
        label="linux",
    )


def make_build(
    name: Optional[str] = None,
    host_name: str = HOST_NAME,
    start_date: Optional[datetime] = None,
    parameter_count: int = 2,
) -> BuildRecord:
    """Build an unsaved record with random, upper-case identifying fields."""
    name = name or f"PROJECT_{_token()}"
    start_date = start_date or (
        datetime.now(timezone.utc) - timedelta(minutes=random.randint(5, 600))
    )
    duration_ms = random.randint(1_000, 9_000)
    token = _token()
    return BuildRecord(
        name=name,
        full_name=f"FOLDER/{name}",
        start_date=start_date,
        end_date=start_date + timedelta(milliseconds=duration_ms),
        duration=duration_ms,
        user_id=f"USER_{token}",
        user_name=f"User {token}",
        result="SUCCESS",
        parameters=[
            BuildParameter(name=f"PARAM_{i}_{_token()}", value=f"VALUE_{_token()}")
            for i in range(parameter_count)
        ],
        node=make_node(host_name),
    )


def make_dataset(
    host_name: str = HOST_NAME, projects: int = 4, builds_per_project: int = 3
) -> Dict[str, List[BuildRecord]]:
    """Random builds grouped by project name, all on the same host."""
    dataset: Dict[str, List[BuildRecord]] = {}
    for _ in range(projects):
        name = f"PROJECT_{_token()}"
        dataset[name] = [
            make_build(name=name, host_name=host_name) for _ in range(builds_per_project)
        ]
    return dataset


@pytest.fixture
def db_engine() -> Generator[Engine, None, None]:
    """Fresh in-memory SQLite store with the audit schema."""
    engine = init_schema(
        create_engine_from_config(DatabaseConfig(database_url="sqlite:///:memory:"))
    )
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine: Engine) -> sessionmaker:
    """Session factory bound to the test store."""
    return create_session_factory(db_engine)


@pytest.fixture
def repository(session_factory: sessionmaker) -> SqlBuildRecordRepository:
    """Repository over the in-memory store."""
    return SqlBuildRecordRepository(session_factory)


@pytest.fixture
def build_factory() -> Callable[..., BuildRecord]:
    """Factory for random unsaved build records."""
    return make_build


@pytest.fixture
def dataset() -> Dict[str, List[BuildRecord]]:
    """Random multi-project dataset on HOST_NAME."""
    return make_dataset()


@pytest.fixture
def host_name() -> str:
    """Master host name every generated build runs under."""
    return HOST_NAME
