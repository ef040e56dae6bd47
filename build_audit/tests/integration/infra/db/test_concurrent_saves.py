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

"""Concurrent writers against file-backed and in-memory SQLite stores."""

# pylint: disable=redefined-outer-name

from concurrent.futures import ThreadPoolExecutor
from typing import Generator

import pytest
from sqlalchemy import func, select
from sqlalchemy.engine import Engine

from build_audit.container import DevContainer
from build_audit.infra.db.config import DatabaseConfig
from build_audit.infra.db.models import BuildNodeModel, BuildRecordModel
from build_audit.infra.db.repositories import SqlBuildRecordRepository
from build_audit.infra.db.session import (
    create_engine_from_config,
    create_session_factory,
    init_schema,
)
from build_audit.tests.conftest import make_build

WRITERS = 8


@pytest.fixture
def file_engine(tmp_path) -> Generator[Engine, None, None]:
    """SQLite database file shared by every writer thread."""
    config = DatabaseConfig(database_url=f"sqlite:///{tmp_path / 'audit.db'}")
    engine = init_schema(create_engine_from_config(config))
    yield engine
    engine.dispose()


class TestConcurrentSaves:
    """Writers racing on the same node URL."""

    def test_single_node_row_for_concurrent_writers(self, file_engine) -> None:
        """Every writer succeeds and exactly one node row exists afterwards."""
        session_factory = create_session_factory(file_engine)
        repository = SqlBuildRecordRepository(session_factory)
        builds = [make_build() for _ in range(WRITERS)]

        with ThreadPoolExecutor(max_workers=WRITERS) as pool:
            build_ids = list(pool.map(repository.save, builds))

        assert len(set(build_ids)) == WRITERS
        with session_factory() as session:
            nodes = session.execute(
                select(func.count()).select_from(BuildNodeModel)
            ).scalar_one()
            records = session.execute(
                select(func.count()).select_from(BuildRecordModel)
            ).scalar_one()
        assert nodes == 1
        assert records == WRITERS

    def test_concurrent_batches_share_node(self, file_engine) -> None:
        """Batches on one node from several threads all land."""
        session_factory = create_session_factory(file_engine)
        repository = SqlBuildRecordRepository(session_factory)
        batches = [[make_build() for _ in range(3)] for _ in range(WRITERS)]

        with ThreadPoolExecutor(max_workers=WRITERS) as pool:
            results = list(pool.map(repository.save_all, batches))

        assert sum(len(ids) for ids in results) == WRITERS * 3
        node = repository.find_node_by_url(batches[0][0].node.url)
        assert node == batches[0][0].node


class TestSharedMemoryStore:
    """Threads sharing the development container's in-memory store."""

    def test_threads_take_turns_on_shared_connection(self) -> None:
        """Concurrent saves and reads on one connection all succeed."""
        container = DevContainer()
        try:
            repository = container.build_record_repository()
            builds = [make_build() for _ in range(WRITERS)]

            def save_and_read(build):
                build_id = repository.save(build)
                return build_id, repository.find_by_name(build.name)

            with ThreadPoolExecutor(max_workers=WRITERS) as pool:
                results = list(pool.map(save_and_read, builds))

            assert len({build_id for build_id, _ in results}) == WRITERS
            for build, (build_id, found) in zip(builds, results):
                assert [record.build_id for record in found] == [build_id]
                assert found[0] == build
        finally:
            container.engine().dispose()
