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

"""SQL repository implementation for build audit persistence.

Implements the ``BuildRecordRepository`` port from
``build_audit.core.builds.repositories`` using SQLAlchemy ORM. Every
public call runs in its own unit of work unless the caller passes an
open one with ``uow=``.
"""

from contextlib import contextmanager
from datetime import datetime
from typing import Generator, Iterable, List, Optional

from sqlalchemy import Select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from build_audit.common.logging_utils import log_secure_info
from build_audit.core.builds.entities import BuildNode, BuildRecord
from build_audit.core.builds.exceptions import ConflictError, ValidationError
from build_audit.core.builds.repositories import BuildIdGenerator
from build_audit.infra.id_generator import BuildUUIDGenerator
from . import queries
from .mappers import BuildRecordMapper
from .models import BuildRecordModel
from .node_resolver import SqlBuildNodeResolver
from .unit_of_work import UnitOfWork, is_unique_violation, storage_errors


class SqlBuildRecordRepository:  # pylint: disable=too-many-public-methods
    """SQL implementation of BuildRecordRepository protocol."""

    def __init__(
        self,
        session_factory: sessionmaker,
        id_generator: Optional[BuildIdGenerator] = None,
    ) -> None:
        """Initialize repository.

        Args:
            session_factory: Factory for sessions bound to the audit store.
            id_generator: Source of new build ids; UUID v4 by default.
        """
        self.session_factory = session_factory
        self.id_generator = id_generator or BuildUUIDGenerator()

    def begin(self) -> UnitOfWork:
        """Open an explicit unit of work.

        Usage:
            with repository.begin() as uow:
                uow.set_rollback_only()
                repository.save_all(records, uow=uow)
                names = repository.find_project_names(host, start, end, uow=uow)
        """
        return UnitOfWork(self.session_factory).begin()

    @contextmanager
    def _unit(
        self, operation: str, uow: Optional[UnitOfWork]
    ) -> Generator[UnitOfWork, None, None]:
        if uow is not None:
            with storage_errors(operation):
                yield uow
            return
        with self.begin() as own:
            with storage_errors(operation):
                yield own

    # --- writes ---

    def save(self, record: BuildRecord, uow: Optional[UnitOfWork] = None) -> str:
        """Persist a new build record together with its node and parameters.

        Args:
            record: Record to store; its build_id is assigned if absent.
            uow: Optional caller-owned unit of work.

        Returns:
            The record's build id.

        Raises:
            ValidationError: If record is None or invalid.
            ConflictError: If the id is already stored or the node cannot be
                resolved after a retry.
            StorageError: If the store fails.
        """
        self._check_record(record)
        with self._unit("save", uow) as unit:
            build_id = self._insert(unit, record)
        record.build_id = build_id
        return build_id

    def save_all(
        self, records: Iterable[BuildRecord], uow: Optional[UnitOfWork] = None
    ) -> List[str]:
        """Persist a batch of records atomically.

        Any failure aborts the whole batch. Node rows are resolved once
        per URL for the batch.

        Args:
            records: Records to store; may be empty.
            uow: Optional caller-owned unit of work.

        Returns:
            Build ids in input order.

        Raises:
            ValidationError: If records is None or any record is invalid.
        """
        if records is None:
            raise ValidationError("Build record list cannot be None")
        batch = list(records)
        for record in batch:
            self._check_record(record)
        if not batch:
            return []
        with self._unit("save_all", uow) as unit:
            build_ids = [self._insert(unit, record) for record in batch]
        for record, build_id in zip(batch, build_ids):
            record.build_id = build_id
        log_secure_info("info", f"Saved batch of {len(build_ids)} build records")
        return build_ids

    def update(self, record: BuildRecord, uow: Optional[UnitOfWork] = None) -> None:
        """Overwrite the stored row of an already saved record.

        Raises:
            ValidationError: If record is None, was never saved, or is invalid.
        """
        if record is None:
            raise ValidationError("Build record cannot be None")
        if record.build_id is None:
            raise ValidationError("Build record has no id; save it before updating")
        self._check_record(record)
        with self._unit("update", uow) as unit:
            session = unit.session
            model = session.get(BuildRecordModel, record.build_id)
            if model is None:
                raise ValidationError(f"No stored build record with id {record.build_id}")
            resolver = SqlBuildNodeResolver(session, unit.node_cache)
            node_model = resolver.resolve_or_create(record.node)
            BuildRecordMapper.apply(record, model, node_model)
            session.flush()
        log_secure_info("info", "Updated build record", identifier=record.build_id)

    def _check_record(self, record: BuildRecord) -> None:
        if record is None:
            raise ValidationError("Build record cannot be None")
        if not isinstance(record, BuildRecord):
            raise ValidationError(
                f"Expected BuildRecord, got {type(record).__name__}"
            )
        record.validate()
        record.sync_duration()

    def _insert(self, unit: UnitOfWork, record: BuildRecord) -> str:
        session = unit.session
        resolver = SqlBuildNodeResolver(session, unit.node_cache)
        node_model = resolver.resolve_or_create(record.node)

        if record.build_id is not None:
            build_id = record.build_id
            if session.get(BuildRecordModel, build_id) is not None:
                raise ConflictError(
                    entity_type="BuildRecord",
                    entity_id=build_id,
                    message="build id already stored",
                )
        else:
            build_id = self.id_generator.generate()
        model = BuildRecordMapper.to_orm(record)
        model.build_id = build_id
        try:
            with session.begin_nested():
                session.add(model)
                model.node = node_model
                session.flush()
        except IntegrityError as exc:
            if not is_unique_violation(exc):
                raise
            raise ConflictError(
                entity_type="BuildRecord",
                entity_id=build_id,
                message="build id already stored",
            ) from exc

        log_secure_info(
            "debug",
            f"Saved build record {record.full_name} on {record.node.master_host_name}",
            identifier=build_id,
        )
        return build_id

    # --- reads ---

    def _fetch_all(
        self, operation: str, stmt: Select, uow: Optional[UnitOfWork]
    ) -> List[BuildRecord]:
        with self._unit(operation, uow) as unit:
            models = unit.session.execute(stmt).unique().scalars().all()
            return [BuildRecordMapper.to_domain(model) for model in models]

    def _fetch_names(
        self, operation: str, stmt: Select, uow: Optional[UnitOfWork]
    ) -> List[str]:
        with self._unit(operation, uow) as unit:
            return list(unit.session.execute(stmt).scalars().all())

    def get_by_id(
        self, build_id: str, uow: Optional[UnitOfWork] = None
    ) -> Optional[BuildRecord]:
        """Retrieve a build record by its identifier.

        Returns:
            BuildRecord if found, None otherwise.
        """
        stmt = queries.by_id(build_id)
        with self._unit("get_by_id", uow) as unit:
            model = unit.session.execute(stmt).unique().scalar_one_or_none()
            if model is None:
                return None
            return BuildRecordMapper.to_domain(model)

    def find_node_by_url(
        self, url: str, uow: Optional[UnitOfWork] = None
    ) -> Optional[BuildNode]:
        """Retrieve a stored build node by its exact URL.

        Raises:
            ValidationError: If url is None.
        """
        if url is None:
            raise ValidationError("Node URL cannot be None")
        with self._unit("find_node_by_url", uow) as unit:
            return SqlBuildNodeResolver(unit.session).find_by_url(url)

    def find_by_date_range(
        self, start: datetime, end: datetime, uow: Optional[UnitOfWork] = None
    ) -> List[BuildRecord]:
        """Records whose start date lies in [start, end]."""
        return self._fetch_all("find_by_date_range", queries.by_date_range(start, end), uow)

    def find_by_duration_range(
        self, minimum: int, maximum: int, uow: Optional[UnitOfWork] = None
    ) -> List[BuildRecord]:
        """Records whose duration in milliseconds lies in [minimum, maximum]."""
        stmt = queries.by_duration_range(minimum, maximum)
        return self._fetch_all("find_by_duration_range", stmt, uow)

    def find_by_full_name(
        self, full_name: str, uow: Optional[UnitOfWork] = None
    ) -> List[BuildRecord]:
        """Records with the given full name, ignoring case."""
        return self._fetch_all("find_by_full_name", queries.by_full_name(full_name), uow)

    def find_by_name(
        self, name: str, uow: Optional[UnitOfWork] = None
    ) -> List[BuildRecord]:
        """Records with the given name, ignoring case."""
        return self._fetch_all("find_by_name", queries.by_name(name), uow)

    def find_by_user_id(
        self, user_id: str, uow: Optional[UnitOfWork] = None
    ) -> List[BuildRecord]:
        """Records triggered by the given user id, ignoring case."""
        return self._fetch_all("find_by_user_id", queries.by_user_id(user_id), uow)

    def find_by_user_name(
        self, user_name: str, uow: Optional[UnitOfWork] = None
    ) -> List[BuildRecord]:
        """Records triggered by the given user name, ignoring case."""
        return self._fetch_all("find_by_user_name", queries.by_user_name(user_name), uow)

    def find_by_host(
        self,
        host_name: str,
        start: datetime,
        end: datetime,
        uow: Optional[UnitOfWork] = None,
    ) -> List[BuildRecord]:
        """Records run under a master host within a date window."""
        stmt = queries.by_host(host_name, start, end)
        return self._fetch_all("find_by_host", stmt, uow)

    def find_by_host_and_project(
        self,
        host_name: str,
        project_name: str,
        start: datetime,
        end: datetime,
        uow: Optional[UnitOfWork] = None,
    ) -> List[BuildRecord]:
        """Records of one project under a master host within a date window."""
        stmt = queries.by_host_and_project(host_name, project_name, start, end)
        return self._fetch_all("find_by_host_and_project", stmt, uow)

    def find_project_names(
        self,
        host_name: str,
        start: datetime,
        end: datetime,
        uow: Optional[UnitOfWork] = None,
    ) -> List[str]:
        """Distinct project names under a master host within a date window."""
        stmt = queries.project_names(host_name, start, end)
        return self._fetch_names("find_project_names", stmt, uow)

    def find_project_names_like(
        self,
        host_name: str,
        pattern: str,
        start: datetime,
        end: datetime,
        uow: Optional[UnitOfWork] = None,
    ) -> List[str]:
        """Distinct project names matching a LIKE pattern within a date window."""
        stmt = queries.project_names_like(host_name, pattern, start, end)
        return self._fetch_names("find_project_names_like", stmt, uow)

    def find_by_parameter(  # pylint: disable=too-many-arguments
        self,
        host_name: str,
        param_name: str,
        param_value: str,
        start: datetime,
        end: datetime,
        uow: Optional[UnitOfWork] = None,
    ) -> List[BuildRecord]:
        """Records carrying a parameter name/value pair within a date window."""
        stmt = queries.by_parameter(host_name, param_name, param_value, start, end)
        return self._fetch_all("find_by_parameter", stmt, uow)
