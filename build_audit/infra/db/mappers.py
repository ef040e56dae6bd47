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

"""Mappers for domain ↔ ORM model conversion.

Explicit mapping between domain entities and ORM models.
They carry no domain logic, only data transformation.
"""

from typing import List

from build_audit.core.builds.entities import BuildNode, BuildParameter, BuildRecord
from build_audit.core.builds.value_objects import ensure_utc
from .models import BuildNodeModel, BuildParameterModel, BuildRecordModel


class BuildNodeMapper:
    """Mapper for BuildNode entity ↔ BuildNodeModel ORM."""

    @staticmethod
    def to_orm(node: BuildNode) -> BuildNodeModel:
        """Convert BuildNode domain entity to ORM model.

        Args:
            node: BuildNode domain entity.

        Returns:
            BuildNodeModel ORM instance.
        """
        return BuildNodeModel(
            url=node.url,
            master_host_name=node.master_host_name,
            master_address=node.master_address,
            name=node.name,
            label=node.label,
        )

    @staticmethod
    def to_domain(model: BuildNodeModel) -> BuildNode:
        """Convert BuildNodeModel ORM to BuildNode domain entity.

        Args:
            model: BuildNodeModel ORM instance.

        Returns:
            BuildNode domain entity.
        """
        return BuildNode(
            url=model.url,
            master_host_name=model.master_host_name,
            master_address=model.master_address,
            name=model.name,
            label=model.label,
        )


class BuildParameterMapper:
    """Mapper for BuildParameter value ↔ BuildParameterModel ORM."""

    @staticmethod
    def to_orm(parameter: BuildParameter, position: int) -> BuildParameterModel:
        """Convert a parameter to ORM, keeping its list position."""
        return BuildParameterModel(
            position=position,
            name=parameter.name,
            value=parameter.value,
        )

    @staticmethod
    def to_domain(model: BuildParameterModel) -> BuildParameter:
        """Convert BuildParameterModel ORM to BuildParameter."""
        return BuildParameter(name=model.name, value=model.value)

    @classmethod
    def to_orm_list(cls, parameters: List[BuildParameter]) -> List[BuildParameterModel]:
        """Convert an ordered parameter list to ORM models."""
        return [cls.to_orm(param, position) for position, param in enumerate(parameters)]


class BuildRecordMapper:
    """Mapper for BuildRecord entity ↔ BuildRecordModel ORM."""

    @staticmethod
    def to_orm(record: BuildRecord) -> BuildRecordModel:
        """Convert BuildRecord domain entity to ORM model.

        The node is not linked here: the caller adds the model to its
        session first and then attaches the resolved node row, so the
        node's ``builds`` backref never sees a transient record.

        Args:
            record: BuildRecord domain entity.

        Returns:
            BuildRecordModel ORM instance without a node.
        """
        model = BuildRecordModel(build_id=record.build_id)
        BuildRecordMapper._copy_fields(record, model)
        return model

    @staticmethod
    def apply(
        record: BuildRecord,
        model: BuildRecordModel,
        node_model: BuildNodeModel,
    ) -> None:
        """Copy every mutable field of *record* onto a session-bound *model*.

        Parameters are replaced wholesale; orphaned rows are deleted
        by the relationship cascade.
        """
        BuildRecordMapper._copy_fields(record, model)
        model.node = node_model

    @staticmethod
    def _copy_fields(record: BuildRecord, model: BuildRecordModel) -> None:
        model.name = record.name
        model.full_name = record.full_name
        model.start_date = ensure_utc(record.start_date)
        model.end_date = ensure_utc(record.end_date)
        model.duration = record.duration
        model.user_id = record.user_id
        model.user_name = record.user_name
        model.result = record.result
        model.parameters = BuildParameterMapper.to_orm_list(record.parameters)

    @staticmethod
    def to_domain(model: BuildRecordModel) -> BuildRecord:
        """Convert BuildRecordModel ORM to BuildRecord domain entity.

        Args:
            model: BuildRecordModel ORM instance.

        Returns:
            BuildRecord domain entity.
        """
        return BuildRecord(
            build_id=model.build_id,
            name=model.name,
            full_name=model.full_name,
            start_date=ensure_utc(model.start_date),
            end_date=ensure_utc(model.end_date),
            duration=model.duration,
            user_id=model.user_id,
            user_name=model.user_name,
            result=model.result,
            parameters=[
                BuildParameterMapper.to_domain(param) for param in model.parameters
            ],
            node=BuildNodeMapper.to_domain(model.node),
        )
