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

"""Database infrastructure package.

Provides ORM models, mappers, the node resolver, report query builders,
the SQL repository implementation and session management.
"""

from .config import DatabaseConfig
from .mappers import BuildNodeMapper, BuildParameterMapper, BuildRecordMapper
from .models import Base, BuildNodeModel, BuildParameterModel, BuildRecordModel
from .node_resolver import SqlBuildNodeResolver
from .repositories import SqlBuildRecordRepository
from .session import create_engine_from_config, create_session_factory, init_schema
from .unit_of_work import UnitOfWork

__all__ = [
    "DatabaseConfig",
    "BuildNodeMapper",
    "BuildParameterMapper",
    "BuildRecordMapper",
    "Base",
    "BuildNodeModel",
    "BuildParameterModel",
    "BuildRecordModel",
    "SqlBuildNodeResolver",
    "SqlBuildRecordRepository",
    "create_engine_from_config",
    "create_session_factory",
    "init_schema",
    "UnitOfWork",
]
