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

"""Statement builders for the build record report queries.

One builder per report shape. Each validates its arguments, raising
ValidationError before any statement is produced, and returns a
SQLAlchemy ``Select`` that the repository executes. Exact string
filters compare lower-cased values; only the project name pattern
query accepts LIKE wildcards.
"""

from datetime import datetime

from sqlalchemy import Select, and_, false, func, select
from sqlalchemy.sql.elements import ColumnElement

from build_audit.core.builds.value_objects import (
    DateWindow,
    DurationRange,
    ExactText,
    NamePattern,
)
from .models import BuildNodeModel, BuildParameterModel, BuildRecordModel


def _ordered(stmt: Select) -> Select:
    return stmt.order_by(BuildRecordModel.start_date, BuildRecordModel.build_id)


def _iequals(column, text: ExactText) -> ColumnElement:
    return func.lower(column) == text.folded


def _within(window: DateWindow) -> ColumnElement:
    if window.is_empty:
        return false()
    return BuildRecordModel.start_date.between(window.start, window.end)


def _on_host(stmt: Select, host: ExactText, window: DateWindow) -> Select:
    return stmt.join(BuildRecordModel.node).where(
        _iequals(BuildNodeModel.master_host_name, host),
        _within(window),
    )


def by_id(build_id: str) -> Select:
    """Record whose identifier equals *build_id* exactly."""
    key = ExactText(build_id, "build_id")
    return select(BuildRecordModel).where(BuildRecordModel.build_id == key.value)


def by_date_range(start: datetime, end: datetime) -> Select:
    """Records whose start date lies in [start, end]."""
    window = DateWindow(start, end)
    return _ordered(select(BuildRecordModel).where(_within(window)))


def by_duration_range(minimum: int, maximum: int) -> Select:
    """Records whose duration lies in [minimum, maximum] milliseconds."""
    bounds = DurationRange(minimum, maximum)
    if bounds.is_empty:
        clause = false()
    else:
        clause = BuildRecordModel.duration.between(bounds.minimum, bounds.maximum)
    return _ordered(select(BuildRecordModel).where(clause))


def by_full_name(full_name: str) -> Select:
    """Records with the given full name, ignoring case."""
    text = ExactText(full_name, "full_name")
    return _ordered(
        select(BuildRecordModel).where(_iequals(BuildRecordModel.full_name, text))
    )


def by_name(name: str) -> Select:
    """Records with the given name, ignoring case."""
    text = ExactText(name, "name")
    return _ordered(select(BuildRecordModel).where(_iequals(BuildRecordModel.name, text)))


def by_user_id(user_id: str) -> Select:
    """Records triggered by the given user id, ignoring case."""
    text = ExactText(user_id, "user_id")
    return _ordered(
        select(BuildRecordModel).where(_iequals(BuildRecordModel.user_id, text))
    )


def by_user_name(user_name: str) -> Select:
    """Records triggered by the given user name, ignoring case."""
    text = ExactText(user_name, "user_name")
    return _ordered(
        select(BuildRecordModel).where(_iequals(BuildRecordModel.user_name, text))
    )


def by_host(host_name: str, start: datetime, end: datetime) -> Select:
    """Records run under a master host with a start date in [start, end]."""
    host = ExactText(host_name, "host_name")
    window = DateWindow(start, end)
    return _ordered(_on_host(select(BuildRecordModel), host, window))


def by_host_and_project(
    host_name: str, project_name: str, start: datetime, end: datetime
) -> Select:
    """Records of one project under a master host within a date window."""
    host = ExactText(host_name, "host_name")
    project = ExactText(project_name, "project_name")
    window = DateWindow(start, end)
    stmt = _on_host(select(BuildRecordModel), host, window)
    return _ordered(stmt.where(_iequals(BuildRecordModel.name, project)))


def project_names(host_name: str, start: datetime, end: datetime) -> Select:
    """Distinct project names under a master host within a date window."""
    host = ExactText(host_name, "host_name")
    window = DateWindow(start, end)
    stmt = _on_host(select(BuildRecordModel.name), host, window)
    return stmt.distinct().order_by(BuildRecordModel.name)


def project_names_like(
    host_name: str, pattern: str, start: datetime, end: datetime
) -> Select:
    """Distinct project names matching a LIKE *pattern* ('%' is a wildcard)."""
    host = ExactText(host_name, "host_name")
    name_pattern = NamePattern(pattern)
    window = DateWindow(start, end)
    stmt = _on_host(select(BuildRecordModel.name), host, window)
    stmt = stmt.where(BuildRecordModel.name.like(name_pattern.value))
    return stmt.distinct().order_by(BuildRecordModel.name)


def by_parameter(
    host_name: str,
    param_name: str,
    param_value: str,
    start: datetime,
    end: datetime,
) -> Select:
    """Records carrying the parameter name/value pair within a date window."""
    host = ExactText(host_name, "host_name")
    name = ExactText(param_name, "param_name")
    value = ExactText(param_value, "param_value")
    window = DateWindow(start, end)
    has_param = BuildRecordModel.parameters.any(
        and_(
            _iequals(BuildParameterModel.name, name),
            _iequals(BuildParameterModel.value, value),
        )
    )
    stmt = _on_host(select(BuildRecordModel), host, window)
    return _ordered(stmt.where(has_param))
