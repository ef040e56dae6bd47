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

"""Domain entities for Build Audit module."""

from dataclasses import dataclass, field, fields
from datetime import datetime, timedelta
from typing import List, Optional

from build_audit.core.builds.exceptions import ValidationError
from build_audit.core.builds.value_objects import ensure_utc


@dataclass(frozen=True, eq=False)
class BuildNode:
    """Execution host a build ran on, identified by its URL.

    Two nodes are equal when their URLs are equal; the remaining
    attributes are descriptive only.

    Attributes:
        url: Unique natural key of the node.
        master_host_name: Host name of the controller that owns the node.
        master_address: Optional network address of the controller.
        name: Optional display name of the node.
        label: Optional node label expression.
    """

    url: str
    master_host_name: str
    master_address: Optional[str] = None
    name: Optional[str] = None
    label: Optional[str] = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BuildNode):
            return NotImplemented
        return self.url == other.url

    def __hash__(self) -> int:
        return hash(self.url)


@dataclass(frozen=True)
class BuildParameter:
    """Name/value pair attached to exactly one build record."""

    name: str
    value: str


@dataclass(eq=False)
# pylint: disable=too-many-instance-attributes
class BuildRecord:
    """One audited execution of a build job.

    ``build_id`` is ``None`` until the repository stores the record for
    the first time; afterwards it never changes. Records that both carry
    an id compare by id, otherwise every field is compared.

    Attributes:
        name: Job name.
        full_name: Namespaced job name (folder path included).
        start_date: Build start timestamp (UTC).
        node: Node the build ran on.
        end_date: Build end timestamp, None while running.
        duration: Build duration in milliseconds.
        user_id: Id of the user that triggered the build.
        user_name: Display name of the user that triggered the build.
        result: Build status such as SUCCESS or FAILURE.
        parameters: Ordered build parameters.
        build_id: Store-assigned identifier.
    """

    name: str
    full_name: str
    start_date: datetime
    node: BuildNode
    end_date: Optional[datetime] = None
    duration: int = 0
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    result: Optional[str] = None
    parameters: List[BuildParameter] = field(default_factory=list)
    build_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Normalize timestamps to UTC."""
        self._normalize_dates()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BuildRecord):
            return NotImplemented
        if self.build_id is not None and other.build_id is not None:
            return self.build_id == other.build_id
        return all(
            getattr(self, f.name) == getattr(other, f.name) for f in fields(self)
        )

    __hash__ = None  # type: ignore[assignment]

    def compute_duration(self) -> Optional[int]:
        """Return milliseconds between start and end, or None if not finished."""
        if self.end_date is None or self.start_date is None:
            return None
        delta = ensure_utc(self.end_date) - ensure_utc(self.start_date)
        return delta // timedelta(milliseconds=1)

    def _normalize_dates(self) -> None:
        if isinstance(self.start_date, datetime):
            self.start_date = ensure_utc(self.start_date)
        if isinstance(self.end_date, datetime):
            self.end_date = ensure_utc(self.end_date)

    def sync_duration(self) -> None:
        """Recompute duration from the start and end dates when both are set."""
        self._normalize_dates()
        computed = self.compute_duration()
        if computed is not None:
            self.duration = computed

    def parameter(self, name: str) -> Optional[BuildParameter]:
        """Return the first parameter called *name*, if any."""
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    def validate(self) -> None:
        """Check the record can be stored.

        Raises:
            ValidationError: If a required field is missing or inconsistent.
        """
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValidationError("Build name cannot be empty")
        if not isinstance(self.full_name, str) or not self.full_name.strip():
            raise ValidationError("Build full name cannot be empty")
        if not isinstance(self.start_date, datetime):
            raise ValidationError("Build start date is required")
        if self.end_date is not None and not isinstance(self.end_date, datetime):
            raise ValidationError("Build end date must be a datetime")
        start, end = ensure_utc(self.start_date), ensure_utc(self.end_date)
        if end is not None and end < start:
            raise ValidationError(
                f"Build end date {end.isoformat()} is before "
                f"start date {start.isoformat()}"
            )
        if isinstance(self.duration, bool) or not isinstance(self.duration, int):
            raise ValidationError("Build duration must be an integer")
        if self.duration < 0:
            raise ValidationError(f"Build duration cannot be negative, got {self.duration}")
        if not isinstance(self.node, BuildNode):
            raise ValidationError("Build node is required")
        if not isinstance(self.node.url, str) or not self.node.url.strip():
            raise ValidationError("Build node URL cannot be empty")
        host = self.node.master_host_name
        if not isinstance(host, str) or not host.strip():
            raise ValidationError("Build node master host name cannot be empty")
        if self.parameters is None:
            raise ValidationError("Build parameters cannot be None")
        for param in self.parameters:
            if not isinstance(param, BuildParameter) or not param.name:
                raise ValidationError("Build parameters must have a name")
