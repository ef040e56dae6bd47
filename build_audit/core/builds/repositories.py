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

"""Repository ports for the Build Audit module.

Infrastructure adapters in ``build_audit.infra`` implement these.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional, Protocol

from build_audit.core.builds.entities import BuildNode, BuildRecord


class BuildIdGenerator(ABC):  # pylint: disable=R0903
    """Source of identifiers for newly stored build records."""

    @abstractmethod
    def generate(self) -> str:
        """Generate a new, unique build identifier.

        Returns:
            Identifier string.
        """
        ...


class BuildRecordRepository(Protocol):
    """Persistence and reporting queries over build records."""

    def save(self, record: BuildRecord) -> str:
        """Store a new record and return its identifier."""
        ...

    def save_all(self, records: Iterable[BuildRecord]) -> List[str]:
        """Store every record in one atomic batch."""
        ...

    def update(self, record: BuildRecord) -> None:
        """Overwrite the stored row of an already saved record."""
        ...

    def get_by_id(self, build_id: str) -> Optional[BuildRecord]:
        """Return the record with *build_id*, or None."""
        ...

    def find_node_by_url(self, url: str) -> Optional[BuildNode]:
        """Return the stored node with *url*, or None."""
        ...

    def find_by_date_range(self, start: datetime, end: datetime) -> List[BuildRecord]:
        """Records whose start date lies in [start, end]."""
        ...

    def find_by_duration_range(self, minimum: int, maximum: int) -> List[BuildRecord]:
        """Records whose duration lies in [minimum, maximum]."""
        ...

    def find_by_full_name(self, full_name: str) -> List[BuildRecord]:
        """Records with the given full name, ignoring case."""
        ...

    def find_by_name(self, name: str) -> List[BuildRecord]:
        """Records with the given name, ignoring case."""
        ...

    def find_by_user_id(self, user_id: str) -> List[BuildRecord]:
        """Records triggered by the given user id, ignoring case."""
        ...

    def find_by_user_name(self, user_name: str) -> List[BuildRecord]:
        """Records triggered by the given user name, ignoring case."""
        ...

    def find_by_host(
        self, host_name: str, start: datetime, end: datetime
    ) -> List[BuildRecord]:
        """Records run under a master host within a date window."""
        ...

    def find_by_host_and_project(
        self, host_name: str, project_name: str, start: datetime, end: datetime
    ) -> List[BuildRecord]:
        """Records of one project under a master host within a date window."""
        ...

    def find_project_names(
        self, host_name: str, start: datetime, end: datetime
    ) -> List[str]:
        """Distinct project names under a master host within a date window."""
        ...

    def find_project_names_like(
        self, host_name: str, pattern: str, start: datetime, end: datetime
    ) -> List[str]:
        """Distinct project names matching a LIKE pattern."""
        ...

    def find_by_parameter(
        self,
        host_name: str,
        param_name: str,
        param_value: str,
        start: datetime,
        end: datetime,
    ) -> List[BuildRecord]:
        """Records carrying a parameter name/value pair within a date window."""
        ...
