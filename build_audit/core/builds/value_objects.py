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

"""Value objects for Build Audit domain.

All value objects are immutable and defined by their values, not identity.
They validate query arguments before any storage access happens.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, ClassVar, Optional

from build_audit.core.builds.exceptions import ValidationError


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return *value* as a timezone-aware UTC datetime.

    Naive datetimes are taken to be UTC already.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _require(value: Any, field_name: str) -> None:
    if value is None:
        raise ValidationError(f"{field_name} cannot be None")


@dataclass(frozen=True)
class ExactText:
    """Exact (case-insensitive) match argument for a string column.

    Attributes:
        value: Text to compare against.
        field_name: Argument name used in error messages.

    Raises:
        ValidationError: If value is None, not a string, or holds a wildcard.
    """

    value: str
    field_name: str = "value"

    WILDCARD: ClassVar[str] = "%"

    def __post_init__(self) -> None:
        """Validate exact match text."""
        _require(self.value, self.field_name)
        if not isinstance(self.value, str):
            raise ValidationError(
                f"{self.field_name} must be a string, got {type(self.value).__name__}"
            )
        if self.WILDCARD in self.value:
            raise ValidationError(
                f"Wildcard '{self.WILDCARD}' not allowed in {self.field_name}: {self.value}"
            )

    @property
    def folded(self) -> str:
        """Lower-cased form used for comparison."""
        return self.value.lower()

    def __str__(self) -> str:
        """Return string representation."""
        return self.value


@dataclass(frozen=True)
class NamePattern:
    """SQL LIKE pattern over project names; '%' matches any run of characters.

    Raises:
        ValidationError: If pattern is None, not a string, or blank.
    """

    value: str

    def __post_init__(self) -> None:
        """Validate pattern."""
        _require(self.value, "pattern")
        if not isinstance(self.value, str):
            raise ValidationError(
                f"pattern must be a string, got {type(self.value).__name__}"
            )
        if not self.value.strip():
            raise ValidationError("pattern cannot be empty")

    def __str__(self) -> str:
        """Return string representation."""
        return self.value


@dataclass(frozen=True)
class DateWindow:
    """Inclusive window over build start dates.

    Attributes:
        start: Lower bound (inclusive), normalized to UTC.
        end: Upper bound (inclusive), normalized to UTC.

    Raises:
        ValidationError: If either bound is None or not a datetime.
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        """Validate and normalize bounds."""
        for field_name in ("start", "end"):
            bound = getattr(self, field_name)
            _require(bound, field_name)
            if not isinstance(bound, datetime):
                raise ValidationError(
                    f"{field_name} must be a datetime, got {type(bound).__name__}"
                )
            object.__setattr__(self, field_name, ensure_utc(bound))

    @property
    def is_empty(self) -> bool:
        """True when no instant can fall inside the window."""
        return self.start > self.end


@dataclass(frozen=True)
class DurationRange:
    """Inclusive range over build durations in milliseconds.

    Raises:
        ValidationError: If either bound is None or not an integer.
    """

    minimum: int
    maximum: int

    def __post_init__(self) -> None:
        """Validate bounds."""
        for field_name in ("minimum", "maximum"):
            bound = getattr(self, field_name)
            _require(bound, field_name)
            if isinstance(bound, bool) or not isinstance(bound, int):
                raise ValidationError(
                    f"{field_name} must be an integer, got {type(bound).__name__}"
                )

    @property
    def is_empty(self) -> bool:
        """True when minimum exceeds maximum."""
        return self.minimum > self.maximum
