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

"""Unit tests for build id generation."""

import uuid
from unittest.mock import patch

import pytest

from build_audit.core.builds.exceptions import BuildAuditError
from build_audit.infra.id_generator import BuildUUIDGenerator


class TestBuildUUIDGenerator:
    """Tests for BuildUUIDGenerator."""

    def test_generates_uuid4_strings(self) -> None:
        """Ids are version 4 UUIDs in canonical form."""
        build_id = BuildUUIDGenerator().generate()

        assert uuid.UUID(build_id).version == 4
        assert str(uuid.UUID(build_id)) == build_id

    def test_ids_are_unique(self) -> None:
        """Consecutive ids differ."""
        generator = BuildUUIDGenerator()

        assert len({generator.generate() for _ in range(100)}) == 100

    def test_failure_is_wrapped(self) -> None:
        """Generator failures surface as BuildAuditError."""
        with patch("build_audit.infra.id_generator.uuid.uuid4", side_effect=OSError("no entropy")):
            with pytest.raises(BuildAuditError, match="no entropy"):
                BuildUUIDGenerator().generate()
