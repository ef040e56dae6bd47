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

"""Build node resolution.

Guarantees a single stored row per node URL. Resolution looks the URL
up, and when it is missing inserts it inside a SAVEPOINT. A unique
constraint violation means a concurrent writer stored the node first:
the row is read back, and if it is still not visible the insert is
retried once before giving up with ConflictError.
"""

import logging
from typing import Dict, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from build_audit.core.builds.entities import BuildNode
from build_audit.core.builds.exceptions import ConflictError, ValidationError
from .mappers import BuildNodeMapper
from .models import BuildNodeModel
from .unit_of_work import is_unique_violation

logger = logging.getLogger(__name__)


class SqlBuildNodeResolver:
    """Looks up or creates build nodes by URL within one session."""

    MAX_INSERT_ATTEMPTS = 2

    def __init__(
        self,
        session: Session,
        cache: Optional[Dict[str, BuildNodeModel]] = None,
    ) -> None:
        """Initialize resolver with database session.

        Args:
            session: SQLAlchemy session of the enclosing unit of work.
            cache: URL → node row map shared across one unit of work.
        """
        self.session = session
        self._cache = cache if cache is not None else {}

    def find_by_url(self, url: str) -> Optional[BuildNode]:
        """Return the stored node with *url*.

        Args:
            url: Exact node URL.

        Returns:
            BuildNode if found, None otherwise.

        Raises:
            ValidationError: If url is None.
        """
        if url is None:
            raise ValidationError("Node URL cannot be None")
        model = self._find_model(url)
        if model is None:
            return None
        return BuildNodeMapper.to_domain(model)

    def resolve_or_create(self, node: BuildNode) -> BuildNodeModel:
        """Return the stored row for *node*, inserting it if needed.

        Args:
            node: Node as reported by the build.

        Returns:
            Persistent BuildNodeModel shared by all builds on that URL.

        Raises:
            ValidationError: If node or its URL is missing.
            ConflictError: If the insert keeps violating the URL constraint.
        """
        if node is None:
            raise ValidationError("Build node cannot be None")
        if not node.url or not node.url.strip():
            raise ValidationError("Build node URL cannot be empty")

        cached = self._cache.get(node.url)
        if cached is not None:
            return cached

        for attempt in range(1, self.MAX_INSERT_ATTEMPTS + 1):
            existing = self._find_model(node.url)
            if existing is not None:
                self._cache[node.url] = existing
                return existing

            created = self._try_insert(node)
            if created is not None:
                logger.info("Registered build node: %s", node.url)
                self._cache[node.url] = created
                return created

            logger.warning(
                "Concurrent insert of build node %s detected (attempt %d of %d)",
                node.url,
                attempt,
                self.MAX_INSERT_ATTEMPTS,
            )

        raise ConflictError(
            entity_type="BuildNode",
            entity_id=node.url,
            message="unique constraint still violated after retry",
        )

    def _find_model(self, url: str) -> Optional[BuildNodeModel]:
        stmt = select(BuildNodeModel).where(BuildNodeModel.url == url)
        return self.session.execute(stmt).scalar_one_or_none()

    def _try_insert(self, node: BuildNode) -> Optional[BuildNodeModel]:
        model = BuildNodeMapper.to_orm(node)
        try:
            with self.session.begin_nested():
                self.session.add(model)
                self.session.flush()
        except IntegrityError as exc:
            if not is_unique_violation(exc):
                raise
            return None
        return model
