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

"""Database configuration module."""

import os
from typing import Optional

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

from build_audit.core.builds.exceptions import ConfigurationError


class DatabaseConfig:  # pylint: disable=too-many-instance-attributes
    """Connection settings for the audit store.

    Credentials may be embedded in ``database_url`` or supplied
    separately; separate values win.
    """

    def __init__(
        self,
        database_url: str = "",
        username: Optional[str] = None,
        password: Optional[str] = None,
        pool_size: int = 20,
        max_overflow: int = 10,
        pool_recycle: int = 3600,
        echo: bool = False,
    ):
        self.database_url: str = database_url
        self.username: Optional[str] = username
        self.password: Optional[str] = password
        self.pool_size: int = pool_size
        self.max_overflow: int = max_overflow
        self.pool_recycle: int = pool_recycle
        self.echo: bool = echo

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        """Build configuration from environment variables."""
        return cls(
            database_url=os.getenv("DATABASE_URL", ""),
            username=os.getenv("DB_USER") or None,
            password=os.getenv("DB_PASSWORD") or None,
            pool_size=int(os.getenv("DB_POOL_SIZE", "20")),
            max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "10")),
            pool_recycle=int(os.getenv("DB_POOL_RECYCLE", "3600")),
            echo=os.getenv("DB_ECHO", "false").lower() == "true",
        )

    def validate(self) -> None:
        """Validate required configuration.

        Raises:
            ConfigurationError: If the URL is missing or cannot be parsed.
        """
        if not self.database_url:
            raise ConfigurationError("DATABASE_URL is required")
        try:
            make_url(self.database_url)
        except ArgumentError as exc:
            raise ConfigurationError(f"Invalid database URL: {exc}") from exc

    def url(self) -> URL:
        """Return the SQLAlchemy URL with separate credentials applied."""
        self.validate()
        url = make_url(self.database_url)
        if self.username:
            url = url.set(username=self.username)
        if self.password:
            url = url.set(password=self.password)
        return url

    @property
    def is_sqlite(self) -> bool:
        """True when the configured backend is SQLite."""
        return self.url().get_backend_name() == "sqlite"

    @property
    def is_memory(self) -> bool:
        """True for an in-memory SQLite database."""
        url = self.url()
        return self.is_sqlite and url.database in (None, "", ":memory:")

    def __repr__(self) -> str:
        try:
            shown = self.url().render_as_string(hide_password=True)
        except ConfigurationError:
            shown = self.database_url
        return (
            f"DatabaseConfig(database_url={shown!r}, "
            f"pool_size={self.pool_size}, max_overflow={self.max_overflow})"
        )
