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

"""Configuration loader for the build audit store."""

import configparser
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from build_audit.infra.db.config import DatabaseConfig

DEFAULT_CONFIG_PATH = "/etc/build_audit/build_audit.ini"


@dataclass
class BuildAuditConfig:
    """Build audit configuration."""
    database: DatabaseConfig
    log_level: str = "INFO"


def load_config(config_path: Optional[str] = None) -> BuildAuditConfig:
    """Load build audit configuration from INI file.

    Args:
        config_path: Path to configuration file. If None, uses BUILD_AUDIT_CONFIG_PATH
                    environment variable or default path.

    Returns:
        BuildAuditConfig instance.

    Raises:
        FileNotFoundError: If config file not found.
        ValueError: If config is invalid.
    """
    if config_path is None:
        config_path = os.getenv("BUILD_AUDIT_CONFIG_PATH", DEFAULT_CONFIG_PATH)

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    parser = configparser.ConfigParser(interpolation=None)
    parser.read(config_file)

    if not parser.sections():
        raise ValueError(f"Empty configuration file: {config_file}")

    section = "database"
    if not parser.has_section(section) or not parser.has_option(section, "url"):
        raise ValueError("database section with url is required")

    try:
        database = DatabaseConfig(
            database_url=parser.get(section, "url"),
            username=parser.get(section, "username", fallback=None),
            password=parser.get(section, "password", fallback=None),
            pool_size=parser.getint(section, "pool_size", fallback=20),
            max_overflow=parser.getint(section, "max_overflow", fallback=10),
            pool_recycle=parser.getint(section, "pool_recycle", fallback=3600),
            echo=parser.getboolean(section, "echo", fallback=False),
        )
    except ValueError as exc:
        raise ValueError(f"Invalid database settings in {config_file}: {exc}") from exc

    return BuildAuditConfig(
        database=database,
        log_level=parser.get("logging", "level", fallback="INFO").upper(),
    )
