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

"""Unit tests for the INI configuration loader."""

import pytest

from build_audit.common.config import load_config


def _write(tmp_path, content: str) -> str:
    path = tmp_path / "build_audit.ini"
    path.write_text(content)
    return str(path)


class TestLoadConfig:
    """Tests for load_config."""

    def test_full_configuration(self, tmp_path) -> None:
        """Every documented key is read."""
        path = _write(
            tmp_path,
            "[database]\n"
            "url = postgresql://db.example.com/audit\n"
            "username = auditor\n"
            "password = p%ss\n"
            "pool_size = 4\n"
            "max_overflow = 1\n"
            "pool_recycle = 120\n"
            "echo = yes\n"
            "\n"
            "[logging]\n"
            "level = debug\n",
        )

        config = load_config(path)

        assert config.database.database_url == "postgresql://db.example.com/audit"
        assert config.database.username == "auditor"
        assert config.database.password == "p%ss"
        assert config.database.pool_size == 4
        assert config.database.max_overflow == 1
        assert config.database.pool_recycle == 120
        assert config.database.echo is True
        assert config.log_level == "DEBUG"

    def test_defaults_for_optional_keys(self, tmp_path) -> None:
        """Only the URL is required."""
        config = load_config(_write(tmp_path, "[database]\nurl = sqlite://\n"))

        assert config.database.username is None
        assert config.database.pool_size == 20
        assert config.database.echo is False
        assert config.log_level == "INFO"

    def test_path_from_environment(self, tmp_path, monkeypatch) -> None:
        """BUILD_AUDIT_CONFIG_PATH is used when no path is given."""
        monkeypatch.setenv(
            "BUILD_AUDIT_CONFIG_PATH", _write(tmp_path, "[database]\nurl = sqlite://\n")
        )

        assert load_config().database.database_url == "sqlite://"

    def test_missing_file(self, tmp_path) -> None:
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "absent.ini"))

    def test_empty_file(self, tmp_path) -> None:
        """A file without sections is rejected."""
        with pytest.raises(ValueError, match="Empty configuration file"):
            load_config(_write(tmp_path, ""))

    def test_missing_database_url(self, tmp_path) -> None:
        """The database section must name a URL."""
        with pytest.raises(ValueError, match="url is required"):
            load_config(_write(tmp_path, "[logging]\nlevel = INFO\n"))

    def test_invalid_integer(self, tmp_path) -> None:
        """Non-numeric pool settings are reported with the file name."""
        path = _write(tmp_path, "[database]\nurl = sqlite://\npool_size = many\n")

        with pytest.raises(ValueError, match="Invalid database settings"):
            load_config(path)
