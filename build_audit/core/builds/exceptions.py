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

"""Build audit domain exceptions."""


class BuildAuditError(Exception):
    """Base exception for build audit errors."""

    def __init__(self, message: str):
        """Initialize domain error.

        Args:
            message: Error message.
        """
        super().__init__(message)
        self.message = message


class ValidationError(BuildAuditError, ValueError):
    """Raised when an argument to a repository operation is missing or invalid.

    Always raised before any storage access is attempted.
    """


class ConflictError(BuildAuditError):
    """Raised when a unique constraint violation cannot be resolved."""

    def __init__(self, entity_type: str, entity_id: str, message: str = ""):
        """Initialize conflict error.

        Args:
            entity_type: Type of entity that conflicted (e.g. 'BuildNode').
            entity_id: Natural key or identifier of the conflicting entity.
            message: Optional detail appended to the default message.
        """
        text = f"Unique constraint conflict for {entity_type} {entity_id}"
        if message:
            text = f"{text}: {message}"
        super().__init__(text)
        self.entity_type = entity_type
        self.entity_id = entity_id


class StorageError(BuildAuditError):
    """Raised when the storage engine fails; the original error is the cause."""


class ConfigurationError(BuildAuditError):
    """Raised when connection settings are missing or invalid."""
