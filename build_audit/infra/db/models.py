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

"""SQLAlchemy ORM models for build audit persistence.

ORM models are infrastructure-only and never exposed outside this layer.
Domain ↔ ORM conversion is handled by mappers in mappers.py.
"""

# Third-party imports
from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class BuildNodeModel(Base):
    """ORM model for build_nodes table.

    One row per node URL; shared by every build that ran on it.
    """

    __tablename__ = "build_nodes"

    # Surrogate key
    node_id = Column(Integer, primary_key=True, autoincrement=True)

    # Natural key
    url = Column(String(1024), nullable=False, unique=True)

    # Business attributes
    master_host_name = Column(String(255), nullable=False, index=True)
    master_address = Column(String(255), nullable=True)
    name = Column(String(255), nullable=True)
    label = Column(String(255), nullable=True)

    builds = relationship("BuildRecordModel", back_populates="node")


class BuildRecordModel(Base):
    """ORM model for build_records table.

    Maps to BuildRecord domain entity via BuildRecordMapper.
    """

    __tablename__ = "build_records"

    # Primary key
    build_id = Column(String(255), primary_key=True, nullable=False)

    # Business attributes
    name = Column(String(255), nullable=False)
    full_name = Column(String(1024), nullable=False)
    user_id = Column(String(255), nullable=True)
    user_name = Column(String(255), nullable=True)
    result = Column(String(32), nullable=True)

    # Timing
    start_date = Column(DateTime(timezone=True), nullable=False, index=True)
    end_date = Column(DateTime(timezone=True), nullable=True)
    duration = Column(BigInteger, nullable=False, default=0, index=True)

    # Node reference
    node_id = Column(
        Integer,
        ForeignKey("build_nodes.node_id"),
        nullable=False,
        index=True,
    )

    # Relationships
    node = relationship("BuildNodeModel", back_populates="builds", lazy="joined")
    parameters = relationship(
        "BuildParameterModel",
        back_populates="build",
        cascade="all, delete-orphan",
        order_by="BuildParameterModel.position",
        lazy="selectin",
    )

    # Composite indexes
    __table_args__ = (
        Index("ix_build_records_node_start", "node_id", "start_date"),
        Index("ix_build_records_name", "name"),
    )


class BuildParameterModel(Base):
    """ORM model for build_parameters table.

    Owned by exactly one build record; removed with it.
    """

    __tablename__ = "build_parameters"

    parameter_id = Column(Integer, primary_key=True, autoincrement=True)
    build_id = Column(
        String(255),
        ForeignKey("build_records.build_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position = Column(Integer, nullable=False, default=0)

    # Business attributes
    name = Column(String(255), nullable=False)
    value = Column(Text, nullable=True)

    # Relationships
    build = relationship("BuildRecordModel", back_populates="parameters")

    __table_args__ = (
        Index("ix_build_parameters_name", "name"),
    )
