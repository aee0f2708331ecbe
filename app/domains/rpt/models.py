# app/domains/rpt/models.py

"""
'rpt' 도메인 (PostgreSQL 'rpt' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

보고서 값은 EAV(Entity-Attribute-Value) 방식으로 저장됩니다.
보고서 인스턴스 하나에 대해 필드마다 report_values 행이 하나씩 존재하며,
필드 유형이 number이면 value_number, 그 외에는 value_text 컬럼을 사용합니다.
"""

import uuid
from enum import Enum
from typing import Optional, List, Dict, Any
from datetime import datetime, UTC

from sqlalchemy import CheckConstraint, Numeric, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from sqlalchemy.types import JSON, TIMESTAMP

from sqlmodel import Field, Relationship, SQLModel, Column

# PostgreSQL에서는 JSONB, 그 외(테스트용 SQLite 등)에서는 JSON으로 매핑됩니다.
JSONVariant = JSON().with_variant(JSONB(), "postgresql")


class ReportFieldType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    DROPDOWN = "dropdown"
    TEXTAREA = "textarea"


class ReportStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


# =============================================================================
# 1. rpt.report_types 테이블 모델
# =============================================================================
class ReportTypeBase(SQLModel):
    code: str = Field(max_length=50, unique=True, index=True, description="보고서 유형 코드 (예: CBC)")
    name: str = Field(max_length=255, description="보고서 유형명")
    description: Optional[str] = Field(default=None, description="설명")
    is_active: bool = Field(default=True, description="활성 여부")


class ReportType(ReportTypeBase, table=True):
    __tablename__ = "report_types"
    __table_args__ = {'schema': 'rpt'}

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )

    fields: List["ReportField"] = Relationship(
        back_populates="report_type",
        sa_relationship_kwargs={'cascade': 'all, delete-orphan', 'order_by': 'ReportField.field_order'},
    )


# =============================================================================
# 2. rpt.report_fields 테이블 모델
# =============================================================================
class ReportField(SQLModel, table=True):
    __tablename__ = "report_fields"
    __table_args__ = (
        UniqueConstraint("report_type_id", "field_name", name="uq_report_fields_type_name"),
        CheckConstraint(
            "field_type IN ('text', 'number', 'dropdown', 'textarea')", name="ck_report_fields_field_type"
        ),
        {'schema': 'rpt'},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    report_type_id: uuid.UUID = Field(foreign_key="rpt.report_types.id", ondelete="CASCADE", index=True)
    field_name: str = Field(max_length=100, description="필드 키 (보고서 유형 내 유일)")
    field_label: str = Field(max_length=255, description="화면 표시명")
    field_type: str = Field(max_length=20, description="필드 유형 (text, number, dropdown, textarea)")
    field_order: int = Field(default=0, description="표시 순서")
    is_required: bool = Field(default=False, description="필수 입력 여부")
    unit: Optional[str] = Field(default=None, max_length=50, description="단위")
    normal_range_min: Optional[float] = Field(
        default=None, sa_column=Column(Numeric(10, 4, asdecimal=False)), description="정상 범위 하한"
    )
    normal_range_max: Optional[float] = Field(
        default=None, sa_column=Column(Numeric(10, 4, asdecimal=False)), description="정상 범위 상한"
    )
    normal_range_text: Optional[str] = Field(default=None, max_length=100, description="정상 범위 표시 문자열")
    dropdown_options: Optional[List[str]] = Field(default=None, sa_column=Column(JSONVariant), description="드롭다운 선택지")
    default_value: Optional[str] = Field(default=None, description="기본값")
    validation_rules: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSONVariant), description="추가 검증 규칙")
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )

    report_type: Optional[ReportType] = Relationship(back_populates="fields")


# =============================================================================
# 3. rpt.report_instances 테이블 모델
# =============================================================================
class ReportInstance(SQLModel, table=True):
    __tablename__ = "report_instances"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'in-progress', 'completed')", name="ck_report_instances_status"
        ),
        {'schema': 'rpt'},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    # 검사 배정 하나당 보고서 인스턴스는 정확히 하나
    test_assignment_id: uuid.UUID = Field(
        foreign_key="lims.test_assignments.id", ondelete="CASCADE", unique=True, description="검사 배정 ID (FK)"
    )
    report_type_id: uuid.UUID = Field(foreign_key="rpt.report_types.id", index=True, description="보고서 유형 ID (FK)")
    status: str = Field(default=ReportStatus.PENDING.value, max_length=20, index=True, description="보고서 상태")
    created_by: uuid.UUID = Field(description="최초 저장한 사용자 ID")
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )
    completed_at: Optional[datetime] = Field(
        default=None, sa_column=Column(TIMESTAMP(timezone=True), nullable=True), description="완료 일시 (completed일 때만)"
    )

    values: List["ReportValue"] = Relationship(
        back_populates="report_instance", sa_relationship_kwargs={'cascade': 'all, delete-orphan'}
    )


# =============================================================================
# 4. rpt.report_values 테이블 모델 (EAV)
# =============================================================================
class ReportValue(SQLModel, table=True):
    __tablename__ = "report_values"
    __table_args__ = (
        UniqueConstraint("report_instance_id", "report_field_id", name="uq_report_values_instance_field"),
        {'schema': 'rpt'},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    report_instance_id: uuid.UUID = Field(foreign_key="rpt.report_instances.id", ondelete="CASCADE", index=True)
    report_field_id: uuid.UUID = Field(foreign_key="rpt.report_fields.id", ondelete="CASCADE", index=True)
    value_text: Optional[str] = Field(default=None, description="text/dropdown/textarea 값")
    value_number: Optional[float] = Field(
        default=None, sa_column=Column(Numeric(10, 4, asdecimal=False)), description="number 값"
    )
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )

    report_instance: Optional[ReportInstance] = Relationship(back_populates="values")
