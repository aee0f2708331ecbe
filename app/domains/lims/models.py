# app/domains/lims/models.py

"""
'lims' 도메인 (PostgreSQL 'lims' 스키마)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.
"""

import uuid
from enum import Enum
from typing import Optional, List
from datetime import datetime, UTC

from sqlalchemy import CheckConstraint, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP

from sqlmodel import Field, Relationship, SQLModel, Column


class PatientTitle(str, Enum):
    MR = "Mr."
    MRS = "Mrs."
    MS = "Ms."
    DR = "Dr."
    MASTER = "Master"
    MISS = "Miss"


class Sex(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class TestType(str, Enum):
    CBC = "CBC"
    BG = "BG"
    VDRL = "VDRL"


class TestAssignmentStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# 검사 유형 -> 보고서 유형 코드 / 표시 이름
TEST_TYPE_REPORT_CODES = {
    TestType.CBC: "CBC",
    TestType.BG: "BLOOD_GROUP",
    TestType.VDRL: "VDRL",
}
TEST_TYPE_NAMES = {
    TestType.CBC: "Complete Blood Count",
    TestType.BG: "Blood Group",
    TestType.VDRL: "VDRL Test",
}


# =============================================================================
# 1. lims.patients 테이블 모델
# =============================================================================
class PatientBase(SQLModel):
    mobile_number: str = Field(max_length=15, index=True, description="국가 코드를 포함한 휴대폰 번호 (+91XXXXXXXXXX)")
    title: str = Field(max_length=10, description="호칭 (Mr., Mrs., Ms., Dr., Master, Miss)")
    first_name: str = Field(max_length=100, description="이름")
    last_name: Optional[str] = Field(default=None, max_length=100, description="성 (선택)")
    sex: str = Field(max_length=10, description="성별 (Male, Female, Other)")
    age_years: int = Field(description="나이 (년)")
    age_months: int = Field(default=0, description="추가 개월 수 (0-11)")
    age_days: int = Field(default=0, description="추가 일 수 (0-30)")
    referred_by: Optional[str] = Field(default=None, max_length=200, description="의뢰 의사/기관 (선택)")


class Patient(PatientBase, table=True):
    __tablename__ = "patients"
    __table_args__ = (
        CheckConstraint("sex IN ('Male', 'Female', 'Other')", name="ck_patients_sex"),
        CheckConstraint("age_years >= 0", name="ck_patients_age_years"),
        CheckConstraint("age_months >= 0 AND age_months < 12", name="ck_patients_age_months"),
        CheckConstraint("age_days >= 0 AND age_days < 31", name="ck_patients_age_days"),
        {'schema': 'lims'},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_by: Optional[uuid.UUID] = Field(default=None, description="등록한 사용자 ID")
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), index=True),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )

    # --- 관계 정의 ---
    test_assignments: List["TestAssignment"] = Relationship(
        back_populates="patient",
        sa_relationship_kwargs={'cascade': 'all, delete-orphan', 'order_by': 'TestAssignment.assigned_at.desc()'},
    )


# =============================================================================
# 2. lims.test_assignments 테이블 모델
# =============================================================================
class TestAssignment(SQLModel, table=True):
    __tablename__ = "test_assignments"
    __table_args__ = (
        UniqueConstraint("patient_id", "test_type", name="uq_test_assignments_patient_test_type"),
        CheckConstraint("test_type IN ('CBC', 'BG', 'VDRL')", name="ck_test_assignments_test_type"),
        CheckConstraint(
            "status IN ('pending', 'in_progress', 'completed', 'cancelled')", name="ck_test_assignments_status"
        ),
        {'schema': 'lims'},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    patient_id: uuid.UUID = Field(foreign_key="lims.patients.id", ondelete="CASCADE", index=True, description="환자 ID (FK)")
    test_type: str = Field(max_length=20, description="검사 유형 (CBC, BG, VDRL)")
    status: str = Field(default=TestAssignmentStatus.PENDING.value, max_length=20, index=True, description="검사 진행 상태")
    assigned_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), index=True),
        description="배정 일시"
    )
    assigned_by: uuid.UUID = Field(description="배정한 사용자 ID")
    completed_at: Optional[datetime] = Field(
        default=None, sa_column=Column(TIMESTAMP(timezone=True), nullable=True), description="검사 완료 일시"
    )
    notes: Optional[str] = Field(default=None, description="비고")
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

    patient: Optional[Patient] = Relationship(back_populates="test_assignments")
