# app/domains/lims/schemas.py

"""
'lims' 도메인 (환자 및 검사 배정)의 Pydantic 스키마를 정의하는 모듈입니다.

이 스키마들은 API 요청(Request) 및 응답(Response) 데이터의 유효성을 검사하고,
데이터를 직렬화(Serialization) 및 역직렬화(Deserialization)하는 데 사용됩니다.
"""

import uuid
from typing import List, Optional
from datetime import datetime

from pydantic import BaseModel, Field as PydanticField, field_validator

from .models import PatientTitle, Sex, TestType


# =============================================================================
# 0. 공통 페이지네이션 스키마
# =============================================================================
class Pagination(BaseModel):
    page: int = PydanticField(description="현재 페이지")
    limit: int = PydanticField(description="페이지당 항목 수")
    total: int = PydanticField(description="전체 항목 수")
    total_pages: int = PydanticField(description="전체 페이지 수")
    has_more: bool = PydanticField(description="다음 페이지 존재 여부")


# =============================================================================
# 1. 환자 (Patient) 스키마
# =============================================================================
class PatientBase(BaseModel):
    mobile_number: str = PydanticField(
        pattern=r"^\+91\d{10}$", description="휴대폰 번호 (+91XXXXXXXXXX 형식)"
    )
    title: PatientTitle = PydanticField(description="호칭")
    first_name: str = PydanticField(min_length=1, max_length=100, description="이름")
    last_name: Optional[str] = PydanticField(default=None, max_length=100, description="성 (선택)")
    sex: Sex = PydanticField(description="성별")
    age_years: int = PydanticField(ge=0, le=150, description="나이 (년)")
    age_months: int = PydanticField(default=0, ge=0, le=11, description="추가 개월 수")
    age_days: int = PydanticField(default=0, ge=0, le=30, description="추가 일 수")
    referred_by: Optional[str] = PydanticField(default=None, max_length=200, description="의뢰 의사/기관 (선택)")


class PatientCreate(PatientBase):

    @field_validator("first_name", "last_name", "referred_by", mode="before")
    @classmethod
    def strip_text(cls, value):
        if isinstance(value, str):
            value = value.strip()
        return value

    @field_validator("last_name", "referred_by")
    @classmethod
    def empty_to_none(cls, value: Optional[str]) -> Optional[str]:
        # 빈 선택 항목은 None으로 저장합니다.
        return value or None

    @field_validator("age_months", "age_days", mode="before")
    @classmethod
    def none_to_zero(cls, value):
        return 0 if value is None else value


class PatientResponse(PatientBase):
    id: uuid.UUID = PydanticField(description="환자 고유 ID")
    created_by: Optional[uuid.UUID] = PydanticField(default=None, description="등록한 사용자 ID")
    created_at: datetime = PydanticField(description="레코드 생성 일시")
    updated_at: Optional[datetime] = PydanticField(default=None, description="레코드 마지막 업데이트 일시")

    class Config:
        from_attributes = True


class PatientPage(BaseModel):
    data: List[PatientResponse]
    pagination: Pagination


# =============================================================================
# 2. 검사 배정 (TestAssignment) 스키마
# =============================================================================
class PatientTestSelection(BaseModel):
    patient_id: uuid.UUID = PydanticField(description="환자 ID")
    tests: List[TestType] = PydanticField(min_length=1, description="배정할 검사 유형 목록 (CBC, BG, VDRL)")


class TestAssignmentsCreate(BaseModel):
    assignments: List[PatientTestSelection] = PydanticField(min_length=1, description="환자별 검사 배정 목록")


class TestAssignmentResponse(BaseModel):
    id: uuid.UUID
    patient_id: uuid.UUID
    test_type: TestType
    status: str
    assigned_at: datetime
    assigned_by: uuid.UUID
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TestAssignmentsCreated(BaseModel):
    message: str
    created: int = PydanticField(description="생성된 검사 배정 수")
    assignments: List[TestAssignmentResponse]
