# app/domains/rpt/schemas.py

"""
'rpt' 도메인 (동적 보고서 폼)의 Pydantic 스키마를 정의하는 모듈입니다.

API 요청/응답 스키마 외에도 엔진 내부에서 사용하는 값 객체를 포함합니다.
- FieldDefinition: report_fields 행을 변경 불가능한 객체로 변환한 것으로,
  검증기/상태 계산기/코덱/렌더러가 모두 이 객체만을 입력으로 받습니다.
"""

import uuid
from enum import Enum
from typing import Any, Dict, List, Optional
from datetime import datetime

from pydantic import BaseModel, Field as PydanticField, model_validator

from .models import ReportFieldType, ReportStatus


# =============================================================================
# 1. 필드 정의 (Field Schema) 스키마
# =============================================================================
class FieldDefinition(BaseModel):
    id: uuid.UUID = PydanticField(default_factory=uuid.uuid4, description="필드 고유 ID")
    report_type_id: Optional[uuid.UUID] = PydanticField(default=None, description="보고서 유형 ID")
    field_name: str = PydanticField(min_length=1, description="필드 키 (보고서 유형 내 유일)")
    field_label: str = PydanticField(description="화면 표시명")
    field_type: ReportFieldType = PydanticField(description="필드 유형")
    field_order: int = PydanticField(default=0, description="표시 순서")
    is_required: bool = PydanticField(default=False, description="필수 입력 여부")
    unit: Optional[str] = None
    normal_range_min: Optional[float] = None
    normal_range_max: Optional[float] = None
    normal_range_text: Optional[str] = None
    dropdown_options: Optional[List[str]] = None
    default_value: Optional[str] = None
    validation_rules: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True
        frozen = True

    @model_validator(mode="after")
    def check_dropdown_options(self) -> "FieldDefinition":
        if self.field_type == ReportFieldType.DROPDOWN and not self.dropdown_options:
            raise ValueError(f"Dropdown field '{self.field_name}' must define at least one option")
        return self


class ReportTypeResponse(BaseModel):
    id: uuid.UUID
    code: str
    name: str
    description: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FormSchema(BaseModel):
    """보고서 유형과 정렬된 필드 정의 목록."""
    report_type: ReportTypeResponse
    fields: List[FieldDefinition]


# =============================================================================
# 2. 검증 / 상태 스키마
# =============================================================================
class ValidationError(BaseModel):
    field_name: str = PydanticField(description="오류가 발생한 필드 키")
    message: str = PydanticField(description="사용자에게 보여줄 오류 메시지")

    class Config:
        frozen = True


class ValidationResult(BaseModel):
    is_valid: bool
    errors: List[ValidationError] = []


class CompletionSummary(BaseModel):
    filled_count: int = PydanticField(description="입력된 필수 필드 수")
    total_required: int = PydanticField(description="전체 필수 필드 수")
    percent_complete: int = PydanticField(description="완성도 (0-100)")


# =============================================================================
# 3. EAV 값 / 보고서 인스턴스 스키마
# =============================================================================
class EncodedValue(BaseModel):
    """report_values 행 하나에 대응하는 인코딩 결과."""
    report_field_id: uuid.UUID
    value_text: Optional[str] = None
    value_number: Optional[float] = None

    class Config:
        from_attributes = True


class ReportInstanceResponse(BaseModel):
    id: uuid.UUID
    test_assignment_id: uuid.UUID
    report_type_id: uuid.UUID
    status: ReportStatus
    created_by: uuid.UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SaveOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"


class SaveReportRequest(BaseModel):
    # 식별자 형식 검증은 서비스 계층에서 수행하여 400 오류로 응답합니다.
    test_assignment_id: Optional[str] = PydanticField(default=None, description="검사 배정 ID (UUID)")
    report_type_id: Optional[str] = PydanticField(default=None, description="보고서 유형 ID (UUID)")
    values: Dict[str, Any] = PydanticField(default_factory=dict, description="{필드 키: 값}")


class SaveReportResponse(BaseModel):
    report_instance: ReportInstanceResponse
    status: SaveOutcome = PydanticField(description="최초 저장이면 created, 이후 저장이면 updated")


class LoadReportResponse(BaseModel):
    report_instance: Optional[ReportInstanceResponse] = None
    values: Dict[str, Any] = {}


# =============================================================================
# 4. 실시간 검증 스키마
# =============================================================================
class ReportValidationRequest(BaseModel):
    values: Dict[str, Any] = PydanticField(default_factory=dict)
    check_required: bool = PydanticField(default=True, description="필수 필드 누락도 오류로 볼지 여부")


class ReportValidationResponse(BaseModel):
    is_valid: bool
    errors: List[ValidationError]
    error_map: Dict[str, str]
    status: ReportStatus
    completion: CompletionSummary
    out_of_range: List[str] = PydanticField(description="정상 범위를 벗어난 필드 키 (참고용)")


# =============================================================================
# 5. 폼 레이아웃 (렌더러 출력) 스키마
# =============================================================================
class WidgetKind(str, Enum):
    NUMBER = "number"
    TEXT = "text"
    SELECT = "select"
    TEXTAREA = "textarea"


class FormWidget(BaseModel):
    field_name: str
    widget: WidgetKind
    label: str
    required: bool
    unit: Optional[str] = None
    normal_range_text: Optional[str] = None
    options: List[str] = []
    placeholder: Optional[str] = None
    value: Optional[Any] = None
    out_of_range: bool = False


class FormSection(BaseModel):
    title: str
    widgets: List[FormWidget]


class FormLayout(BaseModel):
    report_type_code: str
    renderer: str
    sections: List[FormSection]
    status: ReportStatus
    completion: CompletionSummary


# =============================================================================
# 6. 보고서 화면용 환자/검사 배정 목록 스키마
# =============================================================================
class AssignmentWithStatus(BaseModel):
    id: uuid.UUID
    test_type: str
    test_name: str
    assigned_date: Optional[datetime] = None
    report_status: ReportStatus = ReportStatus.PENDING
    report_type_code: str


class PatientWithAssignments(BaseModel):
    id: uuid.UUID
    name: str
    age: int
    gender: str
    contact: str
    test_assignments: List[AssignmentWithStatus]


class PatientAssignmentsResponse(BaseModel):
    patient_id: uuid.UUID
    assignments: List[AssignmentWithStatus]
