# app/domains/rpt/routers.py

"""
'rpt' 도메인 (동적 보고서 폼) 관련 API 엔드포인트를 정의하는 모듈입니다.
"""
from typing import List, Optional

from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import APIRouter, Depends, Query

# 중앙 의존성 관리 모듈 임포트
from app.core import dependencies as deps

# 도메인 관련 모듈 임포트
from . import schemas as rpt_schemas
from . import services as rpt_services

router = APIRouter(
    tags=["Report Forms (보고서 입력)"],  # Swagger UI에 표시될 태그
    responses={401: {"description": "Unauthorized"}, 404: {"description": "Not found"}},
)


# =============================================================================
# 1. 보고서 인스턴스 라우터
# =============================================================================
@router.post("/instances", response_model=rpt_schemas.SaveReportResponse, summary="보고서 값 저장 (생성 또는 갱신)")
async def save_report_instance(
    request_in: rpt_schemas.SaveReportRequest,
    db: AsyncSession = Depends(deps.get_db_session),
    principal: deps.Principal = Depends(deps.get_current_principal),
):
    """
    검사 배정의 보고서 값을 저장합니다.
    최초 저장이면 `status=created`, 이후 저장이면 `status=updated`를 반환합니다.
    필수 필드가 비어 있어도 저장되며, 보고서 상태는 입력 완성도에 따라 계산됩니다.
    """
    result = await rpt_services.save_report(
        db,
        test_assignment_id=request_in.test_assignment_id,
        report_type_id=request_in.report_type_id,
        values=request_in.values,
        created_by=principal.id,
    )
    return rpt_schemas.SaveReportResponse(
        report_instance=rpt_schemas.ReportInstanceResponse.model_validate(result.report_instance),
        status=result.status,
    )


@router.get("/instances/{test_assignment_id}", response_model=rpt_schemas.LoadReportResponse, summary="보고서 값 조회")
async def read_report_instance(
    test_assignment_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    principal: deps.Principal = Depends(deps.get_current_principal),
):
    """검사 배정의 보고서 인스턴스와 값을 조회합니다. 저장된 보고서가 없으면 빈 값을 반환합니다."""
    result = await rpt_services.load_report(db, test_assignment_id=test_assignment_id)
    instance = result.report_instance
    return rpt_schemas.LoadReportResponse(
        report_instance=rpt_schemas.ReportInstanceResponse.model_validate(instance) if instance else None,
        values=result.values,
    )


# =============================================================================
# 2. 보고서 유형 (폼 스키마) 라우터
# =============================================================================
@router.get("/types/{report_type_code}", response_model=rpt_schemas.FormSchema, summary="보고서 유형 필드 정의 조회")
async def read_report_type(
    report_type_code: str,
    db: AsyncSession = Depends(deps.get_db_session),
    principal: deps.Principal = Depends(deps.get_current_principal),
):
    return await rpt_services.get_form_schema(db, report_type_code=report_type_code)


@router.get("/types/{report_type_code}/form", response_model=rpt_schemas.FormLayout, summary="보고서 입력 폼 레이아웃 조회")
async def read_report_form(
    report_type_code: str,
    test_assignment_id: Optional[str] = Query(None, description="저장된 값을 채울 검사 배정 ID"),
    db: AsyncSession = Depends(deps.get_db_session),
    principal: deps.Principal = Depends(deps.get_current_principal),
):
    """보고서 유형 코드에 맞는 렌더러로 섹션/위젯 레이아웃을 생성합니다."""
    return await rpt_services.build_form_layout(
        db, report_type_code=report_type_code, test_assignment_id=test_assignment_id
    )


@router.post(
    "/types/{report_type_code}/validate",
    response_model=rpt_schemas.ReportValidationResponse,
    summary="보고서 값 실시간 검증 (저장 안 함)",
)
async def validate_report_values(
    report_type_code: str,
    request_in: rpt_schemas.ReportValidationRequest,
    db: AsyncSession = Depends(deps.get_db_session),
    principal: deps.Principal = Depends(deps.get_current_principal),
):
    return await rpt_services.validate_report(
        db,
        report_type_code=report_type_code,
        values=request_in.values,
        check_required=request_in.check_required,
    )


# =============================================================================
# 3. 보고서 화면용 환자/검사 배정 라우터
# =============================================================================
@router.get("/patients", response_model=List[rpt_schemas.PatientWithAssignments], summary="검사 배정 환자 목록 조회")
async def read_patients_with_assignments(
    db: AsyncSession = Depends(deps.get_db_session),
    principal: deps.Principal = Depends(deps.get_current_principal),
):
    """검사가 배정된 환자 목록을 각 검사의 보고서 상태와 함께 조회합니다."""
    return await rpt_services.list_patients_with_assignments(db)


@router.get(
    "/test_assignments/{patient_id}",
    response_model=rpt_schemas.PatientAssignmentsResponse,
    summary="환자의 검사 배정 목록 조회",
)
async def read_patient_test_assignments(
    patient_id: str,
    db: AsyncSession = Depends(deps.get_db_session),
    principal: deps.Principal = Depends(deps.get_current_principal),
):
    return await rpt_services.list_assignments_for_patient(db, patient_id=patient_id)
