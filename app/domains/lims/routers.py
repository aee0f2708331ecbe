# app/domains/lims/routers.py

"""
'lims' 도메인 (환자 등록 및 검사 배정) 관련 API 엔드포인트를 정의하는 모듈입니다.
"""
import math
from typing import List

from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import APIRouter, Depends, status

# 중앙 의존성 관리 모듈 임포트
from app.core import dependencies as deps

# 도메인 관련 모듈 임포트
from . import crud as lims_crud
from . import models as lims_models
from . import schemas as lims_schemas

router = APIRouter(
    tags=["Laboratory Information Management (환자/검사 배정)"],  # Swagger UI에 표시될 태그
    responses={401: {"description": "Unauthorized"}},
)


def _pagination(params: deps.PageParams, total: int) -> lims_schemas.Pagination:
    total_pages = math.ceil(total / params.limit) if total else 0
    return lims_schemas.Pagination(
        page=params.page,
        limit=params.limit,
        total=total,
        total_pages=total_pages,
        has_more=params.page < total_pages,
    )


# =============================================================================
# 1. 환자 (Patient) 라우터
# =============================================================================
@router.post("/patients", response_model=lims_schemas.PatientResponse, status_code=status.HTTP_201_CREATED, summary="새 환자 등록")
async def create_patient(
    patient_in: lims_schemas.PatientCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    principal: deps.Principal = Depends(deps.get_current_principal),
):
    """새로운 환자를 등록합니다. 등록한 사용자가 created_by로 기록됩니다."""
    return await lims_crud.patient.create(db=db, obj_in=patient_in, created_by=principal.id)


@router.get("/patients", response_model=lims_schemas.PatientPage, summary="환자 목록 조회 (페이지)")
async def read_patients(
    params: deps.PageParams = Depends(deps.page_params),
    db: AsyncSession = Depends(deps.get_db_session),
    principal: deps.Principal = Depends(deps.get_current_principal),
):
    """최근 등록 순으로 환자 목록을 조회합니다."""
    patients = await lims_crud.patient.get_page(db, skip=params.offset, limit=params.limit)
    total = await lims_crud.patient.count(db)
    return lims_schemas.PatientPage(data=patients, pagination=_pagination(params, total))


@router.get("/patients/unassigned", response_model=lims_schemas.PatientPage, summary="검사 미배정 환자 목록 조회")
async def read_unassigned_patients(
    params: deps.PageParams = Depends(deps.wide_page_params),
    db: AsyncSession = Depends(deps.get_db_session),
    principal: deps.Principal = Depends(deps.get_current_principal),
):
    """검사가 하나도 배정되지 않은 환자 목록을 조회합니다."""
    patients = await lims_crud.patient.get_unassigned_page(db, skip=params.offset, limit=params.limit)
    total = await lims_crud.patient.count_unassigned(db)
    return lims_schemas.PatientPage(data=patients, pagination=_pagination(params, total))


# =============================================================================
# 2. 검사 배정 (TestAssignment) 라우터
# =============================================================================
@router.post(
    "/test_assignments",
    response_model=lims_schemas.TestAssignmentsCreated,
    status_code=status.HTTP_201_CREATED,
    summary="환자별 검사 일괄 배정",
)
async def create_test_assignments(
    assignments_in: lims_schemas.TestAssignmentsCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    principal: deps.Principal = Depends(deps.get_current_principal),
):
    """
    여러 환자에게 검사(CBC, BG, VDRL)를 한 번에 배정합니다.
    - 존재하지 않는 환자 ID가 있으면 400 오류를 반환합니다.
    - 이미 배정된 (환자, 검사) 조합이 있으면 409 오류를 반환합니다.
    """
    records: List[lims_models.TestAssignment] = await lims_crud.test_assignment.create(
        db=db, obj_in=assignments_in, assigned_by=principal.id
    )
    patient_count = len({selection.patient_id for selection in assignments_in.assignments})
    suffix = "s" if patient_count > 1 else ""
    return lims_schemas.TestAssignmentsCreated(
        message=f"Successfully assigned tests to {patient_count} patient{suffix}",
        created=len(records),
        assignments=records,
    )
