# app/domains/rpt/services.py

"""
보고서 저장(upsert) / 조회 / 폼 스키마 조회 / 실시간 검증 서비스 모듈입니다.

저장 흐름:
    식별자 확인 -> 검사 배정 확인 -> 필드 정의 로드 -> 저장 시점 검증
    -> 상태 계산 -> (단일 트랜잭션) 인스턴스 upsert + 값 행 교체 -> 재조회

같은 검사 배정에 대한 최초 저장이 동시에 일어나면 unique 제약 위반(IntegrityError)으로
한쪽이 실패합니다. 이 경우 롤백 후 한 번 재시도하며, 재시도에서는 먼저 생성된 인스턴스를
찾아 갱신합니다.
"""

import logging
import uuid
from datetime import datetime, UTC
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.exceptions import (
    ConflictError,
    DatabaseError,
    InvalidInputError,
    NotFoundError,
    ValidationFailedError,
)
from app.domains.lims import crud as lims_crud
from app.domains.lims import models as lims_models

from . import crud as rpt_crud
from . import models as rpt_models
from . import schemas as rpt_schemas
from .codec import decode_values, encode_values
from .renderers import resolve_form_renderer
from .status import calculate_status, completion_summary
from .validators import out_of_range_fields, validate_form, validation_errors_to_map

logger = logging.getLogger(__name__)

# 동시 최초 저장 충돌 시 전체 쓰기를 시도하는 최대 횟수
SAVE_ATTEMPTS = 2


class SaveReportResult(NamedTuple):
    report_instance: rpt_models.ReportInstance
    status: rpt_schemas.SaveOutcome


class LoadReportResult(NamedTuple):
    report_instance: Optional[rpt_models.ReportInstance]
    values: Dict[str, Any]


# =============================================================================
# 내부 헬퍼
# =============================================================================
def _parse_uuid(value: Any, field_name: str) -> uuid.UUID:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidInputError(f"{field_name} is required", error="Missing required fields")
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value).strip())
    except ValueError as e:
        raise InvalidInputError(f"{field_name} must be a valid UUID", error="Invalid ID format") from e


async def _get_assignment_or_404(db: AsyncSession, test_assignment_id: uuid.UUID) -> lims_models.TestAssignment:
    try:
        assignment = await lims_crud.test_assignment.get(db, test_assignment_id)
    except SQLAlchemyError as e:
        logger.exception("검사 배정 조회 중 데이터베이스 오류: %s", test_assignment_id)
        raise DatabaseError("Failed to fetch test assignment. Please try again.") from e
    if assignment is None:
        raise NotFoundError(
            f"No test assignment found with ID: {test_assignment_id}", error="Test assignment not found"
        )
    return assignment


async def _write_report(
    db: AsyncSession,
    *,
    test_assignment_id: uuid.UUID,
    report_type_id: uuid.UUID,
    status: rpt_models.ReportStatus,
    encoded: Sequence[rpt_schemas.EncodedValue],
    created_by: uuid.UUID,
) -> Tuple[rpt_models.ReportInstance, rpt_schemas.SaveOutcome]:
    """인스턴스 upsert와 값 행 교체를 하나의 트랜잭션으로 커밋합니다."""
    now = datetime.now(UTC)
    completed_at = now if status == rpt_models.ReportStatus.COMPLETED else None

    instance = await rpt_crud.report_instance.get_by_test_assignment(db, test_assignment_id=test_assignment_id)
    if instance is not None:
        if instance.report_type_id != report_type_id:
            raise ConflictError(
                "A report of a different type already exists for this test assignment",
                error="Report type mismatch",
            )
        instance.status = status.value
        instance.updated_at = now
        instance.completed_at = completed_at
        outcome = rpt_schemas.SaveOutcome.UPDATED
    else:
        instance = rpt_models.ReportInstance(
            test_assignment_id=test_assignment_id,
            report_type_id=report_type_id,
            status=status.value,
            created_by=created_by,
            completed_at=completed_at,
        )
        outcome = rpt_schemas.SaveOutcome.CREATED
    db.add(instance)
    await db.flush()

    await rpt_crud.report_value.replace_for_instance(db, report_instance_id=instance.id, values=encoded)
    await db.commit()
    await db.refresh(instance)
    return instance, outcome


# =============================================================================
# 1. 보고서 저장 (upsert)
# =============================================================================
async def save_report(
    db: AsyncSession,
    *,
    test_assignment_id: Any,
    report_type_id: Any,
    values: Optional[Mapping[str, Any]],
    created_by: uuid.UUID,
) -> SaveReportResult:
    """
    검사 배정의 보고서 값을 저장합니다. 최초 저장이면 인스턴스를 생성하고,
    이후 저장이면 같은 인스턴스의 상태와 값 전체를 교체합니다.

    Raises:
        InvalidInputError: 식별자가 없거나 UUID 형식이 아닐 때 (400)
        NotFoundError: 검사 배정이 없거나 보고서 유형에 필드가 없을 때 (404)
        ValidationFailedError: 입력된 값의 형식 오류 (422)
        ConflictError: 다른 유형의 보고서가 이미 있거나 동시 저장 재시도도 실패했을 때 (409)
        DatabaseError: 그 외 데이터베이스 오류 (500)
    """
    assignment_uuid = _parse_uuid(test_assignment_id, "test_assignment_id")
    report_type_uuid = _parse_uuid(report_type_id, "report_type_id")
    values = dict(values or {})

    await _get_assignment_or_404(db, assignment_uuid)

    try:
        fields = await rpt_crud.report_field.get_by_report_type(db, report_type_id=report_type_uuid)
    except SQLAlchemyError as e:
        logger.exception("필드 정의 조회 중 데이터베이스 오류: report_type_id=%s", report_type_uuid)
        raise DatabaseError("Failed to fetch report field definitions. Please try again.") from e
    if not fields:
        raise NotFoundError(f"No report type found with ID: {report_type_uuid}", error="Report type not found")

    # 저장 시점에는 필수 필드 누락을 허용합니다 (부분 저장).
    validation = validate_form(fields, values, check_required=False)
    if not validation.is_valid:
        raise ValidationFailedError([error.model_dump() for error in validation.errors])

    status = calculate_status(fields, values)
    encoded = encode_values(values, fields)

    for attempt in range(1, SAVE_ATTEMPTS + 1):
        try:
            instance, outcome = await _write_report(
                db,
                test_assignment_id=assignment_uuid,
                report_type_id=report_type_uuid,
                status=status,
                encoded=encoded,
                created_by=created_by,
            )
            break
        except IntegrityError as e:
            await db.rollback()
            if attempt >= SAVE_ATTEMPTS:
                logger.error("보고서 저장 재시도 실패: test_assignment_id=%s (%s)", assignment_uuid, e.orig)
                raise ConflictError(
                    "The report was saved by someone else at the same time. Please try again.",
                    error="Concurrent modification",
                ) from e
            logger.warning(
                "보고서 동시 저장 충돌 감지, 재시도합니다 (%d/%d): test_assignment_id=%s",
                attempt, SAVE_ATTEMPTS, assignment_uuid,
            )
        except SQLAlchemyError as e:
            await db.rollback()
            logger.exception("보고서 저장 중 데이터베이스 오류: test_assignment_id=%s", assignment_uuid)
            raise DatabaseError("Failed to save report. Please try again.") from e

    logger.info(
        "보고서 저장 완료 (%s): instance_id=%s, status=%s, values=%d",
        outcome.value, instance.id, instance.status, len(encoded),
    )
    return SaveReportResult(report_instance=instance, status=outcome)


# =============================================================================
# 2. 보고서 조회
# =============================================================================
async def load_report(db: AsyncSession, *, test_assignment_id: Any) -> LoadReportResult:
    """
    검사 배정의 보고서 인스턴스와 {필드 키: 값}을 조회합니다.
    아직 저장된 보고서가 없으면 (None, {})를 반환합니다.
    """
    assignment_uuid = _parse_uuid(test_assignment_id, "test_assignment_id")
    await _get_assignment_or_404(db, assignment_uuid)

    try:
        instance = await rpt_crud.report_instance.get_by_test_assignment(db, test_assignment_id=assignment_uuid)
        if instance is None:
            return LoadReportResult(report_instance=None, values={})
        fields = await rpt_crud.report_field.get_by_report_type(db, report_type_id=instance.report_type_id)
        rows = await rpt_crud.report_value.get_by_instance(db, report_instance_id=instance.id)
    except SQLAlchemyError as e:
        logger.exception("보고서 조회 중 데이터베이스 오류: test_assignment_id=%s", assignment_uuid)
        raise DatabaseError("Failed to fetch report. Please try again.") from e

    return LoadReportResult(report_instance=instance, values=decode_values(rows, fields))


# =============================================================================
# 3. 폼 스키마 조회
# =============================================================================
async def get_form_schema(db: AsyncSession, *, report_type_code: str) -> rpt_schemas.FormSchema:
    """활성 보고서 유형과 field_order 순으로 정렬된 필드 정의를 반환합니다."""
    try:
        report_type = await rpt_crud.report_type.get_by_code(db, code=report_type_code, active_only=True)
        if report_type is None:
            raise NotFoundError(f"Report type with code '{report_type_code}' not found or is not active")
        fields = await rpt_crud.report_field.get_by_report_type(db, report_type_id=report_type.id)
    except SQLAlchemyError as e:
        logger.exception("보고서 유형 조회 중 데이터베이스 오류: code=%s", report_type_code)
        raise DatabaseError("Failed to fetch report type definition. Please try again.") from e

    return rpt_schemas.FormSchema(
        report_type=rpt_schemas.ReportTypeResponse.model_validate(report_type),
        fields=fields,
    )


# =============================================================================
# 4. 실시간 검증 (저장하지 않음)
# =============================================================================
async def validate_report(
    db: AsyncSession, *, report_type_code: str, values: Mapping[str, Any], check_required: bool = True
) -> rpt_schemas.ReportValidationResponse:
    schema = await get_form_schema(db, report_type_code=report_type_code)
    result = validate_form(schema.fields, values, check_required=check_required)
    return rpt_schemas.ReportValidationResponse(
        is_valid=result.is_valid,
        errors=result.errors,
        error_map=validation_errors_to_map(result.errors),
        status=calculate_status(schema.fields, values),
        completion=completion_summary(schema.fields, values),
        out_of_range=out_of_range_fields(schema.fields, values),
    )


# =============================================================================
# 5. 폼 레이아웃 렌더링
# =============================================================================
async def build_form_layout(
    db: AsyncSession, *, report_type_code: str, test_assignment_id: Optional[str] = None
) -> rpt_schemas.FormLayout:
    """
    보고서 유형 코드에 맞는 렌더러로 폼 레이아웃을 생성합니다.
    검사 배정이 주어지면 저장된 값을 채워 넣습니다.
    """
    schema = await get_form_schema(db, report_type_code=report_type_code)
    values: Dict[str, Any] = {}
    if test_assignment_id is not None:
        loaded = await load_report(db, test_assignment_id=test_assignment_id)
        if loaded.report_instance is not None:
            if loaded.report_instance.report_type_id != schema.report_type.id:
                raise ConflictError(
                    "A report of a different type already exists for this test assignment",
                    error="Report type mismatch",
                )
            values = loaded.values

    renderer = resolve_form_renderer(schema.report_type.code)
    return renderer.render(schema.report_type.code, schema.fields, values)


# =============================================================================
# 6. 보고서 화면용 환자/검사 배정 목록
# =============================================================================
def _assignment_with_status(
    assignment: lims_models.TestAssignment, statuses: Mapping[uuid.UUID, str]
) -> rpt_schemas.AssignmentWithStatus:
    test_type = lims_models.TestType(assignment.test_type)
    return rpt_schemas.AssignmentWithStatus(
        id=assignment.id,
        test_type=test_type.value,
        test_name=lims_models.TEST_TYPE_NAMES[test_type],
        assigned_date=assignment.assigned_at,
        report_status=statuses.get(assignment.id, rpt_models.ReportStatus.PENDING.value),
        report_type_code=lims_models.TEST_TYPE_REPORT_CODES[test_type],
    )


def _display_name(patient: lims_models.Patient) -> str:
    parts = [patient.title, patient.first_name]
    if patient.last_name:
        parts.append(patient.last_name)
    return " ".join(parts)


def _display_age(patient: lims_models.Patient) -> int:
    years = patient.age_years + (patient.age_months or 0) / 12 + (patient.age_days or 0) / 365
    return int(years + 0.5)


async def list_patients_with_assignments(db: AsyncSession) -> List[rpt_schemas.PatientWithAssignments]:
    """검사 배정이 하나 이상 있는 환자를 보고서 상태와 함께 최신 등록 순으로 반환합니다."""
    try:
        patients = await lims_crud.patient.get_multi_with_assignments(db)
        assignment_ids = [a.id for p in patients for a in p.test_assignments]
        statuses = await rpt_crud.report_instance.get_statuses_for_assignments(
            db, test_assignment_ids=assignment_ids
        )
    except SQLAlchemyError as e:
        logger.exception("검사 배정 환자 목록 조회 중 데이터베이스 오류")
        raise DatabaseError("Failed to fetch patients with test assignments. Please try again.") from e

    return [
        rpt_schemas.PatientWithAssignments(
            id=p.id,
            name=_display_name(p),
            age=_display_age(p),
            gender=p.sex,
            contact=p.mobile_number,
            test_assignments=[_assignment_with_status(a, statuses) for a in p.test_assignments],
        )
        for p in patients
    ]


async def list_assignments_for_patient(db: AsyncSession, *, patient_id: Any) -> rpt_schemas.PatientAssignmentsResponse:
    patient_uuid = _parse_uuid(patient_id, "patient_id")
    try:
        patient = await lims_crud.patient.get(db, patient_uuid)
        if patient is None:
            raise NotFoundError(f"No patient found with ID: {patient_uuid}", error="Patient not found")
        assignments = await lims_crud.test_assignment.get_by_patient(db, patient_id=patient_uuid)
        statuses = await rpt_crud.report_instance.get_statuses_for_assignments(
            db, test_assignment_ids=[a.id for a in assignments]
        )
    except SQLAlchemyError as e:
        logger.exception("환자 검사 배정 조회 중 데이터베이스 오류: patient_id=%s", patient_uuid)
        raise DatabaseError("Failed to fetch test assignments. Please try again.") from e

    return rpt_schemas.PatientAssignmentsResponse(
        patient_id=patient_uuid,
        assignments=[_assignment_with_status(a, statuses) for a in assignments],
    )
