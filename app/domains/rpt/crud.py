# app/domains/rpt/crud.py

"""
'rpt' 도메인(보고서 유형, 필드 정의, 보고서 인스턴스, 보고서 값)의 CRUD 로직을 담당하는 모듈입니다.

report_instance/report_value의 쓰기 메서드는 commit하지 않습니다.
트랜잭션 경계는 services.save_report가 관리합니다.
"""

import uuid
from typing import Dict, List, Optional, Sequence

from sqlalchemy import delete, insert
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase

from . import models as rpt_models
from . import schemas as rpt_schemas


# =============================================================================
# 1. 보고서 유형 (ReportType) CRUD
# =============================================================================
class CRUDReportType(CRUDBase[rpt_models.ReportType, rpt_schemas.ReportTypeResponse]):
    def __init__(self):
        super().__init__(model=rpt_models.ReportType)

    async def get_by_code(
        self, db: AsyncSession, *, code: str, active_only: bool = True
    ) -> Optional[rpt_models.ReportType]:
        statement = select(self.model).where(self.model.code == code)
        if active_only:
            statement = statement.where(self.model.is_active.is_(True))
        result = await db.execute(statement)
        return result.scalar_one_or_none()


report_type = CRUDReportType()


# =============================================================================
# 2. 필드 정의 (ReportField) CRUD
# =============================================================================
class CRUDReportField(CRUDBase[rpt_models.ReportField, rpt_schemas.FieldDefinition]):
    def __init__(self):
        super().__init__(model=rpt_models.ReportField)

    async def get_by_report_type(
        self, db: AsyncSession, *, report_type_id: uuid.UUID
    ) -> List[rpt_schemas.FieldDefinition]:
        """
        보고서 유형의 필드 정의를 field_order 오름차순으로 조회하여
        변경 불가능한 FieldDefinition 목록으로 반환합니다.
        """
        statement = (
            select(self.model)
            .where(self.model.report_type_id == report_type_id)
            .order_by(self.model.field_order, self.model.field_name)
        )
        result = await db.execute(statement)
        return [rpt_schemas.FieldDefinition.model_validate(row) for row in result.scalars().all()]


report_field = CRUDReportField()


# =============================================================================
# 3. 보고서 인스턴스 (ReportInstance) CRUD
# =============================================================================
class CRUDReportInstance(CRUDBase[rpt_models.ReportInstance, rpt_schemas.ReportInstanceResponse]):
    def __init__(self):
        super().__init__(model=rpt_models.ReportInstance)

    async def get_by_test_assignment(
        self, db: AsyncSession, *, test_assignment_id: uuid.UUID
    ) -> Optional[rpt_models.ReportInstance]:
        return await self.get_by_attribute(db, attribute="test_assignment_id", value=test_assignment_id)

    async def get_statuses_for_assignments(
        self, db: AsyncSession, *, test_assignment_ids: Sequence[uuid.UUID]
    ) -> Dict[uuid.UUID, str]:
        """검사 배정 ID -> 보고서 상태 맵. 인스턴스가 없는 배정은 포함되지 않습니다."""
        if not test_assignment_ids:
            return {}
        statement = select(self.model.test_assignment_id, self.model.status).where(
            self.model.test_assignment_id.in_(list(test_assignment_ids))
        )
        result = await db.execute(statement)
        return {row.test_assignment_id: row.status for row in result.all()}


report_instance = CRUDReportInstance()


# =============================================================================
# 4. 보고서 값 (ReportValue) CRUD
# =============================================================================
class CRUDReportValue(CRUDBase[rpt_models.ReportValue, rpt_schemas.EncodedValue]):
    def __init__(self):
        super().__init__(model=rpt_models.ReportValue)

    async def get_by_instance(
        self, db: AsyncSession, *, report_instance_id: uuid.UUID
    ) -> List[rpt_models.ReportValue]:
        statement = select(self.model).where(self.model.report_instance_id == report_instance_id)
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def replace_for_instance(
        self, db: AsyncSession, *, report_instance_id: uuid.UUID, values: Sequence[rpt_schemas.EncodedValue]
    ) -> None:
        """인스턴스의 기존 값 행을 모두 삭제하고 새 값 행을 일괄 삽입합니다 (commit 없음)."""
        await db.execute(delete(self.model).where(self.model.report_instance_id == report_instance_id))
        if values:
            await db.execute(
                insert(self.model),
                [
                    {
                        "id": uuid.uuid4(),
                        "report_instance_id": report_instance_id,
                        **value.model_dump(),
                    }
                    for value in values
                ],
            )


report_value = CRUDReportValue()
