# app/domains/lims/crud.py

"""
'lims' 도메인(환자, 검사 배정)의 CRUD 로직을 담당하는 모듈입니다.
"""

import logging
import uuid
from typing import List, Sequence, Set

from sqlalchemy import exists, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from app.core.exceptions import ConflictError, InvalidInputError

from . import models as lims_models
from . import schemas as lims_schemas

logger = logging.getLogger(__name__)


# =============================================================================
# 1. 환자 (Patient) CRUD
# =============================================================================
class CRUDPatient(CRUDBase[lims_models.Patient, lims_schemas.PatientCreate]):
    def __init__(self):
        super().__init__(model=lims_models.Patient)

    async def get_page(self, db: AsyncSession, *, skip: int = 0, limit: int = 10) -> List[lims_models.Patient]:
        """최신 등록 순으로 환자 목록을 조회합니다."""
        statement = (
            select(self.model)
            .order_by(self.model.created_at.desc(), self.model.id)
            .offset(skip)
            .limit(limit)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    def _unassigned_condition(self):
        return ~exists().where(lims_models.TestAssignment.patient_id == self.model.id)

    async def get_unassigned_page(self, db: AsyncSession, *, skip: int = 0, limit: int = 50) -> List[lims_models.Patient]:
        """검사가 하나도 배정되지 않은 환자 목록을 조회합니다."""
        statement = (
            select(self.model)
            .where(self._unassigned_condition())
            .order_by(self.model.created_at.desc(), self.model.id)
            .offset(skip)
            .limit(limit)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def count_unassigned(self, db: AsyncSession) -> int:
        statement = select(func.count()).select_from(self.model).where(self._unassigned_condition())
        result = await db.execute(statement)
        return result.scalar_one()

    async def get_existing_ids(self, db: AsyncSession, *, ids: Sequence[uuid.UUID]) -> Set[uuid.UUID]:
        if not ids:
            return set()
        result = await db.execute(select(self.model.id).where(self.model.id.in_(list(ids))))
        return set(result.scalars().all())

    async def get_multi_with_assignments(self, db: AsyncSession) -> List[lims_models.Patient]:
        """검사 배정이 있는 환자만, 배정 목록과 함께 최신 등록 순으로 조회합니다."""
        statement = (
            select(self.model)
            .where(exists().where(lims_models.TestAssignment.patient_id == self.model.id))
            .options(selectinload(self.model.test_assignments))
            .execution_options(populate_existing=True)
            .order_by(self.model.created_at.desc(), self.model.id)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())


patient = CRUDPatient()


# =============================================================================
# 2. 검사 배정 (TestAssignment) CRUD
# =============================================================================
class CRUDTestAssignment(CRUDBase[lims_models.TestAssignment, lims_schemas.TestAssignmentsCreate]):
    def __init__(self):
        super().__init__(model=lims_models.TestAssignment)

    async def get_by_patient(self, db: AsyncSession, *, patient_id: uuid.UUID) -> List[lims_models.TestAssignment]:
        """환자의 검사 배정 목록을 최근 배정 순으로 조회합니다."""
        statement = (
            select(self.model)
            .where(self.model.patient_id == patient_id)
            .order_by(self.model.assigned_at.desc(), self.model.test_type)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def create(
        self, db: AsyncSession, *, obj_in: lims_schemas.TestAssignmentsCreate, assigned_by: uuid.UUID
    ) -> List[lims_models.TestAssignment]:
        """
        여러 환자에게 검사를 한 번에 배정합니다.
        존재하지 않는 환자가 있으면 400, 이미 배정된 검사가 있으면 409를 발생시킵니다.
        """
        patient_ids = list(dict.fromkeys(selection.patient_id for selection in obj_in.assignments))
        existing_ids = await patient.get_existing_ids(db, ids=patient_ids)
        missing_ids = [str(pid) for pid in patient_ids if pid not in existing_ids]
        if missing_ids:
            raise InvalidInputError(
                f"The following patient IDs do not exist: {', '.join(missing_ids)}",
                error="Invalid patient IDs",
            )

        records = [
            self.model(patient_id=selection.patient_id, test_type=test_type.value, assigned_by=assigned_by)
            for selection in obj_in.assignments
            for test_type in dict.fromkeys(selection.tests)
        ]
        db.add_all(records)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            logger.info("중복 검사 배정 요청 거부: %s", e.orig)
            raise ConflictError(
                "One or more patients already have these tests assigned",
                error="Duplicate assignment",
            ) from e
        return records


test_assignment = CRUDTestAssignment()
