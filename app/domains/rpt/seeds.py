# app/domains/rpt/seeds.py

"""
기본 보고서 유형(BLOOD_GROUP, CBC)과 필드 정의 시드 데이터입니다.

seed_report_types()는 여러 번 실행해도 안전합니다.
이미 존재하는 보고서 유형 코드와 필드 키는 건너뜁니다.
"""

import logging
from typing import Any, Dict, List

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from . import models as rpt_models

logger = logging.getLogger(__name__)


def _number_field(order: int, name: str, label: str, unit: str, low: float, high: float, range_text: str) -> Dict[str, Any]:
    return {
        "field_name": name,
        "field_label": label,
        "field_type": rpt_models.ReportFieldType.NUMBER.value,
        "field_order": order,
        "is_required": True,
        "unit": unit,
        "normal_range_min": low,
        "normal_range_max": high,
        "normal_range_text": range_text,
    }


MALARIAL_PARASITE_OPTIONS = [
    "NO MALARIAL PARASITE SEEN IN SMEAR EXAMINED",
    "Plasmodium Falciparum",
    "Plasmodium Vivax",
    "Plasmodium Ovale",
    "Plasmodium Malariae",
]

REPORT_TYPE_SEEDS: List[Dict[str, Any]] = [
    {
        "code": "BLOOD_GROUP",
        "name": "Blood Group Test",
        "description": "Determines blood type and Rh factor",
        "fields": [
            {
                "field_name": "blood_group",
                "field_label": "Blood Group",
                "field_type": rpt_models.ReportFieldType.DROPDOWN.value,
                "field_order": 1,
                "is_required": True,
                "dropdown_options": ["A", "B", "AB", "O"],
            },
            {
                "field_name": "rh_factor",
                "field_label": "Rh Factor",
                "field_type": rpt_models.ReportFieldType.DROPDOWN.value,
                "field_order": 2,
                "is_required": True,
                "dropdown_options": ["POSITIVE", "NEGATIVE"],
            },
        ],
    },
    {
        "code": "CBC",
        "name": "Complete Blood Count",
        "description": "Comprehensive blood cell analysis",
        "fields": [
            _number_field(1, "hb", "Hb (Haemoglobin)", "gm/dl", 13.0, 17.0, "13-17"),
            _number_field(2, "total_leukocyte_count", "Total Leukocyte Count", "/Cumm.", 4000, 11000, "4000-11000"),
            _number_field(3, "rbc", "RBC", "mill/cumm", 4.5, 5.5, "4.5-5.5"),
            _number_field(4, "pcv_haematocrit", "PCV/Haematocrit", "%", 40, 50, "40-50"),
            _number_field(5, "platelet_count", "Platelet Count", "lakhs/cumm", 1.5, 4.5, "1.5-4.5"),
            _number_field(6, "mcv", "MCV", "fL", 83, 101, "83-101"),
            _number_field(7, "mch", "MCH", "pg", 27, 32, "27-32"),
            _number_field(8, "mchc", "MCHC", "g/dL", 31.5, 34.5, "31.5-34.5"),
            _number_field(9, "rdw_cv", "RDW-CV", "%", 11.6, 14.0, "11.6-14.0"),
            _number_field(10, "neutrophil", "Neutrophil", "%", 40, 80, "40-80"),
            _number_field(11, "lymphocyte", "Lymphocyte", "%", 20, 40, "20-40"),
            _number_field(12, "monocyte", "Monocyte", "%", 2, 10, "2-10"),
            _number_field(13, "eosinophil", "Eosinophil", "%", 1, 6, "1-6"),
            _number_field(14, "basophil", "Basophil", "%", 0, 1, "0-1"),
            {
                "field_name": "platelet_on_smear",
                "field_label": "Platelet on Smear",
                "field_type": rpt_models.ReportFieldType.DROPDOWN.value,
                "field_order": 15,
                "is_required": False,
                "dropdown_options": ["Adequate", "Increased", "Decreased"],
                "default_value": "Adequate",
            },
            {
                "field_name": "malarial_parasite",
                "field_label": "Malarial Parasite",
                "field_type": rpt_models.ReportFieldType.DROPDOWN.value,
                "field_order": 16,
                "is_required": False,
                "dropdown_options": MALARIAL_PARASITE_OPTIONS,
                "default_value": MALARIAL_PARASITE_OPTIONS[0],
            },
        ],
    },
]


async def seed_report_types(db: AsyncSession) -> Dict[str, int]:
    """
    시드 보고서 유형과 필드를 삽입합니다.

    Returns:
        {"report_types": 새로 생성된 유형 수, "report_fields": 새로 생성된 필드 수}
    """
    created_types = 0
    created_fields = 0

    for seed in REPORT_TYPE_SEEDS:
        result = await db.execute(select(rpt_models.ReportType).where(rpt_models.ReportType.code == seed["code"]))
        report_type = result.scalar_one_or_none()
        if report_type is None:
            report_type = rpt_models.ReportType(
                code=seed["code"], name=seed["name"], description=seed["description"]
            )
            db.add(report_type)
            await db.flush()
            created_types += 1
            logger.info("보고서 유형 '%s' 생성", seed["code"])

        result = await db.execute(
            select(rpt_models.ReportField.field_name).where(rpt_models.ReportField.report_type_id == report_type.id)
        )
        existing_names = set(result.scalars().all())
        for field_data in seed["fields"]:
            if field_data["field_name"] in existing_names:
                continue
            db.add(rpt_models.ReportField(report_type_id=report_type.id, **field_data))
            created_fields += 1

    await db.commit()
    logger.info("보고서 시드 완료: 유형 %d개, 필드 %d개 생성", created_types, created_fields)
    return {"report_types": created_types, "report_fields": created_fields}
