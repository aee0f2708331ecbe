# tests/domains/test_rpt_status.py

"""
보고서 상태 계산기와 완성도 요약에 대한 단위 테스트 모듈입니다.
"""

import pytest

from app.domains.rpt.models import ReportFieldType, ReportStatus
from app.domains.rpt.schemas import FieldDefinition
from app.domains.rpt.status import calculate_status, completion_summary

BLOOD_GROUP_FIELDS = [
    FieldDefinition(
        field_name="blood_group", field_label="Blood Group", field_type=ReportFieldType.DROPDOWN,
        field_order=1, is_required=True, dropdown_options=["A", "B", "AB", "O"],
    ),
    FieldDefinition(
        field_name="rh_factor", field_label="Rh Factor", field_type=ReportFieldType.DROPDOWN,
        field_order=2, is_required=True, dropdown_options=["POSITIVE", "NEGATIVE"],
    ),
]
OPTIONAL_ONLY = [
    FieldDefinition(field_name="remarks", field_label="Remarks", field_type=ReportFieldType.TEXTAREA),
]


@pytest.mark.parametrize("values, expected", [
    ({}, ReportStatus.PENDING),
    ({"blood_group": "", "rh_factor": ""}, ReportStatus.PENDING),
    ({"blood_group": None}, ReportStatus.PENDING),
    # 공백 문자열은 필수 필드를 채우지는 못하지만 '입력 있음'으로 봅니다.
    ({"blood_group": "   "}, ReportStatus.IN_PROGRESS),
    ({"blood_group": "", "rh_factor": "  "}, ReportStatus.IN_PROGRESS),
    ({"blood_group": "A"}, ReportStatus.IN_PROGRESS),
    ({"blood_group": "A", "rh_factor": ""}, ReportStatus.IN_PROGRESS),
    ({"blood_group": "A", "rh_factor": "POSITIVE"}, ReportStatus.COMPLETED),
    # 필드 정의에 없는 키의 값도 '입력 있음'으로 봅니다.
    ({"unknown": "x"}, ReportStatus.IN_PROGRESS),
])
def test_calculate_status_blood_group(values, expected):
    assert calculate_status(BLOOD_GROUP_FIELDS, values) == expected


def test_calculate_status_without_required_fields():
    """[성공] 필수 필드가 없으면 값이 하나라도 있을 때 completed입니다."""
    assert calculate_status(OPTIONAL_ONLY, {}) == ReportStatus.PENDING
    assert calculate_status(OPTIONAL_ONLY, {"remarks": ""}) == ReportStatus.COMPLETED
    assert calculate_status([], {"anything": 1}) == ReportStatus.COMPLETED


def test_calculate_status_zero_counts_as_filled():
    fields = [FieldDefinition(field_name="basophil", field_label="Basophil", field_type=ReportFieldType.NUMBER, is_required=True)]

    assert calculate_status(fields, {"basophil": 0}) == ReportStatus.COMPLETED


def test_completion_summary():
    summary = completion_summary(BLOOD_GROUP_FIELDS, {"blood_group": "O"})

    assert summary.filled_count == 1
    assert summary.total_required == 2
    assert summary.percent_complete == 50


def test_completion_summary_rounds_half_up():
    fields = [
        FieldDefinition(field_name=f"f{i}", field_label=f"F{i}", field_type=ReportFieldType.TEXT, is_required=True)
        for i in range(8)
    ]
    # 1/8 = 12.5% -> 13%
    assert completion_summary(fields, {"f0": "x"}).percent_complete == 13
    # 2/3 = 66.66% -> 67%
    assert completion_summary(fields[:3], {"f0": "x", "f1": "y"}).percent_complete == 67


def test_completion_summary_without_required_fields():
    summary = completion_summary(OPTIONAL_ONLY, {})

    assert (summary.filled_count, summary.total_required, summary.percent_complete) == (0, 0, 100)
