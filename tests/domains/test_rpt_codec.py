# tests/domains/test_rpt_codec.py

"""
{필드 키: 값} <-> EAV 값 행 변환 코덱에 대한 단위 테스트 모듈입니다.
"""

import uuid

import pytest

from app.core.exceptions import ReportIntegrityError
from app.domains.rpt.codec import decode_values, encode_values
from app.domains.rpt.models import ReportFieldType
from app.domains.rpt.schemas import EncodedValue, FieldDefinition

HB = FieldDefinition(field_name="hb", field_label="Hb", field_type=ReportFieldType.NUMBER, is_required=True)
SMEAR = FieldDefinition(
    field_name="platelet_on_smear", field_label="Platelet on Smear", field_type=ReportFieldType.DROPDOWN,
    dropdown_options=["Adequate", "Increased", "Decreased"],
)
REMARKS = FieldDefinition(field_name="remarks", field_label="Remarks", field_type=ReportFieldType.TEXT)
FIELDS = [HB, SMEAR, REMARKS]


def test_encode_values_routes_by_field_type():
    """[성공] number 필드는 value_number, 그 외는 value_text에 저장됩니다."""
    encoded = encode_values({"hb": "14.5", "platelet_on_smear": "Adequate", "remarks": "ok"}, FIELDS)

    by_field = {e.report_field_id: e for e in encoded}
    assert by_field[HB.id].value_number == 14.5
    assert by_field[HB.id].value_text is None
    assert by_field[SMEAR.id].value_text == "Adequate"
    assert by_field[SMEAR.id].value_number is None
    assert by_field[REMARKS.id].value_text == "ok"


def test_encode_values_drops_unknown_and_empty():
    """[성공] 정의되지 않은 키와 None, 빈 문자열은 저장하지 않습니다."""
    encoded = encode_values({"hb": "", "remarks": None, "unknown": "x", "platelet_on_smear": "Increased"}, FIELDS)

    assert encoded == [EncodedValue(report_field_id=SMEAR.id, value_text="Increased")]


def test_encode_values_drops_whitespace_only_values():
    """[성공] 공백 문자열은 number/text 필드 모두 저장하지 않습니다."""
    encoded = encode_values({"hb": "   ", "remarks": "\t", "platelet_on_smear": "Adequate"}, FIELDS)

    assert encoded == [EncodedValue(report_field_id=SMEAR.id, value_text="Adequate")]


def test_encode_values_stringifies_non_number_fields():
    encoded = encode_values({"remarks": 42}, FIELDS)

    assert encoded[0].value_text == "42"


def test_decode_values_round_trip():
    values = {"hb": 14.5, "platelet_on_smear": "Decreased", "remarks": "repeat sample"}
    rows = encode_values(values, FIELDS)

    assert decode_values(rows, FIELDS) == values


def test_decode_values_unknown_field_raises_integrity_error():
    """[실패] 필드 정의에 없는 값 행은 데이터 무결성 오류(500)입니다."""
    rows = [EncodedValue(report_field_id=uuid.uuid4(), value_text="orphan")]

    with pytest.raises(ReportIntegrityError) as exc_info:
        decode_values(rows, FIELDS)

    assert exc_info.value.status_code == 500
    assert exc_info.value.detail["error"] == "Data integrity error"
