# tests/domains/test_rpt_validators.py

"""
보고서 필드 검증기와 폼 검증 집계기에 대한 단위 테스트 모듈입니다.
"""

import math

import pytest
from pydantic import ValidationError as PydanticValidationError

from app.domains.rpt import validators
from app.domains.rpt.models import ReportFieldType
from app.domains.rpt.schemas import FieldDefinition, ValidationError, ValidationResult


def make_field(name: str, field_type: ReportFieldType, *, required: bool = False, **kwargs) -> FieldDefinition:
    return FieldDefinition(
        field_name=name,
        field_label=kwargs.pop("label", name.replace("_", " ").title()),
        field_type=field_type,
        is_required=required,
        **kwargs,
    )


HB = make_field(
    "hb", ReportFieldType.NUMBER, required=True, label="Hb (Haemoglobin)",
    normal_range_min=13.0, normal_range_max=17.0, normal_range_text="13-17",
)
BLOOD_GROUP = make_field(
    "blood_group", ReportFieldType.DROPDOWN, required=True, label="Blood Group",
    dropdown_options=["A", "B", "AB", "O"],
)
SMEAR = make_field(
    "platelet_on_smear", ReportFieldType.DROPDOWN, label="Platelet on Smear",
    dropdown_options=["Adequate", "Increased", "Decreased"], default_value="Adequate",
)
REMARKS = make_field("remarks", ReportFieldType.TEXTAREA, label="Remarks")
RBC = make_field("rbc", ReportFieldType.NUMBER, label="RBC", normal_range_min=4.5, normal_range_max=5.5)


# =============================================================================
# 1. 필드 단위 검증기
# =============================================================================
@pytest.mark.parametrize("value, expected", [
    (None, False),
    ("", False),
    ("   ", False),
    ("\t\n", False),
    (0, True),
    (False, True),
    ("0", True),
    (" A ", True),
    (12.5, True),
])
def test_is_filled(value, expected):
    assert validators.is_filled(value) is expected


@pytest.mark.parametrize("value, expected", [
    (14.2, True),
    (0, True),
    (-3, True),
    ("15.5", True),
    ("  1e3 ", True),
    ("-0.25", True),
    (None, False),
    ("", False),
    ("   ", False),
    ("abc", False),
    ("12abc", False),
    ("1_000", False),
    ("١٢٣", False),
    ("0x10", False),
    (".5", True),
    ("+7.", True),
    (".", False),
    ("NaN", False),
    ("inf", False),
    (math.inf, False),
    (math.nan, False),
    (True, False),
    ([1], False),
])
def test_is_numeric(value, expected):
    assert validators.is_numeric(value) is expected


def test_is_in_dropdown_options():
    assert validators.is_in_dropdown_options("AB", ["A", "B", "AB", "O"]) is True
    assert validators.is_in_dropdown_options("ab", ["A", "B", "AB", "O"]) is False
    assert validators.is_in_dropdown_options("A", []) is False
    assert validators.is_in_dropdown_options("A", None) is False


@pytest.mark.parametrize("value, expected", [
    (12.9, True),
    (17.1, True),
    ("20", True),
    (13.0, False),
    (17, False),
    (15, False),
    ("abc", False),
    (None, False),
])
def test_is_out_of_normal_range(value, expected):
    assert validators.is_out_of_normal_range(value, 13.0, 17.0) is expected


def test_is_out_of_normal_range_without_bounds():
    """[성공] 상한 또는 하한이 없으면 범위 이탈로 보지 않습니다."""
    assert validators.is_out_of_normal_range(1000, None, 17.0) is False
    assert validators.is_out_of_normal_range(-1000, 13.0, None) is False


def test_field_validation_message():
    assert validators.field_validation_message(HB, "required") == "Hb (Haemoglobin) is required"
    assert validators.field_validation_message(HB, "numeric") == "Hb (Haemoglobin) must be a valid number"
    assert validators.field_validation_message(HB, "range") == "Hb (Haemoglobin) is outside normal range (13-17)"
    assert validators.field_validation_message(RBC, "range") == "RBC is outside normal range"


def test_dropdown_field_definition_requires_options():
    """[실패] 선택지가 없는 dropdown 필드 정의는 생성할 수 없습니다."""
    with pytest.raises(PydanticValidationError):
        make_field("rh_factor", ReportFieldType.DROPDOWN, dropdown_options=[])


# =============================================================================
# 2. 폼 단위 검증 집계기
# =============================================================================
def test_validate_form_collects_all_errors():
    """[실패] 여러 필드의 오류가 모두 수집됩니다."""
    fields = [HB, BLOOD_GROUP, SMEAR, REMARKS]
    values = {"hb": "abc", "blood_group": "C", "platelet_on_smear": "Low", "remarks": 42}

    result = validators.validate_form(fields, values)

    assert result.is_valid is False
    assert [e.field_name for e in result.errors] == ["hb", "blood_group", "platelet_on_smear", "remarks"]
    assert result.errors[0].message == "Hb (Haemoglobin) must be a valid number"
    assert result.errors[1].message == "Blood Group must be one of: A, B, AB, O"
    assert result.errors[2].message == "Platelet on Smear must be one of: Adequate, Increased, Decreased"
    assert result.errors[3].message == "Remarks must be text"


def test_validate_form_required_short_circuits_other_checks():
    """[실패] 필수 필드가 비어 있으면 required 오류 하나만 발생합니다."""
    result = validators.validate_form([HB, BLOOD_GROUP], {"hb": "  ", "blood_group": None})

    assert result.errors == [
        ValidationError(field_name="hb", message="Hb (Haemoglobin) is required"),
        ValidationError(field_name="blood_group", message="Blood Group is required"),
    ]


def test_validate_form_skips_absent_optional_fields():
    """[성공] 선택 필드는 값이 없으면 검사하지 않습니다."""
    result = validators.validate_form([SMEAR, REMARKS, RBC], {"platelet_on_smear": "", "remarks": None})

    assert result.is_valid is True
    assert result.errors == []


def test_validate_form_rejects_blank_dropdown_value():
    """[실패] 선택 dropdown 필드에 공백 문자열이 오면 선택지에 없는 값으로 거부됩니다."""
    result = validators.validate_form([SMEAR], {"platelet_on_smear": "  "})

    assert result.errors == [
        ValidationError(
            field_name="platelet_on_smear",
            message="Platelet on Smear must be one of: Adequate, Increased, Decreased",
        )
    ]
    # 저장 시점 검증(check_required=False)에서도 동일합니다.
    assert validators.validate_form([SMEAR], {"platelet_on_smear": "  "}, check_required=False).is_valid is False


def test_validate_form_out_of_range_is_not_an_error():
    """[성공] 정상 범위를 벗어난 값도 유효합니다."""
    result = validators.validate_form([HB], {"hb": 22.5})

    assert result.is_valid is True
    assert validators.out_of_range_fields([HB], {"hb": 22.5}) == ["hb"]


def test_validate_form_without_required_check_allows_partial_save():
    """[성공] check_required=False이면 필수 필드 누락을 허용하지만 형식 오류는 검출합니다."""
    fields = [HB, BLOOD_GROUP]

    partial = validators.validate_form(fields, {"hb": 14}, check_required=False)
    assert partial.is_valid is True

    wrong_type = validators.validate_form(fields, {"hb": "x"}, check_required=False)
    assert [e.field_name for e in wrong_type.errors] == ["hb"]


def test_validate_field_matches_form_rules():
    assert validators.validate_field(HB, None).message == "Hb (Haemoglobin) is required"
    assert validators.validate_field(HB, "14.1") is None
    assert validators.validate_field(SMEAR, None) is None
    assert validators.validate_field(REMARKS, "fine") is None
    assert validators.validate_field(REMARKS, 3).message == "Remarks must be text"


def test_validation_errors_to_map_last_write_wins():
    errors = [
        ValidationError(field_name="hb", message="first"),
        ValidationError(field_name="rbc", message="rbc message"),
        ValidationError(field_name="hb", message="second"),
    ]

    assert validators.validation_errors_to_map(errors) == {"hb": "second", "rbc": "rbc message"}


def test_has_validation_errors():
    assert validators.has_validation_errors(ValidationResult(is_valid=True, errors=[])) is False
    assert validators.has_validation_errors(ValidationResult(is_valid=False, errors=[])) is True
    assert validators.has_validation_errors(
        ValidationResult(is_valid=True, errors=[ValidationError(field_name="hb", message="x")])
    ) is True
