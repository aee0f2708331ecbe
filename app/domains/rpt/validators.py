# app/domains/rpt/validators.py

"""
보고서 필드 값 검증 모듈입니다.

- 필드 단위 검증기: is_filled, is_numeric, is_in_dropdown_options, is_out_of_normal_range
- 폼 단위 검증 집계기: validate_form, validate_field

정상 범위 이탈 여부는 참고용 표시일 뿐이며 검증 실패로 취급하지 않습니다.
"""

import math
import re
from typing import Any, Dict, Iterable, List, Literal, Mapping, Optional, Sequence

from .models import ReportFieldType
from .schemas import FieldDefinition, ValidationError, ValidationResult

MessageKind = Literal["required", "numeric", "range"]

# ASCII 십진수 표기만 허용 (밑줄 구분자, 비ASCII 숫자, inf/nan 표기는 거부)
_DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


# =============================================================================
# 1. 필드 단위 검증기
# =============================================================================
def is_filled(value: Any) -> bool:
    """
    값이 '입력됨'으로 간주되는지 판단합니다.
    None, 빈 문자열, 공백 문자열만 미입력이며 0과 False는 입력된 값입니다.
    """
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


def _is_absent(value: Any) -> bool:
    return value is None or value == ""


def is_numeric(value: Any) -> bool:
    """
    유한한 숫자 또는 유한한 숫자로 해석되는 문자열이면 True를 반환합니다.
    bool은 숫자로 보지 않습니다.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    if isinstance(value, str):
        trimmed = value.strip()
        if not _DECIMAL_PATTERN.fullmatch(trimmed):
            return False
        try:
            parsed = float(trimmed)
        except ValueError:
            return False
        return math.isfinite(parsed)
    return False


def to_number(value: Any) -> float:
    """is_numeric을 통과한 값을 float으로 변환합니다."""
    if isinstance(value, str):
        return float(value.strip())
    return float(value)


def is_in_dropdown_options(value: Any, options: Optional[Sequence[str]]) -> bool:
    return bool(options) and value in options


def is_out_of_normal_range(value: Any, minimum: Optional[float], maximum: Optional[float]) -> bool:
    if minimum is None or maximum is None:
        return False
    if not is_numeric(value):
        return False
    number = to_number(value)
    return number < minimum or number > maximum


def field_validation_message(field: FieldDefinition, kind: MessageKind) -> str:
    label = field.field_label
    if kind == "required":
        return f"{label} is required"
    if kind == "numeric":
        return f"{label} must be a valid number"
    if kind == "range":
        if field.normal_range_text:
            return f"{label} is outside normal range ({field.normal_range_text})"
        return f"{label} is outside normal range"
    return f"{label} is invalid"


# =============================================================================
# 2. 폼 단위 검증 집계기
# =============================================================================
def _check_field(field: FieldDefinition, value: Any, check_required: bool) -> Optional[ValidationError]:
    """
    필드 하나에 대해 검증 규칙을 우선순위대로 적용하고 첫 번째 오류를 반환합니다.

    1. 필수 필드 미입력 -> required 오류 (나머지 검사 생략)
    2. 선택 필드(또는 저장 시점의 필수 필드) 값 없음 -> 검사 생략
    3. number 필드의 숫자 아닌 값
    4. dropdown 필드의 선택지에 없는 값
    5. text/textarea 필드의 문자열 아닌 값
    """
    if field.is_required and not is_filled(value):
        if check_required:
            return ValidationError(field_name=field.field_name, message=field_validation_message(field, "required"))
        return None

    if _is_absent(value):
        return None

    if field.field_type == ReportFieldType.NUMBER and not is_numeric(value):
        return ValidationError(field_name=field.field_name, message=field_validation_message(field, "numeric"))

    if field.field_type == ReportFieldType.DROPDOWN and field.dropdown_options:
        if not is_in_dropdown_options(value, field.dropdown_options):
            options = ", ".join(field.dropdown_options)
            return ValidationError(field_name=field.field_name, message=f"{field.field_label} must be one of: {options}")

    if field.field_type in (ReportFieldType.TEXT, ReportFieldType.TEXTAREA) and not isinstance(value, str):
        return ValidationError(field_name=field.field_name, message=f"{field.field_label} must be text")

    return None


def validate_field(field: FieldDefinition, value: Any) -> Optional[ValidationError]:
    """단일 필드를 폼 검증과 같은 규칙으로 검증합니다. 오류가 없으면 None."""
    return _check_field(field, value, check_required=True)


def validate_form(
    fields: Iterable[FieldDefinition], values: Mapping[str, Any], check_required: bool = True
) -> ValidationResult:
    """
    모든 필드를 검증하여 오류를 빠짐없이 수집합니다.

    Args:
        fields: 보고서 유형의 필드 정의 목록
        values: {필드 키: 값}
        check_required: False이면 필수 필드 누락을 오류로 보지 않습니다 (부분 저장 허용).
    """
    errors: List[ValidationError] = []
    for field in fields:
        error = _check_field(field, values.get(field.field_name), check_required)
        if error is not None:
            errors.append(error)
    return ValidationResult(is_valid=not errors, errors=errors)


def validation_errors_to_map(errors: Iterable[ValidationError]) -> Dict[str, str]:
    # 같은 필드의 오류가 여러 개면 마지막 메시지가 남습니다.
    return {error.field_name: error.message for error in errors}


def has_validation_errors(result: ValidationResult) -> bool:
    return not result.is_valid or bool(result.errors)


def out_of_range_fields(fields: Iterable[FieldDefinition], values: Mapping[str, Any]) -> List[str]:
    """정상 범위를 벗어난 number 필드의 키 목록 (참고용)."""
    return [
        field.field_name
        for field in fields
        if field.field_type == ReportFieldType.NUMBER
        and is_out_of_normal_range(values.get(field.field_name), field.normal_range_min, field.normal_range_max)
    ]
