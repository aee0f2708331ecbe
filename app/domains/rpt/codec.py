# app/domains/rpt/codec.py

"""
{필드 키: 값} 맵과 report_values(EAV) 행 사이의 변환을 담당하는 모듈입니다.

- number 필드는 value_number, 그 외 필드는 value_text 컬럼에 저장합니다.
- 필드 정의에 없는 키와 빈 값(None, 빈 문자열, 공백 문자열)은 저장하지 않습니다.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping

from app.core.exceptions import ReportIntegrityError

from .models import ReportFieldType
from .schemas import EncodedValue, FieldDefinition
from .validators import is_filled, to_number

logger = logging.getLogger(__name__)


def encode_values(values: Mapping[str, Any], fields: Iterable[FieldDefinition]) -> List[EncodedValue]:
    by_name = {field.field_name: field for field in fields}
    encoded: List[EncodedValue] = []
    for field_name, value in values.items():
        field = by_name.get(field_name)
        if field is None:
            logger.debug("알 수 없는 필드 '%s'의 값은 저장하지 않습니다.", field_name)
            continue
        if not is_filled(value):
            continue
        if field.field_type == ReportFieldType.NUMBER:
            encoded.append(EncodedValue(report_field_id=field.id, value_number=to_number(value)))
        else:
            encoded.append(EncodedValue(report_field_id=field.id, value_text=str(value)))
    return encoded


def decode_values(rows: Iterable[Any], fields: Iterable[FieldDefinition]) -> Dict[str, Any]:
    """
    저장된 값 행을 {필드 키: 값} 맵으로 복원합니다.

    Raises:
        ReportIntegrityError: 행의 report_field_id에 해당하는 필드 정의가 없을 때
    """
    by_id = {field.id: field for field in fields}
    values: Dict[str, Any] = {}
    for row in rows:
        field = by_id.get(row.report_field_id)
        if field is None:
            logger.error("필드 정의가 없는 보고서 값 행 발견: report_field_id=%s", row.report_field_id)
            raise ReportIntegrityError(
                "Stored report values do not match the report type definition. Please contact support."
            )
        if field.field_type == ReportFieldType.NUMBER:
            values[field.field_name] = float(row.value_number) if row.value_number is not None else None
        else:
            values[field.field_name] = row.value_text
    return values
