# app/domains/rpt/status.py

"""
필수 필드의 입력 완성도로부터 보고서 상태를 계산하는 모듈입니다.
"""

import math
from typing import Any, Iterable, Mapping

from .models import ReportStatus
from .schemas import CompletionSummary, FieldDefinition
from .validators import is_filled


def calculate_status(fields: Iterable[FieldDefinition], values: Mapping[str, Any]) -> ReportStatus:
    """
    보고서 상태를 계산합니다. 아래 순서로 판단합니다.

    1. 값이 하나도 없으면 pending (필수 필드가 없어도 마찬가지)
    2. 필수 필드가 없으면 completed
    3. None과 빈 문자열 외의 값이 하나도 없으면 pending (공백 문자열은 입력된 값으로 봄)
    4. 모든 필수 필드가 입력되었으면 completed
    5. 그 외에는 in-progress
    """
    if not values:
        return ReportStatus.PENDING

    required = [field for field in fields if field.is_required]
    if not required:
        return ReportStatus.COMPLETED

    if not any(value is not None and value != "" for value in values.values()):
        return ReportStatus.PENDING

    if all(is_filled(values.get(field.field_name)) for field in required):
        return ReportStatus.COMPLETED

    return ReportStatus.IN_PROGRESS


def completion_summary(fields: Iterable[FieldDefinition], values: Mapping[str, Any]) -> CompletionSummary:
    required = [field for field in fields if field.is_required]
    total = len(required)
    if total == 0:
        return CompletionSummary(filled_count=0, total_required=0, percent_complete=100)

    filled = sum(1 for field in required if is_filled(values.get(field.field_name)))
    # 반올림은 0.5에서 올림
    percent = math.floor(filled * 100 / total + 0.5)
    return CompletionSummary(filled_count=filled, total_required=total, percent_complete=percent)
