# app/domains/rpt/renderers.py

"""
보고서 유형 코드별 폼 렌더러 레지스트리입니다.

렌더러는 FieldDefinition 메타데이터와 현재 값으로부터 JSON 폼 레이아웃(FormLayout)을 만듭니다.
전용 렌더러가 없는 보고서 유형은 GenericFormRenderer로 처리하므로,
새 보고서 유형은 데이터(report_fields)만 추가하면 바로 입력 가능합니다.
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from .models import ReportFieldType
from .schemas import FieldDefinition, FormLayout, FormSection, FormWidget, WidgetKind
from .status import calculate_status, completion_summary
from .validators import is_out_of_normal_range

Section = Tuple[str, List[FieldDefinition]]

_WIDGET_KINDS = {
    ReportFieldType.NUMBER: WidgetKind.NUMBER,
    ReportFieldType.TEXT: WidgetKind.TEXT,
    ReportFieldType.DROPDOWN: WidgetKind.SELECT,
    ReportFieldType.TEXTAREA: WidgetKind.TEXTAREA,
}


class ReportTypeCode(str, Enum):
    BLOOD_GROUP = "BLOOD_GROUP"
    CBC = "CBC"


def build_widget(field: FieldDefinition, values: Mapping[str, Any]) -> FormWidget:
    """필드 하나를 입력 위젯으로 변환합니다. 값이 없으면 기본값을 사용합니다."""
    kind = _WIDGET_KINDS[field.field_type]
    value = values.get(field.field_name)
    if value is None:
        value = field.default_value

    if kind == WidgetKind.NUMBER:
        placeholder = "Enter value"
    elif kind == WidgetKind.SELECT:
        placeholder = f"Select {field.field_label.lower()}"
    else:
        placeholder = f"Enter {field.field_label.lower()}"

    return FormWidget(
        field_name=field.field_name,
        widget=kind,
        label=field.field_label,
        required=field.is_required,
        unit=field.unit,
        normal_range_text=field.normal_range_text,
        options=list(field.dropdown_options or []),
        placeholder=placeholder,
        value=value,
        out_of_range=(
            kind == WidgetKind.NUMBER
            and is_out_of_normal_range(value, field.normal_range_min, field.normal_range_max)
        ),
    )


class FormRenderer:
    """모든 필드를 field_order 순으로 하나의 섹션에 배치하는 기본 렌더러."""
    name = "generic"
    default_section_title = "Report Details"

    def sections(self, fields: Sequence[FieldDefinition]) -> List[Section]:
        return [(self.default_section_title, list(fields))]

    def render(self, report_type_code: str, fields: Sequence[FieldDefinition], values: Mapping[str, Any]) -> FormLayout:
        ordered = sorted(fields, key=lambda f: f.field_order)
        return FormLayout(
            report_type_code=report_type_code,
            renderer=self.name,
            sections=[
                FormSection(title=title, widgets=[build_widget(f, values) for f in section_fields])
                for title, section_fields in self.sections(ordered)
                if section_fields
            ],
            status=calculate_status(ordered, values),
            completion=completion_summary(ordered, values),
        )


class GenericFormRenderer(FormRenderer):
    pass


class GroupedFormRenderer(FormRenderer):
    """
    필드 키 그룹에 따라 섹션을 나누는 렌더러.
    어느 그룹에도 속하지 않은 필드는 마지막 섹션(catch_all)에 field_order 순으로 추가됩니다.
    """
    groups: List[Tuple[str, List[str]]] = []
    catch_all: str = "Other"

    def sections(self, fields: Sequence[FieldDefinition]) -> List[Section]:
        by_name = {f.field_name: f for f in fields}
        grouped = {name for _, names in self.groups for name in names}
        result: List[Section] = []
        for title, names in self.groups:
            section_fields = [by_name[name] for name in names if name in by_name]
            if title == self.catch_all:
                section_fields += [f for f in fields if f.field_name not in grouped]
            result.append((title, section_fields))
        if self.catch_all not in (title for title, _ in self.groups):
            result.append((self.catch_all, [f for f in fields if f.field_name not in grouped]))
        return result


class BloodGroupFormRenderer(GroupedFormRenderer):
    name = "blood_group"
    groups = [("Blood Group", ["blood_group", "rh_factor"])]
    catch_all = "Blood Group"


class CBCFormRenderer(GroupedFormRenderer):
    name = "cbc"
    groups = [
        ("RBC Parameters", ["hb", "rbc", "pcv_haematocrit", "mcv", "mch", "mchc", "rdw_cv"]),
        (
            "WBC Parameters",
            ["total_leukocyte_count", "neutrophil", "lymphocyte", "monocyte", "eosinophil", "basophil"],
        ),
        ("Platelet Parameters", ["platelet_count", "platelet_on_smear"]),
        ("Other Tests", ["malarial_parasite"]),
    ]
    catch_all = "Other Tests"


FORM_RENDERERS: Dict[ReportTypeCode, FormRenderer] = {
    ReportTypeCode.BLOOD_GROUP: BloodGroupFormRenderer(),
    ReportTypeCode.CBC: CBCFormRenderer(),
}

_GENERIC_RENDERER = GenericFormRenderer()


def resolve_form_renderer(code: str) -> FormRenderer:
    """보고서 유형 코드에 맞는 렌더러를 반환합니다. 등록되지 않은 코드는 기본 렌더러를 사용합니다."""
    try:
        return FORM_RENDERERS[ReportTypeCode(code)]
    except ValueError:
        return _GENERIC_RENDERER
