# tests/domains/test_rpt_renderers.py

"""
보고서 유형 코드별 폼 렌더러(레이아웃 생성)에 대한 단위 테스트 모듈입니다.
"""

from typing import Dict, List

from app.domains.rpt.models import ReportFieldType, ReportStatus
from app.domains.rpt.renderers import (
    BloodGroupFormRenderer,
    CBCFormRenderer,
    GenericFormRenderer,
    build_widget,
    resolve_form_renderer,
)
from app.domains.rpt.schemas import FieldDefinition, WidgetKind
from app.domains.rpt.seeds import REPORT_TYPE_SEEDS


def seed_fields(code: str) -> List[FieldDefinition]:
    seed = next(s for s in REPORT_TYPE_SEEDS if s["code"] == code)
    return [FieldDefinition(**field_data) for field_data in seed["fields"]]


def section_map(layout) -> Dict[str, List[str]]:
    return {section.title: [w.field_name for w in section.widgets] for section in layout.sections}


def test_resolve_form_renderer():
    assert isinstance(resolve_form_renderer("CBC"), CBCFormRenderer)
    assert isinstance(resolve_form_renderer("BLOOD_GROUP"), BloodGroupFormRenderer)
    assert isinstance(resolve_form_renderer("LIPID_PROFILE"), GenericFormRenderer)
    # 코드는 대소문자를 구분합니다.
    assert isinstance(resolve_form_renderer("cbc"), GenericFormRenderer)


def test_cbc_layout_sections():
    """[성공] CBC 폼은 RBC/WBC/혈소판/기타 섹션으로 나뉘고 모든 필드가 한 번씩 배치됩니다."""
    fields = seed_fields("CBC")

    layout = CBCFormRenderer().render("CBC", fields, {})

    sections = section_map(layout)
    assert list(sections) == ["RBC Parameters", "WBC Parameters", "Platelet Parameters", "Other Tests"]
    assert sections["RBC Parameters"][0] == "hb"
    assert sections["Platelet Parameters"] == ["platelet_count", "platelet_on_smear"]
    assert sections["Other Tests"] == ["malarial_parasite"]
    placed = [name for names in sections.values() for name in names]
    assert sorted(placed) == sorted(f.field_name for f in fields)
    assert layout.renderer == "cbc"
    assert layout.status == ReportStatus.PENDING
    assert layout.completion.total_required == 14


def test_cbc_layout_places_unknown_fields_in_other_tests():
    """[성공] 그룹에 없는 필드(새로 추가된 필드)는 Other Tests 섹션 끝에 배치됩니다."""
    fields = seed_fields("CBC") + [
        FieldDefinition(field_name="esr", field_label="ESR", field_type=ReportFieldType.NUMBER, field_order=17),
    ]

    sections = section_map(CBCFormRenderer().render("CBC", fields, {}))

    assert sections["Other Tests"] == ["malarial_parasite", "esr"]


def test_blood_group_layout():
    fields = seed_fields("BLOOD_GROUP")

    layout = resolve_form_renderer("BLOOD_GROUP").render(
        "BLOOD_GROUP", fields, {"blood_group": "B", "rh_factor": "NEGATIVE"}
    )

    assert section_map(layout) == {"Blood Group": ["blood_group", "rh_factor"]}
    widget = layout.sections[0].widgets[0]
    assert widget.widget == WidgetKind.SELECT
    assert widget.options == ["A", "B", "AB", "O"]
    assert widget.placeholder == "Select blood group"
    assert widget.value == "B"
    assert layout.status == ReportStatus.COMPLETED
    assert layout.completion.percent_complete == 100


def test_generic_layout_orders_fields_in_one_section():
    fields = [
        FieldDefinition(field_name="comment", field_label="Comment", field_type=ReportFieldType.TEXTAREA, field_order=2),
        FieldDefinition(field_name="glucose", field_label="Glucose", field_type=ReportFieldType.NUMBER, field_order=1),
    ]

    layout = resolve_form_renderer("GLUCOSE").render("GLUCOSE", fields, {"glucose": 95})

    assert layout.renderer == "generic"
    assert section_map(layout) == {"Report Details": ["glucose", "comment"]}
    assert layout.sections[0].widgets[1].placeholder == "Enter comment"


def test_build_widget_default_and_out_of_range():
    """[성공] 값이 없으면 기본값을 보여주고, number 위젯만 정상 범위 이탈을 표시합니다."""
    fields = {f.field_name: f for f in seed_fields("CBC")}

    smear = build_widget(fields["platelet_on_smear"], {})
    assert smear.value == "Adequate"
    assert smear.out_of_range is False

    high_hb = build_widget(fields["hb"], {"hb": "18.4"})
    assert high_hb.widget == WidgetKind.NUMBER
    assert high_hb.placeholder == "Enter value"
    assert high_hb.unit == "gm/dl"
    assert high_hb.normal_range_text == "13-17"
    assert high_hb.out_of_range is True

    normal_hb = build_widget(fields["hb"], {"hb": 15})
    assert normal_hb.out_of_range is False

    empty_hb = build_widget(fields["hb"], {})
    assert empty_hb.value is None
    assert empty_hb.out_of_range is False
