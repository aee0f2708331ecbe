# app/domains/rpt/__init__.py

"""
FastAPI 애플리케이션의 'rpt' 도메인 패키지입니다.

PostgreSQL의 'rpt' 스키마에 해당하는 동적 보고서 폼 엔진을 포함합니다.
보고서 유형별 필드는 코드가 아니라 데이터(report_fields 행)로 정의되며,
검증/상태 계산/저장/렌더링 계층이 이 스키마를 동일한 방식으로 해석합니다.

주요 서브모듈:
- `models.py`: 보고서 유형, 필드 정의, 보고서 인스턴스, EAV 값 테이블.
- `schemas.py`: FieldDefinition 등 요청/응답 및 엔진 내부 값 객체.
- `validators.py`: 필드 단위 검증기와 폼 검증 집계기.
- `status.py`: 필수 필드 완성도 기반 상태 계산기.
- `codec.py`: {필드명: 값} <-> EAV 행 변환.
- `services.py`: 보고서 저장(upsert)/조회/폼 스키마 조회.
- `renderers.py`: 보고서 유형 코드별 폼 레이아웃 렌더러 레지스트리.
- `seeds.py`: 기본 보고서 유형(BLOOD_GROUP, CBC) 시드 데이터.
"""

__title__ = "Dynamic Report Form Domain"
__description__ = "Schema-driven clinical report entry with EAV storage."
__version__ = "0.1.0"
__all__ = []
