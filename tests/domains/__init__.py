# tests/domains/__init__.py

"""
도메인별 테스트 패키지입니다.

- `test_lims_n.py`: 환자 등록 및 검사 배정 API.
- `test_rpt_*.py`: 보고서 폼 엔진 (검증기, 상태 계산, 코덱, 저장/조회 서비스, 렌더러, API).
"""

__title__ = "Clinical LIMS Domain Tests"
__description__ = "Categorized tests for each business domain."
__version__ = "0.1.0"
__all__ = []
