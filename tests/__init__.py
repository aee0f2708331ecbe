# tests/__init__.py

"""
FastAPI 애플리케이션의 테스트 스위트 패키지입니다.

- `domains/`: 도메인(lims, rpt)별 테스트 모듈.
- `conftest.py`: 인메모리 SQLite 데이터베이스, 테스트 클라이언트, 인증 토큰 등 공용 픽스처.
"""

__title__ = "Clinical LIMS Report API Tests"
__description__ = "Test suite for the clinical LIMS report FastAPI application."
__version__ = "0.1.0"
__all__ = []
