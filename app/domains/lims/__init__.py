# app/domains/lims/__init__.py

"""
FastAPI 애플리케이션의 'lims' 도메인 패키지입니다.

PostgreSQL의 'lims' 스키마에 해당하는 환자(Patient)와 검사 배정(TestAssignment)
데이터 모델, 비즈니스 로직 및 API 엔드포인트를 포함합니다.

주요 서브모듈:
- `models.py`: 'lims' 스키마의 테이블에 매핑되는 SQLModel 정의.
- `schemas.py`: 요청 및 응답 유효성 검사를 위한 Pydantic 모델.
- `crud.py`: 'lims' 스키마 테이블에 대한 비동기 CRUD 로직.
- `routers.py`: 환자 등록/조회 및 검사 배정 API 엔드포인트.
"""

__title__ = "LIMS Patient & Test Assignment Domain"
__description__ = "Manages patient registration and lab-test assignment data."
__version__ = "0.1.0"
__all__ = []
