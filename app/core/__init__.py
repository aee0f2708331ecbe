# app/core/__init__.py

"""
임상 검사실 보고서 API의 핵심 구성 요소 패키지입니다.

- `config.py`: 환경 변수 기반 설정 (Pydantic Settings).
- `database.py`: 비동기 엔진과 세션 관리 (SQLModel + AsyncSQLAlchemy).
- `exceptions.py`: {"error", "message"} 본문을 갖는 HTTP 예외 계층.
- `security.py`: JWT Bearer 토큰 검증과 현재 인증 주체(Principal).
- `dependencies.py`: 라우터에서 사용하는 공통 의존성 (DB 세션, 페이지 파라미터).
- `crud_base.py`: 도메인 CRUD 클래스의 기반 클래스.
"""

__title__ = "Clinical LIMS Core"
__description__ = "Core components for the clinical LIMS report API."
__version__ = "0.1.0"
__all__ = []
