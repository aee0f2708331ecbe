# app/core/exceptions.py

"""
도메인 전반에서 사용하는 HTTP 예외 계층을 정의하는 모듈입니다.

모든 예외는 fastapi.HTTPException을 상속하므로 crud/서비스 계층에서 그대로 raise하면
FastAPI가 응답으로 변환합니다. 응답 본문(detail)은 항상 다음 형태를 가집니다.

    {"error": "<오류 종류>", "message": "<사용자 메시지>", ...추가 정보}
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class AppError(HTTPException):
    """detail 본문 형식을 통일한 애플리케이션 예외의 기반 클래스입니다."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal server error"

    def __init__(
        self,
        message: str,
        *,
        error: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        **extra: Any,
    ):
        self.message = message
        detail = {"error": error or self.error, "message": message, **extra}
        super().__init__(status_code=self.status_code, detail=detail, headers=headers)


class InvalidInputError(AppError):
    """잘못된 식별자, 누락된 필수 요청 필드 (400)."""
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Invalid input"


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"

    def __init__(self, message: str = "You must be logged in to access this resource", **extra: Any):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"}, **extra)


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not found"


class ConflictError(AppError):
    """유니크/외래 키 제약 위반 등 이미 존재하거나 참조가 잘못된 경우 (409)."""
    status_code = status.HTTP_409_CONFLICT
    error = "Conflict"


class ValidationFailedError(AppError):
    """폼 검증 실패. 첫 번째 오류만이 아니라 전체 오류 목록을 담습니다 (422)."""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error = "Validation failed"

    def __init__(self, errors: list, message: str = "Please check your input and try again"):
        self.errors = errors
        super().__init__(message, errors=errors)


class DatabaseError(AppError):
    """영속 계층 오류. 상세 내용은 서버 로그에만 남기고 클라이언트에는 일반 메시지만 보냅니다."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Database error"

    def __init__(self, message: str = "A database error occurred. Please try again.", **extra: Any):
        super().__init__(message, **extra)


class ReportIntegrityError(DatabaseError):
    """저장된 값 행이 보고서 유형의 필드 정의와 맞지 않는 경우."""
    error = "Data integrity error"
