# app/core/security.py

"""
애플리케이션의 보안 관련 유틸리티 함수 및 의존성 주입을 정의하는 모듈입니다.

- JWT(JSON Web Token) 생성 및 검증.
- Bearer 토큰에서 현재 인증 주체(Principal)를 획득.

로그인/회원가입 흐름은 외부 인증 공급자가 담당하며, 이 서비스는 발급된 토큰의
'sub' 클레임(사용자 UUID)만 신뢰합니다.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from app.core.config import settings
from app.core.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

# 토큰이 없을 때 FastAPI 기본 403 대신 401을 직접 반환하기 위해 auto_error=False로 둡니다.
bearer_scheme = HTTPBearer(auto_error=False)


class Principal(BaseModel):
    """현재 인증된 주체. created_by/assigned_by 기록에만 사용됩니다."""
    id: uuid.UUID
    email: Optional[str] = None


# --- JWT 토큰 생성 및 검증 ---
def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Access Token을 생성합니다. data에는 최소한 'sub'(사용자 UUID 문자열)가 있어야 합니다.
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY.get_secret_value(), algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Principal:
    """토큰을 디코딩하여 Principal을 반환합니다. 검증에 실패하면 UnauthorizedError."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY.get_secret_value(), algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.debug("JWT 검증 실패: %s", e)
        raise UnauthorizedError("Could not validate credentials") from e

    subject = payload.get("sub")
    if subject is None:
        raise UnauthorizedError("Could not validate credentials")
    try:
        principal_id = uuid.UUID(str(subject))
    except ValueError as e:
        raise UnauthorizedError("Could not validate credentials") from e
    return Principal(id=principal_id, email=payload.get("email"))


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    """
    Authorization 헤더의 Bearer 토큰으로 현재 인증 주체를 반환합니다.
    토큰이 없거나 유효하지 않으면 401 Unauthorized를 발생시킵니다.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError()
    return decode_access_token(credentials.credentials)
