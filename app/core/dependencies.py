# app/core/dependencies.py

"""
FastAPI 애플리케이션의 의존성 주입(Dependency Injection)을 정의하는 모듈입니다.

- 데이터베이스 세션 관리 (get_db_session).
- 현재 인증된 주체 획득 (get_current_principal).
- 목록 조회용 페이지 파라미터 (PageParams).
"""

from typing import AsyncGenerator

from fastapi import Query
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.database import get_session as get_main_app_session

# flake8: noqa
from app.core.security import (
    Principal,
    create_access_token,
    get_current_principal,
)


# --- 데이터베이스 세션 의존성 주입 ---
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    app.core.database.get_session을 래핑한 비동기 데이터베이스 세션 제너레이터입니다.
    """
    async for session in get_main_app_session():
        yield session


# --- 페이지네이션 파라미터 ---
class PageParams:
    """page/limit 쿼리 파라미터를 offset 계산과 함께 묶어 제공합니다."""

    def __init__(self, page: int, limit: int):
        self.page = max(1, page)
        self.limit = min(100, max(1, limit))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def page_params(
    page: int = Query(1, description="조회할 페이지 (1부터 시작)"),
    limit: int = Query(10, description="페이지당 항목 수 (1~100)"),
) -> PageParams:
    return PageParams(page, limit)


def wide_page_params(
    page: int = Query(1, description="조회할 페이지 (1부터 시작)"),
    limit: int = Query(50, description="페이지당 항목 수 (1~100)"),
) -> PageParams:
    return PageParams(page, limit)
