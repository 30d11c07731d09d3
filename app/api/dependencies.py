"""
라우터 공용 의존성

lifespan 에서 app.state 에 등록한 인스턴스를 요청 단위로 꺼내 줍니다.
"""

from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.query_cache import QueryCache
from app.services.bookmark_service import BookmarkService
from app.services.stats_service import StatsService
from app.services.tour_service import TourService


def get_tour_service(request: Request) -> TourService:
    return request.app.state.tour_service


def get_stats_service(request: Request) -> StatsService:
    return request.app.state.stats_service


def get_bookmark_service(request: Request) -> BookmarkService:
    return request.app.state.bookmark_service


def get_query_cache(request: Request) -> QueryCache:
    return request.app.state.query_cache


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """요청 단위 DB 세션"""
    async with request.app.state.db_manager.get_session() as session:
        yield session
