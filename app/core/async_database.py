"""
비동기 데이터베이스 세션 관리
"""
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
import logging

from config.settings import DatabaseConfig, get_database_config
from app.models import Base

logger = logging.getLogger(__name__)


class AsyncDatabaseManager:
    """비동기 데이터베이스 세션 관리자

    애플리케이션 lifespan 에서 한 번 생성되고 종료 시 close() 됩니다.
    """

    def __init__(self, config: Optional[DatabaseConfig] = None):
        self.config = config or get_database_config()

        engine_options = {"echo": self.config.echo, "pool_pre_ping": True}
        if ":memory:" in self.config.url:
            # 메모리 DB 는 연결마다 새로 생성되므로 단일 연결 공유
            engine_options.update(
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        elif not self.config.url.startswith("sqlite"):
            engine_options.update(
                pool_size=self.config.pool_size,
                max_overflow=self.config.max_overflow,
            )

        self.engine = create_async_engine(self.config.url, **engine_options)

        self.async_session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

        logger.info("비동기 데이터베이스 매니저 초기화 완료")

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """비동기 데이터베이스 세션 생성"""
        async with self.async_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_tables(self):
        """테이블 생성 (개발/테스트 환경용)"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("데이터베이스 테이블 생성 완료")

    async def close(self):
        """엔진 종료"""
        await self.engine.dispose()
        logger.info("비동기 데이터베이스 엔진이 정상적으로 종료되었습니다")
