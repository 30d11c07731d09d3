"""
공용 테스트 설정
"""

import os
import tempfile

# 설정 모듈이 import 되기 전에 테스트 환경 변수 지정
os.environ["TOUR_API_KEY"] = "test-service-key"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CREATE_TABLES_ON_STARTUP"] = "true"
os.environ["LOG_DIR"] = tempfile.mkdtemp(prefix="mytrip-logs-")
os.environ.pop("REDIS_URL", None)

from typing import Any, Dict, List

import pytest

from app.core.async_database import AsyncDatabaseManager
from config.settings import DatabaseConfig


@pytest.fixture
def raw_tour_items() -> List[Dict[str, Any]]:
    """API 응답 형태의 관광지 목록"""
    return [
        {
            "contentid": "126508",
            "title": "경복궁",
            "contenttypeid": "12",
            "areacode": "1",
            "addr1": "서울특별시 종로구 사직로 161",
            "firstimage": "http://tong.visitkorea.or.kr/cms/resource/33/2678633_image2_1.jpg",
            "mapx": "1979000000000",
            "mapy": "4518000000000",
            "modifiedtime": "20240115093000",
            "cat1": "A02",
        },
        {
            "contentid": "126512",
            "title": "창덕궁과 후원",
            "contenttypeid": "12",
            "areacode": "1",
            "addr1": "서울특별시 종로구 율곡로 99",
            "mapx": "1990000000000",
            "mapy": "4519000000000",
            "modifiedtime": "20240320100000",
        },
    ]


@pytest.fixture
async def db_manager():
    """메모리 SQLite 데이터베이스"""
    manager = AsyncDatabaseManager(DatabaseConfig(url="sqlite+aiosqlite:///:memory:"))
    await manager.create_tables()
    yield manager
    await manager.close()


@pytest.fixture
async def db_session(db_manager):
    async with db_manager.get_session() as session:
        yield session
