"""
관광 통계 서비스 테스트
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core.error_handling import (
    ConfigurationError,
    NetworkError,
    RetryConfig,
)
from app.models import RegionStats, TypeStats
from app.services.stats_service import StatsService, summarize, total_from_types
from config.constants import AREA_CODES, CONTENT_TYPE_IDS

# 지역별/타입별 가짜 건수 (두 합계는 서로 다름)
REGION_COUNTS = {code: (index + 1) * 100 for index, code in enumerate(AREA_CODES)}
TYPE_COUNTS = {type_id: (index + 1) * 1000 for index, type_id in enumerate(CONTENT_TYPE_IDS)}


async def fake_total_count(params):
    if "areaCode" in params:
        return REGION_COUNTS[params["areaCode"]]
    return TYPE_COUNTS[params["contentTypeId"]]


@pytest.fixture
def client():
    client = MagicMock()
    client.get_total_count = AsyncMock(side_effect=fake_total_count)
    return client


@pytest.fixture
def service(client):
    return StatsService(client, RetryConfig(max_retries=3, delay_seconds=0))


class TestStatsService:
    """통계 집계 테스트"""

    @pytest.mark.asyncio
    async def test_region_stats_sorted_descending(self, service, client):
        stats = await service.get_region_stats()

        assert len(stats) == len(AREA_CODES)
        counts = [stat.count for stat in stats]
        assert counts == sorted(counts, reverse=True)
        assert stats[0].areacode == "39"
        assert stats[0].name == "제주"
        assert client.get_total_count.await_count == len(AREA_CODES)

    @pytest.mark.asyncio
    async def test_type_stats_sorted_descending(self, service):
        stats = await service.get_type_stats()

        assert [stat.contenttypeid for stat in stats][:2] == ["39", "38"]
        assert stats[0].name == "음식점"

    @pytest.mark.asyncio
    async def test_summary(self, service):
        summary = await service.get_stats_summary()

        assert summary.total_count == sum(REGION_COUNTS.values())
        assert [stat.areacode for stat in summary.top_regions] == ["39", "38", "37"]
        assert [stat.contenttypeid for stat in summary.top_types] == ["39", "38", "32"]
        assert summary.last_updated is not None

    @pytest.mark.asyncio
    async def test_retry_then_success(self, service, client):
        calls = {"count": 0}

        async def flaky(params):
            if params.get("areaCode") == "1":
                calls["count"] += 1
                if calls["count"] < 3:
                    raise NetworkError("temporary failure")
            return await fake_total_count(params)

        client.get_total_count.side_effect = flaky

        stats = await service.get_region_stats()

        assert calls["count"] == 3
        assert next(stat for stat in stats if stat.areacode == "1").count == 100

    @pytest.mark.asyncio
    async def test_exhausted_retry_fails_whole_aggregation(self, service, client):
        calls = {"count": 0}

        async def always_fails_for_seoul(params):
            if params.get("areaCode") == "1":
                calls["count"] += 1
                raise NetworkError("down")
            return await fake_total_count(params)

        client.get_total_count.side_effect = always_fails_for_seoul

        with pytest.raises(NetworkError):
            await service.get_stats_summary()

        # 최초 1회 + 재시도 3회
        assert calls["count"] == 4

    @pytest.mark.asyncio
    async def test_configuration_error_not_retried(self, service, client):
        client.get_total_count.side_effect = ConfigurationError("no key")

        with pytest.raises(ConfigurationError):
            await service.fetch_total_count({"areaCode": "1"})

        assert client.get_total_count.await_count == 1

    def test_default_retry_config_from_client(self):
        client = MagicMock()
        client.config.retry_count = 3
        client.config.retry_delay_seconds = 1.0

        service = StatsService(client)

        assert service.retry_config.max_attempts == 4
        assert service.retry_config.delay_seconds == 1.0


class TestSummarize:
    """요약 계산 테스트"""

    def test_totals_are_independent(self):
        regions = [
            RegionStats(areacode="1", name="서울", count=50),
            RegionStats(areacode="6", name="부산", count=30),
        ]
        types = [
            TypeStats(contenttypeid="12", name="관광지", count=60),
            TypeStats(contenttypeid="39", name="음식점", count=25),
        ]

        summary = summarize(regions, types)

        assert summary.total_count == 80
        assert total_from_types(types) == 85

    def test_top_three_regardless_of_input_order(self):
        regions = [
            RegionStats(areacode=str(i), name="", count=i) for i in range(1, 6)
        ]

        summary = summarize(regions, [])

        assert [stat.count for stat in summary.top_regions] == [5, 4, 3]
        assert summary.top_types == []
