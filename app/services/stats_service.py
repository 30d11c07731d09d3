"""
관광 통계 서비스

지역별(17개 시도), 타입별(8개 관광 타입) 관광지 수를 집계합니다.
각 코드마다 totalCount 만 조회하는 요청을 동시에 실행하며, 요청 하나가
재시도 후에도 실패하면 전체 집계가 실패합니다 (부분 결과 없음).
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from app.collectors.tour_api_client import TourAPIClient
from app.core.error_handling import RetryConfig, retry_async
from app.core.logger import log_performance_metric
from app.models import RegionStats, StatsSummary, TypeStats
from app.utils.code_converter import get_area_name, get_tour_type_name
from config.constants import AREA_CODES, CONTENT_TYPE_IDS, TOP_N_STATS


def total_from_types(type_stats: Sequence[TypeStats]) -> int:
    """타입별 통계 합계 (지역 합계와 독립적으로 계산)"""
    return sum(stat.count for stat in type_stats)


def summarize(
    region_stats: Sequence[RegionStats],
    type_stats: Sequence[TypeStats],
    top_n: int = TOP_N_STATS,
) -> StatsSummary:
    """지역/타입 통계로 요약 생성

    total_count 는 지역별 합계만 사용합니다. 입력이 이미 내림차순이라고
    가정하지 않고 다시 정렬합니다.
    """
    regions = sorted(region_stats, key=lambda stat: stat.count, reverse=True)
    types = sorted(type_stats, key=lambda stat: stat.count, reverse=True)

    return StatsSummary(
        total_count=sum(stat.count for stat in regions),
        top_regions=regions[:top_n],
        top_types=types[:top_n],
        last_updated=datetime.now(timezone.utc),
    )


class StatsService:
    """관광 통계 집계 서비스"""

    def __init__(
        self, client: TourAPIClient, retry_config: Optional[RetryConfig] = None
    ):
        self.client = client
        self.retry_config = retry_config or RetryConfig(
            max_retries=client.config.retry_count,
            delay_seconds=client.config.retry_delay_seconds,
        )
        self.logger = logging.getLogger(__name__)

    async def fetch_total_count(self, params: Dict[str, Any]) -> int:
        """조건에 맞는 관광지 총 개수 조회 (재시도 포함)"""
        return await retry_async(
            self.client.get_total_count, self.retry_config, params
        )

    async def _region_stat(self, area_code: str) -> RegionStats:
        count = await self.fetch_total_count({"areaCode": area_code})
        return RegionStats(
            areacode=area_code, name=get_area_name(area_code), count=count
        )

    async def _type_stat(self, content_type_id: str) -> TypeStats:
        count = await self.fetch_total_count({"contentTypeId": content_type_id})
        return TypeStats(
            contenttypeid=content_type_id,
            name=get_tour_type_name(content_type_id),
            count=count,
        )

    async def get_region_stats(self) -> List[RegionStats]:
        """지역별 관광지 수 (내림차순)"""
        start = time.monotonic()
        stats = await asyncio.gather(*(self._region_stat(code) for code in AREA_CODES))
        log_performance_metric("region_stats_duration", round(time.monotonic() - start, 3), "초")

        # sorted 는 안정 정렬이므로 같은 수는 코드 순서 유지
        return sorted(stats, key=lambda stat: stat.count, reverse=True)

    async def get_type_stats(self) -> List[TypeStats]:
        """타입별 관광지 수 (내림차순)"""
        start = time.monotonic()
        stats = await asyncio.gather(
            *(self._type_stat(type_id) for type_id in CONTENT_TYPE_IDS)
        )
        log_performance_metric("type_stats_duration", round(time.monotonic() - start, 3), "초")
        return sorted(stats, key=lambda stat: stat.count, reverse=True)

    async def get_stats_summary(self) -> StatsSummary:
        """전체 통계 요약 (지역/타입 통계 동시 조회)"""
        region_stats, type_stats = await asyncio.gather(
            self.get_region_stats(), self.get_type_stats()
        )
        summary = summarize(region_stats, type_stats)

        self.logger.info(
            f"통계 집계 완료 - 전체: {summary.total_count}건, "
            f"타입 합계: {total_from_types(type_stats)}건"
        )
        return summary
