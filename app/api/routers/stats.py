"""
관광 통계 API 라우터

통계는 요청마다 25회의 외부 호출이 필요하므로 1시간 단위로 캐시합니다.
"""

from fastapi import APIRouter, Depends
from typing import List

from app.api.dependencies import get_query_cache, get_stats_service
from app.core.query_cache import QueryCache
from app.models import RegionStats, StatsSummary, TypeStats
from app.services.stats_service import StatsService
from config.settings import get_cache_config

router = APIRouter()


async def _cached_stats(cache: QueryCache, name: str, fetcher):
    async def fetch():
        result = await fetcher()
        if isinstance(result, list):
            return [item.model_dump(mode="json") for item in result]
        return result.model_dump(mode="json")

    return await cache.get_or_fetch(
        QueryCache.make_key(f"stats_{name}"),
        fetch,
        ttl=get_cache_config().stats_revalidate_seconds,
    )


@router.get("/stats/regions", response_model=List[RegionStats])
async def get_region_stats(
    service: StatsService = Depends(get_stats_service),
    cache: QueryCache = Depends(get_query_cache),
):
    """지역별 관광지 수 (내림차순)"""
    return await _cached_stats(cache, "regions", service.get_region_stats)


@router.get("/stats/types", response_model=List[TypeStats])
async def get_type_stats(
    service: StatsService = Depends(get_stats_service),
    cache: QueryCache = Depends(get_query_cache),
):
    """타입별 관광지 수 (내림차순)"""
    return await _cached_stats(cache, "types", service.get_type_stats)


@router.get("/stats/summary", response_model=StatsSummary)
async def get_stats_summary(
    service: StatsService = Depends(get_stats_service),
    cache: QueryCache = Depends(get_query_cache),
):
    """전체 통계 요약"""
    return await _cached_stats(cache, "summary", service.get_stats_summary)
