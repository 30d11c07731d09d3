"""
쿼리 캐시

외부 API 조회 결과를 짧은 기간 보관합니다. 애플리케이션 인스턴스마다
한 번 생성되어 lifespan 동안 서비스에 전달되고, 종료 시 close() 됩니다.

- stale_time 이내의 데이터는 그대로 반환
- stale_time 이 지난 데이터는 다시 조회
- gc_time 이 지난 항목은 메모리에서 제거
- REDIS_URL 이 설정되면 Redis 에 저장 (여러 인스턴스 공유)
"""

import hashlib
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional
from urllib.parse import urlencode

import redis.asyncio as redis


@dataclass
class CacheMetrics:
    """캐시 성능 메트릭"""

    hit_count: int = 0
    miss_count: int = 0

    @property
    def total_requests(self) -> int:
        return self.hit_count + self.miss_count

    @property
    def hit_rate(self) -> float:
        """캐시 히트율"""
        if self.total_requests == 0:
            return 0.0
        return self.hit_count / self.total_requests


class QueryCache:
    """TTL 기반 쿼리 캐시"""

    def __init__(
        self,
        stale_time: int = 60,
        gc_time: int = 300,
        redis_url: Optional[str] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.logger = logging.getLogger(__name__)
        self.stale_time = stale_time
        self.gc_time = max(gc_time, stale_time)
        self.redis_url = redis_url
        self._clock = clock
        self._entries: Dict[str, tuple] = {}
        self._redis: Optional[redis.Redis] = None
        self.metrics = CacheMetrics()

    async def start(self) -> None:
        """Redis 연결 (설정된 경우)"""
        if not self.redis_url:
            self.logger.info("메모리 쿼리 캐시 사용")
            return

        self._redis = redis.from_url(self.redis_url, decode_responses=True)
        await self._redis.ping()
        self.logger.info("Redis 쿼리 캐시 연결 성공")

    async def close(self) -> None:
        """캐시 종료"""
        self._entries.clear()
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
            self.logger.info("Redis 쿼리 캐시 연결 종료")

    @staticmethod
    def make_key(namespace: str, params: Optional[Dict[str, Any]] = None) -> str:
        """캐시 키 생성"""
        # 파라미터를 정렬하여 일관된 키 생성
        filtered = {k: v for k, v in (params or {}).items() if v is not None}
        params_str = urlencode(sorted(filtered.items()))
        key_hash = hashlib.md5(f"{namespace}:{params_str}".encode()).hexdigest()
        return f"query_cache:{namespace}:{key_hash}"

    async def get(self, key: str) -> Optional[Any]:
        """신선한(stale 이전) 캐시 값 조회"""
        if self._redis is not None:
            cached = await self._redis.get(key)
            return json.loads(cached) if cached is not None else None

        entry = self._entries.get(key)
        if entry is None:
            return None

        fresh_until, _, value = entry
        if self._clock() > fresh_until:
            return None
        return value

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """캐시 저장"""
        ttl = ttl or self.stale_time
        if self._redis is not None:
            await self._redis.set(key, json.dumps(value, ensure_ascii=False), ex=ttl)
            return

        self._purge_expired()
        now = self._clock()
        self._entries[key] = (now + ttl, now + max(ttl, self.gc_time), value)

    async def invalidate(self, prefix: str) -> int:
        """네임스페이스 단위 무효화"""
        pattern = f"query_cache:{prefix}"
        if self._redis is not None:
            keys = [key async for key in self._redis.scan_iter(match=f"{pattern}*")]
            if keys:
                await self._redis.delete(*keys)
            return len(keys)

        keys = [key for key in self._entries if key.startswith(pattern)]
        for key in keys:
            del self._entries[key]
        return len(keys)

    async def get_or_fetch(
        self,
        key: str,
        fetcher: Callable[[], Awaitable[Any]],
        ttl: Optional[int] = None,
    ) -> Any:
        """캐시에 있으면 반환하고, 없거나 stale 이면 fetcher 로 조회 후 저장"""
        cached = await self.get(key)
        if cached is not None:
            self.metrics.hit_count += 1
            self.logger.debug(f"캐시 히트: {key}")
            return cached

        self.metrics.miss_count += 1
        value = await fetcher()
        if value is not None:
            await self.set(key, value, ttl)
            self.logger.debug(f"캐시 저장: {key}")
        return value

    def _purge_expired(self) -> None:
        """gc_time 이 지난 항목 제거"""
        now = self._clock()
        expired = [
            key
            for key, (_, gc_until, _) in self._entries.items()
            if now > gc_until
        ]
        for key in expired:
            del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)
