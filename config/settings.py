"""
애플리케이션 설정 관리 모듈

환경 변수와 설정 값들을 중앙에서 관리합니다.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# 환경 변수 로드
load_dotenv()


@dataclass
class DatabaseConfig:
    """데이터베이스 설정"""

    url: str
    echo: bool = False
    pool_size: int = 5
    max_overflow: int = 10


@dataclass
class TourAPIConfig:
    """관광 API 설정"""

    service_key: str
    base_url: str
    pet_service_key: str = ""
    timeout: int = 30
    retry_count: int = 3
    retry_delay_seconds: float = 1.0

    def get_pet_service_key(self) -> str:
        """반려동물 API 키 (미설정 시 일반 키 사용)"""
        return self.pet_service_key or self.service_key


@dataclass
class CacheConfig:
    """쿼리 캐시 설정"""

    redis_url: Optional[str] = None
    stale_time_seconds: int = 60  # 1분
    gc_time_seconds: int = 300  # 5분
    stats_revalidate_seconds: int = 3600  # 1시간


@dataclass
class LoggingConfig:
    """로깅 설정"""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_prefix: str = "mytrip"
    log_dir: str = "logs"
    max_bytes: int = 10485760  # 10MB
    backup_count: int = 5


@dataclass
class AppSettings:
    """전체 애플리케이션 설정"""

    debug: bool
    environment: str
    site_url: str
    database: DatabaseConfig
    tour_api: TourAPIConfig
    cache: CacheConfig
    logging: LoggingConfig


def _first_env(*names: str) -> str:
    """여러 환경 변수 중 처음으로 값이 있는 것을 반환"""
    for name in names:
        value = os.getenv(name, "").strip()
        if value:
            return value
    return ""


def get_database_config() -> DatabaseConfig:
    """데이터베이스 설정 조회"""
    return DatabaseConfig(
        url=os.getenv(
            "DATABASE_URL", "postgresql+asyncpg://postgres:@localhost:5432/mytrip"
        ),
        echo=os.getenv("DB_ECHO", "False").lower() == "true",
        pool_size=int(os.getenv("DB_POOL_SIZE", "5")),
        max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "10")),
    )


def get_tour_api_config() -> TourAPIConfig:
    """관광 API 설정 조회"""
    return TourAPIConfig(
        service_key=_first_env("TOUR_API_KEY", "NEXT_PUBLIC_TOUR_API_KEY"),
        pet_service_key=_first_env(
            "TOUR_PET_API_KEY", "NEXT_PUBLIC_TOUR_PET_API_KEY"
        ),
        base_url=os.getenv(
            "TOUR_API_BASE_URL", "https://apis.data.go.kr/B551011/KorService2"
        ),
        timeout=int(os.getenv("TOUR_API_TIMEOUT", "30")),
        retry_count=int(os.getenv("TOUR_API_RETRY_COUNT", "3")),
        retry_delay_seconds=float(os.getenv("TOUR_API_RETRY_DELAY", "1.0")),
    )


def get_cache_config() -> CacheConfig:
    """캐시 설정 조회"""
    return CacheConfig(
        redis_url=os.getenv("REDIS_URL") or None,
        stale_time_seconds=int(os.getenv("QUERY_STALE_TIME", "60")),
        gc_time_seconds=int(os.getenv("QUERY_GC_TIME", "300")),
        stats_revalidate_seconds=int(os.getenv("STATS_REVALIDATE", "3600")),
    )


def get_logging_config() -> LoggingConfig:
    """로깅 설정 조회"""
    return LoggingConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format=os.getenv(
            "LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ),
        file_prefix=os.getenv("LOG_FILE_PREFIX", "mytrip"),
        log_dir=os.getenv("LOG_DIR", "logs"),
        max_bytes=int(os.getenv("LOG_MAX_BYTES", "10485760")),
        backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
    )


def get_app_settings() -> AppSettings:
    """전체 애플리케이션 설정 조회"""
    return AppSettings(
        debug=os.getenv("DEBUG", "False").lower() == "true",
        environment=os.getenv("ENVIRONMENT", "development"),
        site_url=_first_env("SITE_URL", "NEXT_PUBLIC_SITE_URL") or "https://example.com",
        database=get_database_config(),
        tour_api=get_tour_api_config(),
        cache=get_cache_config(),
        logging=get_logging_config(),
    )


# 전역 설정 인스턴스
settings = get_app_settings()
