"""
MyTrip API Server

한국관광공사 관광정보 조회, 북마크, 통계를 제공하는 REST API 서버
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from app.api.routers import bookmarks, stats, tours
from app.api.config import settings
from app.api.schemas import HealthResponse
from app.collectors.tour_api_client import TourAPIClient
from app.core.async_database import AsyncDatabaseManager
from app.core.error_handling import MyTripError, handle_exception
from app.core.logger import setup_logging
from app.core.query_cache import QueryCache
from app.services.bookmark_service import BookmarkService
from app.services.stats_service import StatsService
from app.services.tour_service import TourService
from app.utils.seo import build_robots_txt, build_sitemap_xml
from config.settings import get_app_settings
import uvicorn
import logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 생명주기 관리"""
    app_settings = get_app_settings()
    setup_logging(app_settings.logging)

    # 시작 시
    logger.info(f"🚀 MyTrip API 시작 - Port: {settings.PORT}")
    logger.info(f"환경: {settings.ENVIRONMENT}")

    query_cache = QueryCache(
        stale_time=app_settings.cache.stale_time_seconds,
        gc_time=app_settings.cache.gc_time_seconds,
        redis_url=app_settings.cache.redis_url,
    )
    await query_cache.start()

    tour_client = TourAPIClient(app_settings.tour_api)
    await tour_client.start()

    db_manager = AsyncDatabaseManager(app_settings.database)
    if settings.CREATE_TABLES_ON_STARTUP:
        await db_manager.create_tables()

    app.state.site_url = app_settings.site_url
    app.state.query_cache = query_cache
    app.state.tour_client = tour_client
    app.state.db_manager = db_manager
    app.state.tour_service = TourService(tour_client, query_cache, app_settings.cache)
    app.state.stats_service = StatsService(tour_client)
    app.state.bookmark_service = BookmarkService()

    try:
        yield
    finally:
        # 종료 시
        logger.info("MyTrip API 종료")
        await tour_client.close()
        await query_cache.close()
        await db_manager.close()


# FastAPI 앱 생성
app = FastAPI(
    title="MyTrip API",
    description="한국관광공사 관광정보 조회, 북마크, 통계 API",
    version=settings.VERSION,
    lifespan=lifespan
)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,
)

# 라우터 등록
app.include_router(tours.router, prefix="/api", tags=["tours"])
app.include_router(bookmarks.router, prefix="/api", tags=["bookmarks"])
app.include_router(stats.router, prefix="/api", tags=["stats"])


@app.exception_handler(MyTripError)
async def mytrip_error_handler(request: Request, exc: MyTripError):
    """프로젝트 예외를 JSON 응답으로 변환"""
    if exc.http_status >= 500:
        logger.error(f"[{exc.error_code}] {request.url.path}: {exc.message}")
    else:
        logger.warning(f"[{exc.error_code}] {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """처리되지 않은 예외를 JSON 응답으로 변환"""
    error = handle_exception(exc)
    logger.error(f"처리되지 않은 예외: {request.url.path} - {exc!r}")
    return JSONResponse(status_code=error.http_status, content=error.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """HTTP 예외 응답 (404 는 JSON 안내 메시지)"""
    if exc.status_code == 404:
        return JSONResponse(
            status_code=404,
            content={
                "error": "MT_NOT_FOUND",
                "message": "요청하신 페이지를 찾을 수 없습니다.",
                "details": {"path": request.url.path},
            },
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.get("/")
async def root():
    return {
        "message": "MyTrip API",
        "version": settings.VERSION,
        "status": "running"
    }


@app.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    return HealthResponse(
        status="healthy",
        service=settings.SERVICE_NAME,
        version=settings.VERSION,
        cache_hit_rate=request.app.state.query_cache.metrics.hit_rate,
    )


@app.get("/robots.txt", response_class=PlainTextResponse)
async def robots_txt(request: Request):
    return build_robots_txt(request.app.state.site_url)


@app.get("/sitemap.xml")
async def sitemap_xml(request: Request):
    return Response(
        content=build_sitemap_xml(request.app.state.site_url),
        media_type="application/xml",
    )


if __name__ == "__main__":
    uvicorn.run(
        "app.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
