"""
관광지 조회 API 라우터
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import logging

from app.api.auth import optional_user
from app.api.dependencies import (
    get_bookmark_service,
    get_db,
    get_tour_service,
)
from app.api.schemas import (
    FilterOptionsResponse,
    PetInfoResponse,
    TourDetailResponse,
    TourListResponse,
)
from app.models import TourItem
from app.services.bookmark_service import BookmarkService
from app.services.tour_service import TourService, apply_list_options
from app.utils.code_converter import get_area_options, get_tour_type_options
from app.utils.pagination import build_page_info
from config.constants import DEFAULT_PAGE_SIZE, SortOption

logger = logging.getLogger(__name__)
router = APIRouter()


async def _build_list_response(
    tours: List[TourItem],
    page: int,
    size: int,
    sort: SortOption,
    bookmarked_only: bool,
    total_pages: Optional[int],
    user_id: Optional[str],
    bookmark_service: BookmarkService,
    db: AsyncSession,
) -> TourListResponse:
    bookmarked_ids = None
    if bookmarked_only:
        if user_id is None:
            raise HTTPException(status_code=401, detail="로그인이 필요합니다")
        bookmarked_ids = await bookmark_service.get_bookmarked_content_ids(user_id, db)

    # 마지막 페이지 판단은 필터 적용 전 조회 건수 기준
    page_info = build_page_info(
        current_page=page,
        items_per_page=size,
        current_items_count=len(tours),
        total_pages=total_pages,
    )
    items = apply_list_options(tours, sort, bookmarked_ids)
    return TourListResponse(
        items=items,
        page_info=page_info,
        sort=sort.value,
        bookmarked_only=bookmarked_only,
    )


@router.get("/tours", response_model=TourListResponse)
async def list_tours(
    area_code: Optional[str] = None,
    content_type_id: Optional[str] = None,
    page: int = Query(1, ge=1),
    size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    sort: SortOption = SortOption.LATEST,
    bookmarked_only: bool = False,
    total_pages: Optional[int] = Query(None, ge=1),
    user_id: Optional[str] = Depends(optional_user),
    tour_service: TourService = Depends(get_tour_service),
    bookmark_service: BookmarkService = Depends(get_bookmark_service),
    db: AsyncSession = Depends(get_db),
):
    """지역/타입 필터 관광지 목록"""
    tours = await tour_service.get_tour_list(
        area_code=area_code,
        content_type_id=content_type_id,
        page=page,
        size=size,
    )
    return await _build_list_response(
        tours, page, size, sort, bookmarked_only, total_pages,
        user_id, bookmark_service, db,
    )


@router.get("/tours/filters", response_model=FilterOptionsResponse)
async def get_filter_options():
    """지역/관광 타입 필터 옵션"""
    return FilterOptionsResponse(
        areas=get_area_options(),
        content_types=get_tour_type_options(),
    )


@router.get("/tours/search", response_model=TourListResponse)
async def search_tours(
    keyword: str = "",
    area_code: Optional[str] = None,
    content_type_id: Optional[str] = None,
    page: int = Query(1, ge=1),
    size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    sort: SortOption = SortOption.LATEST,
    bookmarked_only: bool = False,
    total_pages: Optional[int] = Query(None, ge=1),
    user_id: Optional[str] = Depends(optional_user),
    tour_service: TourService = Depends(get_tour_service),
    bookmark_service: BookmarkService = Depends(get_bookmark_service),
    db: AsyncSession = Depends(get_db),
):
    """키워드 검색"""
    tours = await tour_service.search_tours(
        keyword,
        area_code=area_code,
        content_type_id=content_type_id,
        page=page,
        size=size,
    )
    return await _build_list_response(
        tours, page, size, sort, bookmarked_only, total_pages,
        user_id, bookmark_service, db,
    )


@router.get("/tours/{content_id}", response_model=TourDetailResponse)
async def get_tour_detail(
    content_id: str,
    tour_service: TourService = Depends(get_tour_service),
):
    """관광지 상세 정보 (지도 좌표 포함)"""
    detail = await tour_service.get_tour_detail(content_id)
    return TourDetailResponse(detail=detail, coordinates=tour_service.locate(detail))


@router.get("/tours/{content_id}/pet", response_model=PetInfoResponse)
async def get_tour_pet(
    content_id: str,
    tour_service: TourService = Depends(get_tour_service),
):
    """반려동물 동반 여행 정보 (없으면 pet_info 가 null)"""
    pet_info = await tour_service.get_tour_pet(content_id)
    return PetInfoResponse(content_id=content_id, pet_info=pet_info)
