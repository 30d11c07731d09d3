"""
MyTrip API Pydantic 스키마
"""

from datetime import datetime
from typing import List, Optional, Dict
from pydantic import BaseModel, ConfigDict, Field

from app.models import LatLng, PageInfo, PetTourInfo, TourDetail, TourItem

# Request 스키마
class BookmarkCreateRequest(BaseModel):
    """북마크 추가 요청"""
    content_id: str = Field(min_length=1)

# Response 스키마
class TourListResponse(BaseModel):
    """관광지 목록 응답"""
    items: List[TourItem]
    page_info: PageInfo
    sort: str
    bookmarked_only: bool = False

class TourDetailResponse(BaseModel):
    """관광지 상세 응답"""
    detail: TourDetail
    coordinates: Optional[LatLng] = None

class PetInfoResponse(BaseModel):
    """반려동물 동반 정보 응답"""
    content_id: str
    pet_info: Optional[PetTourInfo] = None

class BookmarkResponse(BaseModel):
    """북마크 정보"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    content_id: str
    created_at: datetime

class BookmarkListResponse(BaseModel):
    """북마크 목록 응답"""
    bookmarks: List[BookmarkResponse]
    total: int

class BookmarkDeleteResponse(BaseModel):
    """북마크 삭제 응답"""
    deleted: bool

class BookmarkStatusResponse(BaseModel):
    """북마크 여부 응답"""
    status: Dict[str, bool]

class FilterOption(BaseModel):
    """필터 옵션"""
    value: str
    label: str

class FilterOptionsResponse(BaseModel):
    """필터 옵션 목록 응답"""
    areas: List[FilterOption]
    content_types: List[FilterOption]

class HealthResponse(BaseModel):
    """헬스 체크 응답"""
    status: str
    service: str
    version: str
    cache_hit_rate: float
