"""
데이터 모델 정의

- SQLAlchemy ORM 모델: 북마크 저장용 users, bookmarks 테이블
- Pydantic 모델: 관광 API 응답을 정규화한 도메인 모델과 통계/페이지 정보
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _uuid_str() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ===========================================
# 사용자 및 북마크 테이블
# ===========================================

class User(Base):
    """
    사용자 정보 테이블
    설명: 외부 인증 제공자(Clerk) ID 와 내부 사용자 ID 매핑
    """
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid_str)
    clerk_id = Column(String, unique=True, index=True, nullable=False)
    name = Column(String)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)


class Bookmark(Base):
    """
    북마크 테이블
    설명: 사용자별 관광지 북마크, (user_id, content_id) 당 최대 1개
    """
    __tablename__ = "bookmarks"
    __table_args__ = (
        UniqueConstraint("user_id", "content_id", name="uq_bookmarks_user_content"),
    )

    id = Column(String(36), primary_key=True, default=_uuid_str)
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    content_id = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)


# ===========================================
# 관광 API 도메인 모델
# ===========================================

class TourItem(BaseModel):
    """관광지 목록 항목 (areaBasedList2 / searchKeyword2)"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    content_id: str = Field(alias="contentid")
    title: str = ""
    content_type_id: str = Field(default="", alias="contenttypeid")
    area_code: str = Field(default="", alias="areacode")
    addr1: str = ""
    addr2: Optional[str] = None
    tel: Optional[str] = None
    first_image: Optional[str] = Field(default=None, alias="firstimage")
    first_image2: Optional[str] = Field(default=None, alias="firstimage2")
    mapx: str = ""
    mapy: str = ""
    modified_time: str = Field(default="", alias="modifiedtime")


class TourDetail(TourItem):
    """관광지 상세 정보 (detailCommon2)"""

    overview: Optional[str] = None
    homepage: Optional[str] = None
    zipcode: Optional[str] = None


class PetTourInfo(BaseModel):
    """반려동물 동반 여행 정보 (detailPetTour2)"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    content_id: str = Field(alias="contentid")
    acmpy_type_cd: Optional[str] = Field(default=None, alias="acmpyTypeCd")
    acmpy_psbl_cpam: Optional[str] = Field(default=None, alias="acmpyPsblCpam")
    acmpy_need_mtr: Optional[str] = Field(default=None, alias="acmpyNeedMtr")
    etc_acmpy_info: Optional[str] = Field(default=None, alias="etcAcmpyInfo")

    @property
    def has_pet_info(self) -> bool:
        return any(
            (
                self.acmpy_type_cd,
                self.acmpy_psbl_cpam,
                self.acmpy_need_mtr,
                self.etc_acmpy_info,
            )
        )


class LatLng(BaseModel):
    """지도 표시용 WGS84 좌표"""

    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float


# ===========================================
# 통계 모델
# ===========================================

class RegionStats(BaseModel):
    """지역별 통계"""

    areacode: str
    name: str
    count: int


class TypeStats(BaseModel):
    """타입별 통계"""

    contenttypeid: str
    name: str
    count: int


class StatsSummary(BaseModel):
    """전체 통계 요약"""

    total_count: int
    top_regions: List[RegionStats]
    top_types: List[TypeStats]
    last_updated: datetime


# ===========================================
# 페이지 정보
# ===========================================

class PageInfo(BaseModel):
    """페이지네이션 정보"""

    current_page: int
    total_pages: int
    is_total_estimated: bool
    visible_pages: List[int]
    has_previous: bool
    has_next: bool
    is_last_page: bool
