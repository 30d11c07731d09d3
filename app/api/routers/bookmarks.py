"""
북마크 API 라우터
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.api.auth import require_user
from app.api.dependencies import get_bookmark_service, get_db
from app.api.schemas import (
    BookmarkCreateRequest,
    BookmarkDeleteResponse,
    BookmarkListResponse,
    BookmarkResponse,
    BookmarkStatusResponse,
)
from app.services.bookmark_service import BookmarkService

router = APIRouter()


@router.get("/bookmarks", response_model=BookmarkListResponse)
async def list_bookmarks(
    user_id: str = Depends(require_user),
    service: BookmarkService = Depends(get_bookmark_service),
    db: AsyncSession = Depends(get_db),
):
    """내 북마크 목록 (최근 추가 순)"""
    bookmarks = await service.get_bookmarks(user_id, db)
    return BookmarkListResponse(
        bookmarks=[BookmarkResponse.model_validate(b) for b in bookmarks],
        total=len(bookmarks),
    )


@router.post("/bookmarks", response_model=BookmarkResponse, status_code=201)
async def add_bookmark(
    request: BookmarkCreateRequest,
    user_id: str = Depends(require_user),
    service: BookmarkService = Depends(get_bookmark_service),
    db: AsyncSession = Depends(get_db),
):
    """북마크 추가 (이미 있으면 409)"""
    bookmark = await service.add_bookmark(user_id, request.content_id, db)
    return BookmarkResponse.model_validate(bookmark)


@router.get("/bookmarks/status", response_model=BookmarkStatusResponse)
async def get_bookmark_status(
    content_ids: List[str] = Query([]),
    user_id: str = Depends(require_user),
    service: BookmarkService = Depends(get_bookmark_service),
    db: AsyncSession = Depends(get_db),
):
    """여러 관광지의 북마크 여부"""
    status = await service.get_bookmark_status(user_id, content_ids, db)
    return BookmarkStatusResponse(status=status)


@router.delete("/bookmarks/id/{bookmark_id}", response_model=BookmarkDeleteResponse)
async def remove_bookmark_by_id(
    bookmark_id: str,
    user_id: str = Depends(require_user),
    service: BookmarkService = Depends(get_bookmark_service),
    db: AsyncSession = Depends(get_db),
):
    """북마크 ID 로 삭제"""
    deleted = await service.remove_bookmark(
        db, bookmark_id=bookmark_id, external_user_id=user_id
    )
    return BookmarkDeleteResponse(deleted=deleted)


@router.delete("/bookmarks/{content_id}", response_model=BookmarkDeleteResponse)
async def remove_bookmark(
    content_id: str,
    user_id: str = Depends(require_user),
    service: BookmarkService = Depends(get_bookmark_service),
    db: AsyncSession = Depends(get_db),
):
    """관광지 ID 로 내 북마크 삭제"""
    deleted = await service.remove_bookmark(
        db, external_user_id=user_id, content_id=content_id
    )
    return BookmarkDeleteResponse(deleted=deleted)
