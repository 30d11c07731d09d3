"""
북마크 관리 서비스

외부 인증 제공자(Clerk) 사용자 ID 또는 내부 UUID 를 받아 users 테이블의
내부 ID 로 변환한 뒤 bookmarks 테이블을 조작합니다.
"""

import re
from typing import Dict, List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.error_handling import (
    BookmarkConflictError,
    DatabaseError,
    UserNotFoundError,
    ValidationError,
)
from app.core.logger import get_logger
from app.models import Bookmark, User

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)

# (user_id, content_id) 유니크 제약 위반 식별자 (PostgreSQL 제약 이름 / SQLite 컬럼 목록)
BOOKMARK_UNIQUE_MARKERS = ("uq_bookmarks_user_content", "bookmarks.user_id, bookmarks.content_id")
FOREIGN_KEY_VIOLATION = "23503"


def _is_bookmark_conflict(error: IntegrityError) -> bool:
    message = str(error.orig)
    return any(marker in message for marker in BOOKMARK_UNIQUE_MARKERS)


def _is_foreign_key_violation(error: IntegrityError) -> bool:
    sqlstate = getattr(error.orig, "sqlstate", None) or getattr(error.orig, "pgcode", None)
    return sqlstate == FOREIGN_KEY_VIOLATION or "FOREIGN KEY constraint failed" in str(error.orig)


class BookmarkService:
    """북마크 관리자"""

    def __init__(self):
        self.logger = get_logger(__name__)

    async def resolve_user_id(self, external_user_id: str, db: AsyncSession) -> str:
        """외부 사용자 ID 를 users.id 로 변환

        UUID 형식이면 이미 내부 ID 로 보고 소문자로 정규화하여 사용합니다.
        """
        if UUID_PATTERN.match(external_user_id):
            return external_user_id.lower()

        result = await db.execute(
            select(User.id).where(User.clerk_id == external_user_id)
        )
        user_id = result.scalar_one_or_none()
        if user_id is None:
            raise UserNotFoundError(
                f"사용자를 찾을 수 없습니다. 먼저 로그인하세요. ({external_user_id})"
            )
        return user_id

    async def add_bookmark(
        self, external_user_id: str, content_id: str, db: AsyncSession
    ) -> Bookmark:
        """북마크 추가"""
        if not content_id or not content_id.strip():
            raise ValidationError("관광지 ID가 필요합니다.", field_name="content_id")

        user_id = await self.resolve_user_id(external_user_id, db)
        bookmark = Bookmark(user_id=user_id, content_id=content_id)

        try:
            db.add(bookmark)
            await db.commit()
            await db.refresh(bookmark)
        except IntegrityError as e:
            await db.rollback()
            if _is_bookmark_conflict(e):
                raise BookmarkConflictError(user_id, content_id, cause=e) from e
            if _is_foreign_key_violation(e):
                raise UserNotFoundError(
                    f"사용자를 찾을 수 없습니다. 먼저 로그인하세요. ({user_id})", cause=e
                ) from e
            self.logger.error(f"북마크 추가 실패 (무결성 오류): {e}")
            raise DatabaseError(
                f"북마크 추가 실패: {e}", table_name="bookmarks", cause=e
            ) from e
        except Exception as e:
            await db.rollback()
            self.logger.error(f"북마크 추가 실패: {e}")
            raise DatabaseError(
                f"북마크 추가 실패: {e}", table_name="bookmarks", cause=e
            ) from e

        self.logger.info(f"북마크 추가 완료: user={user_id}, content={content_id}")
        return bookmark

    async def remove_bookmark(
        self,
        db: AsyncSession,
        bookmark_id: Optional[str] = None,
        external_user_id: Optional[str] = None,
        content_id: Optional[str] = None,
    ) -> bool:
        """북마크 삭제

        bookmark_id 또는 (external_user_id, content_id) 중 하나가 필요합니다.
        bookmark_id 와 사용자 ID 가 함께 오면 해당 사용자의 북마크만 삭제합니다.
        삭제된 행이 있으면 True 를 반환합니다.
        """
        statement = delete(Bookmark)

        if bookmark_id:
            statement = statement.where(Bookmark.id == bookmark_id)
            if external_user_id:
                user_id = await self.resolve_user_id(external_user_id, db)
                statement = statement.where(Bookmark.user_id == user_id)
        elif external_user_id and content_id:
            user_id = await self.resolve_user_id(external_user_id, db)
            statement = statement.where(
                Bookmark.user_id == user_id, Bookmark.content_id == content_id
            )
        else:
            raise ValidationError(
                "북마크 삭제를 위해 id 또는 (user_id, content_id)가 필요합니다."
            )

        try:
            result = await db.execute(statement)
            await db.commit()
        except Exception as e:
            await db.rollback()
            self.logger.error(f"북마크 삭제 실패: {e}")
            raise DatabaseError(
                f"북마크 삭제 실패: {e}", table_name="bookmarks", cause=e
            ) from e

        return result.rowcount > 0

    async def get_bookmarks(
        self, external_user_id: str, db: AsyncSession
    ) -> List[Bookmark]:
        """사용자 북마크 목록 (최근 추가 순)"""
        user_id = await self.resolve_user_id(external_user_id, db)
        result = await db.execute(
            select(Bookmark)
            .where(Bookmark.user_id == user_id)
            .order_by(Bookmark.created_at.desc())
        )
        return list(result.scalars().all())

    async def is_bookmarked(
        self, external_user_id: str, content_id: str, db: AsyncSession
    ) -> bool:
        """특정 관광지 북마크 여부"""
        user_id = await self.resolve_user_id(external_user_id, db)
        result = await db.execute(
            select(Bookmark.id).where(
                Bookmark.user_id == user_id, Bookmark.content_id == content_id
            )
        )
        return result.scalar_one_or_none() is not None

    async def get_bookmark_status(
        self, external_user_id: str, content_ids: Sequence[str], db: AsyncSession
    ) -> Dict[str, bool]:
        """여러 관광지의 북마크 여부를 한 번에 조회"""
        if not content_ids:
            return {}

        user_id = await self.resolve_user_id(external_user_id, db)
        result = await db.execute(
            select(Bookmark.content_id).where(
                Bookmark.user_id == user_id, Bookmark.content_id.in_(list(content_ids))
            )
        )
        bookmarked = set(result.scalars().all())
        return {content_id: content_id in bookmarked for content_id in content_ids}

    async def get_bookmarked_content_ids(
        self, external_user_id: str, db: AsyncSession
    ) -> List[str]:
        """북마크한 관광지 ID 목록 (목록 필터용)"""
        bookmarks = await self.get_bookmarks(external_user_id, db)
        return [bookmark.content_id for bookmark in bookmarks]
