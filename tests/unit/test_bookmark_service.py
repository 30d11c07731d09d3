"""
북마크 서비스 테스트 (메모리 SQLite)
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from sqlalchemy import event

from app.core.async_database import AsyncDatabaseManager
from app.core.error_handling import (
    BookmarkConflictError,
    DatabaseError,
    UserNotFoundError,
    ValidationError,
)
from app.models import Bookmark, User
from app.services.bookmark_service import BookmarkService
from config.settings import DatabaseConfig

CLERK_ID = "user_2abcDEF123"


@pytest.fixture
def service():
    return BookmarkService()


@pytest.fixture
async def user(db_session):
    user = User(clerk_id=CLERK_ID, name="테스트 사용자")
    db_session.add(user)
    await db_session.commit()
    return user


class TestResolveUser:
    """외부 사용자 ID 변환 테스트"""

    @pytest.mark.asyncio
    async def test_clerk_id_resolved(self, service, db_session, user):
        assert await service.resolve_user_id(CLERK_ID, db_session) == user.id

    @pytest.mark.asyncio
    async def test_uuid_used_as_is(self, service, db_session):
        uuid_value = "3f2504e0-4f89-11d3-9a0c-0305e82c3301"
        assert await service.resolve_user_id(uuid_value, db_session) == uuid_value

    @pytest.mark.asyncio
    async def test_uppercase_uuid_normalized(self, service, db_session):
        resolved = await service.resolve_user_id("3F2504E0-4F89-11D3-9A0C-0305E82C3301", db_session)
        assert resolved == "3f2504e0-4f89-11d3-9a0c-0305e82c3301"

    @pytest.mark.asyncio
    async def test_uppercase_uuid_finds_own_bookmarks(self, service, db_session, user):
        await service.add_bookmark(CLERK_ID, "126508", db_session)

        assert await service.is_bookmarked(user.id.upper(), "126508", db_session)

    @pytest.mark.asyncio
    async def test_unknown_user(self, service, db_session):
        with pytest.raises(UserNotFoundError):
            await service.resolve_user_id("user_unknown", db_session)


class TestBookmarkService:
    """북마크 CRUD 테스트"""

    @pytest.mark.asyncio
    async def test_add_bookmark(self, service, db_session, user):
        bookmark = await service.add_bookmark(CLERK_ID, "126508", db_session)

        assert bookmark.id
        assert bookmark.user_id == user.id
        assert bookmark.content_id == "126508"
        assert bookmark.created_at is not None

    @pytest.mark.asyncio
    async def test_duplicate_bookmark_conflict(self, service, db_session, user):
        await service.add_bookmark(CLERK_ID, "126508", db_session)

        with pytest.raises(BookmarkConflictError) as exc_info:
            await service.add_bookmark(CLERK_ID, "126508", db_session)

        assert exc_info.value.user_message == "이미 북마크한 관광지입니다."
        assert exc_info.value.http_status == 409
        # 충돌 이후에도 세션은 계속 사용 가능
        assert await service.is_bookmarked(CLERK_ID, "126508", db_session)

    @pytest.mark.asyncio
    async def test_same_content_for_different_users(self, service, db_session, user):
        other = User(clerk_id="user_other", name="다른 사용자")
        db_session.add(other)
        await db_session.commit()

        await service.add_bookmark(CLERK_ID, "126508", db_session)
        await service.add_bookmark("user_other", "126508", db_session)

        assert len(await service.get_bookmarks("user_other", db_session)) == 1

    @pytest.mark.asyncio
    async def test_empty_content_id(self, service, db_session, user):
        with pytest.raises(ValidationError):
            await service.add_bookmark(CLERK_ID, " ", db_session)

    @pytest.mark.asyncio
    async def test_bookmarks_ordered_newest_first(self, service, db_session, user):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        for offset, content_id in enumerate(["A", "B", "C"]):
            db_session.add(
                Bookmark(
                    user_id=user.id,
                    content_id=content_id,
                    created_at=base + timedelta(days=offset),
                )
            )
        await db_session.commit()

        bookmarks = await service.get_bookmarks(CLERK_ID, db_session)

        assert [b.content_id for b in bookmarks] == ["C", "B", "A"]

    @pytest.mark.asyncio
    async def test_remove_by_content(self, service, db_session, user):
        await service.add_bookmark(CLERK_ID, "126508", db_session)

        removed = await service.remove_bookmark(
            db_session, external_user_id=CLERK_ID, content_id="126508"
        )

        assert removed
        assert not await service.is_bookmarked(CLERK_ID, "126508", db_session)

    @pytest.mark.asyncio
    async def test_remove_by_id(self, service, db_session, user):
        bookmark = await service.add_bookmark(CLERK_ID, "126508", db_session)

        assert await service.remove_bookmark(db_session, bookmark_id=bookmark.id)
        assert not await service.remove_bookmark(db_session, bookmark_id=bookmark.id)

    @pytest.mark.asyncio
    async def test_remove_by_id_scoped_to_user(self, service, db_session, user):
        bookmark = await service.add_bookmark(CLERK_ID, "126508", db_session)
        other = User(clerk_id="user_other")
        db_session.add(other)
        await db_session.commit()

        removed = await service.remove_bookmark(
            db_session, bookmark_id=bookmark.id, external_user_id="user_other"
        )

        assert not removed
        assert await service.is_bookmarked(CLERK_ID, "126508", db_session)

    @pytest.mark.asyncio
    async def test_remove_requires_identifier(self, service, db_session):
        with pytest.raises(ValidationError):
            await service.remove_bookmark(db_session, external_user_id=CLERK_ID)

    @pytest.mark.asyncio
    async def test_bookmark_status(self, service, db_session, user):
        await service.add_bookmark(CLERK_ID, "1", db_session)
        await service.add_bookmark(CLERK_ID, "3", db_session)

        status = await service.get_bookmark_status(CLERK_ID, ["1", "2", "3"], db_session)

        assert status == {"1": True, "2": False, "3": True}

    @pytest.mark.asyncio
    async def test_bookmark_status_empty_input(self, service, db_session):
        # 사용자 조회 없이 빈 결과
        assert await service.get_bookmark_status("user_unknown", [], db_session) == {}


@pytest.fixture
async def fk_session():
    """외래 키 제약을 적용한 메모리 SQLite 세션"""
    manager = AsyncDatabaseManager(DatabaseConfig(url="sqlite+aiosqlite:///:memory:"))

    @event.listens_for(manager.engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    await manager.create_tables()
    async with manager.get_session() as session:
        yield session
    await manager.close()


class TestIntegrityErrors:
    """무결성 오류 분류 테스트"""

    @pytest.mark.asyncio
    async def test_unknown_uuid_user_is_not_conflict(self, service, fk_session):
        with pytest.raises(UserNotFoundError) as exc_info:
            await service.add_bookmark(
                "3f2504e0-4f89-11d3-9a0c-0305e82c3301", "126508", fk_session
            )

        assert not isinstance(exc_info.value, BookmarkConflictError)
        assert exc_info.value.http_status == 404

    @pytest.mark.asyncio
    async def test_duplicate_is_conflict_with_foreign_keys(self, service, fk_session):
        user = User(clerk_id=CLERK_ID)
        fk_session.add(user)
        await fk_session.commit()

        await service.add_bookmark(CLERK_ID, "126508", fk_session)
        with pytest.raises(BookmarkConflictError):
            await service.add_bookmark(CLERK_ID, "126508", fk_session)

    @pytest.mark.asyncio
    async def test_other_integrity_error_is_database_error(self, service, fk_session):
        user = User(clerk_id=CLERK_ID)
        fk_session.add(user)
        await fk_session.commit()
        first = await service.add_bookmark(CLERK_ID, "126508", fk_session)

        fk_session.expunge(first)

        # 같은 기본 키로 다른 관광지를 추가하면 (user_id, content_id) 와 무관한 제약 위반
        with patch(
            "app.services.bookmark_service.Bookmark",
            lambda **kwargs: Bookmark(id=first.id, **kwargs),
        ):
            with pytest.raises(DatabaseError) as exc_info:
                await service.add_bookmark(CLERK_ID, "2750143", fk_session)

        assert not isinstance(exc_info.value, BookmarkConflictError)
