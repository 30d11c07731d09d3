"""
API 인증 모듈

인증은 외부 제공자(Clerk)가 담당하고, 검증된 사용자 ID 가 헤더로 전달됩니다.
"""

from typing import Optional

from fastapi import HTTPException, Security
from fastapi.security import APIKeyHeader
from app.api.config import settings

user_id_header = APIKeyHeader(name=settings.USER_ID_HEADER, auto_error=False)


async def require_user(user_id: Optional[str] = Security(user_id_header)) -> str:
    """로그인 사용자 ID 필수"""
    if not user_id or not user_id.strip():
        raise HTTPException(
            status_code=401,
            detail="로그인이 필요합니다",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    return user_id.strip()


async def optional_user(
    user_id: Optional[str] = Security(user_id_header),
) -> Optional[str]:
    """로그인 사용자 ID (없으면 None)"""
    if not user_id or not user_id.strip():
        return None
    return user_id.strip()
