"""
API 서버 설정
"""

import os
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    """API 설정"""

    # 기본 설정
    SERVICE_NAME: str = "mytrip-api"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # 서버 설정
    HOST: str = os.getenv("API_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("API_PORT", "8000"))

    # CORS 설정
    CORS_ORIGINS: List[str] = ["*"]

    # 인증 헤더 (외부 인증 제공자의 사용자 ID)
    USER_ID_HEADER: str = "X-User-Id"

    # 개발 환경에서 시작 시 테이블 생성
    CREATE_TABLES_ON_STARTUP: bool = (
        os.getenv("CREATE_TABLES_ON_STARTUP", "false").lower() == "true"
    )

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # 추가 환경 변수 무시

settings = Settings()
