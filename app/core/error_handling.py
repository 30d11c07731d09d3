"""
통합 오류 처리 프레임워크

프로젝트 전체에서 일관된 오류 처리와 로깅을 제공합니다.
"""

import asyncio
import logging
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorSeverity(Enum):
    """오류 심각도 수준"""

    CRITICAL = "critical"  # 시스템 중단 수준
    HIGH = "high"  # 주요 기능 영향
    MEDIUM = "medium"  # 일부 기능 영향
    LOW = "low"  # 경미한 문제


class ErrorCategory(Enum):
    """오류 카테고리"""

    API_ERROR = "api"  # 외부 API 응답 오류
    DATABASE_ERROR = "database"  # 데이터베이스 관련
    NETWORK_ERROR = "network"  # 네트워크 관련
    VALIDATION_ERROR = "validation"  # 입력 검증 관련
    CONFIGURATION_ERROR = "config"  # 설정 관련
    BUSINESS_LOGIC_ERROR = "business"  # 비즈니스 로직 관련
    SYSTEM_ERROR = "system"  # 시스템 관련


@dataclass
class ErrorContext:
    """오류 컨텍스트 정보"""

    operation: str = ""
    parameters: Dict[str, Any] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환 (JSON 직렬화용)"""
        return {
            "operation": self.operation,
            "parameters": sanitize_parameters(self.parameters),
            "metadata": self.metadata,
            "timestamp": self.timestamp.isoformat(),
        }


SENSITIVE_KEYS = {"servicekey", "api_key", "apikey", "password", "token", "secret"}


def sanitize_parameters(params: Dict[str, Any]) -> Dict[str, Any]:
    """민감 정보 제거"""
    sanitized = {}
    for key, value in params.items():
        if any(sensitive in key.lower() for sensitive in SENSITIVE_KEYS):
            if isinstance(value, str) and len(value) > 6:
                sanitized[key] = f"{value[:3]}***{value[-3:]}"
            else:
                sanitized[key] = "***"
        else:
            sanitized[key] = value
    return sanitized


class MyTripError(Exception):
    """프로젝트 기본 예외 클래스"""

    default_code = "MT_UNKNOWN"
    default_user_message = "알 수 없는 오류가 발생했습니다. 잠시 후 다시 시도해주세요."
    http_status = 500

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        category: ErrorCategory = ErrorCategory.SYSTEM_ERROR,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.cause = cause
        self.user_message = user_message or self.default_user_message

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환"""
        return {
            "error": self.error_code,
            "message": self.user_message,
            "details": {
                "category": self.category.value,
                "reason": self.message,
                "context": self.context.to_dict(),
            },
        }


# ========== 특화된 예외 클래스들 ==========


class ConfigurationError(MyTripError):
    """설정 관련 오류 (API 키 미설정 등)"""

    default_code = "MT_CONFIG_ERROR"
    default_user_message = (
        "관광지 데이터를 불러오려면 API 키가 필요합니다. "
        ".env 파일에 TOUR_API_KEY를 설정해주세요."
    )
    http_status = 503

    def __init__(self, message: str, config_key: str = "", **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION_ERROR,
            severity=ErrorSeverity.HIGH,
            **kwargs,
        )
        self.config_key = config_key
        self.context.metadata.update({"config_key": config_key})


class NetworkError(MyTripError):
    """네트워크 관련 오류"""

    default_code = "MT_NETWORK_ERROR"
    default_user_message = (
        "네트워크 오류가 발생했습니다. 인터넷 연결을 확인하고 다시 시도해주세요."
    )
    http_status = 502

    def __init__(
        self,
        message: str,
        url: str = "",
        status_code: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(message, category=ErrorCategory.NETWORK_ERROR, **kwargs)
        self.url = url
        self.status_code = status_code
        self.context.metadata.update({"url": url, "status_code": status_code})


class UpstreamAPIError(MyTripError):
    """외부 API 응답 오류 (resultCode != 0000)"""

    default_code = "MT_UPSTREAM_ERROR"
    default_user_message = (
        "관광지 정보를 가져오는 중 오류가 발생했습니다. 잠시 후 다시 시도해주세요."
    )
    http_status = 502

    def __init__(
        self, message: str, result_code: str = "", result_msg: str = "", **kwargs
    ):
        super().__init__(message, category=ErrorCategory.API_ERROR, **kwargs)
        self.result_code = result_code
        self.result_msg = result_msg
        self.context.metadata.update(
            {"result_code": result_code, "result_msg": result_msg}
        )


class ValidationError(MyTripError):
    """입력 검증 관련 오류"""

    default_code = "MT_VALIDATION_ERROR"
    default_user_message = "요청 값이 올바르지 않습니다."
    http_status = 400

    def __init__(
        self, message: str, field_name: str = "", field_value: Any = None, **kwargs
    ):
        kwargs.setdefault("user_message", message)
        super().__init__(
            message,
            category=ErrorCategory.VALIDATION_ERROR,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.field_name = field_name
        self.field_value = field_value
        self.context.metadata.update(
            {
                "field_name": field_name,
                "field_value": str(field_value)[:100] if field_value else None,
            }
        )


class InvalidCoordinateError(ValidationError):
    """좌표 값 오류"""

    default_code = "MT_INVALID_COORDINATE"


class NotFoundError(MyTripError):
    """리소스 없음"""

    default_code = "MT_NOT_FOUND"
    default_user_message = "요청하신 정보를 찾을 수 없습니다."
    http_status = 404

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("user_message", message)
        super().__init__(
            message, category=ErrorCategory.BUSINESS_LOGIC_ERROR, **kwargs
        )


class UserNotFoundError(NotFoundError):
    """인증 ID에 대응하는 사용자가 없음"""

    default_code = "MT_USER_NOT_FOUND"


class BookmarkConflictError(MyTripError):
    """이미 북마크한 관광지"""

    default_code = "MT_BOOKMARK_CONFLICT"
    default_user_message = "이미 북마크한 관광지입니다."
    http_status = 409

    def __init__(self, user_id: str, content_id: str, **kwargs):
        super().__init__(
            f"이미 북마크한 관광지입니다. (user_id={user_id}, content_id={content_id})",
            category=ErrorCategory.BUSINESS_LOGIC_ERROR,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.user_id = user_id
        self.content_id = content_id


class DatabaseError(MyTripError):
    """데이터베이스 관련 오류"""

    default_code = "MT_DB_ERROR"
    default_user_message = "데이터 처리 중 오류가 발생했습니다. 잠시 후 다시 시도해주세요."

    def __init__(self, message: str, table_name: str = "", **kwargs):
        super().__init__(
            message,
            category=ErrorCategory.DATABASE_ERROR,
            severity=ErrorSeverity.HIGH,
            **kwargs,
        )
        self.table_name = table_name
        self.context.metadata.update({"table_name": table_name})


# ========== 오류 처리 유틸리티 ==========


class RetryConfig:
    """재시도 설정 (고정 지연)"""

    def __init__(
        self,
        max_retries: int = 3,
        delay_seconds: float = 1.0,
        retry_on: tuple = (Exception,),
        stop_on: tuple = (ConfigurationError,),
    ):
        self.max_retries = max_retries
        self.delay_seconds = delay_seconds
        self.retry_on = retry_on
        self.stop_on = stop_on

    @property
    def max_attempts(self) -> int:
        """최초 시도를 포함한 전체 시도 횟수"""
        return self.max_retries + 1


async def retry_async(
    func: Callable[..., Awaitable[T]],
    retry_config: Optional[RetryConfig] = None,
    *args,
    **kwargs,
) -> T:
    """비동기 함수를 고정 지연으로 재시도하며 실행"""
    if retry_config is None:
        retry_config = RetryConfig()
    func_name = getattr(func, "__name__", repr(func))

    for attempt in range(1, retry_config.max_attempts + 1):
        try:
            return await func(*args, **kwargs)
        except retry_config.stop_on:
            raise
        except retry_config.retry_on as e:
            if attempt == retry_config.max_attempts:
                logger.error(
                    f"재시도 횟수 초과 ({retry_config.max_attempts}회): {func_name} - {e}"
                )
                raise

            remaining = retry_config.max_attempts - attempt
            logger.warning(
                f"재시도 중... (남은 횟수: {remaining}) {func_name} - {e}"
            )
            await asyncio.sleep(retry_config.delay_seconds)

    raise RuntimeError("unreachable")


def handle_exception(
    e: Exception, context: Optional[ErrorContext] = None
) -> MyTripError:
    """일반 예외를 MyTrip 오류로 변환"""
    if isinstance(e, MyTripError):
        return e

    if isinstance(e, (ConnectionError, TimeoutError, asyncio.TimeoutError)):
        return NetworkError(str(e), context=context, cause=e)
    if isinstance(e, ValueError):
        return ValidationError(str(e), context=context, cause=e)
    return MyTripError(str(e), context=context, cause=e)
