"""
로깅 설정 및 관리 모듈

애플리케이션 전체의 로깅을 중앙에서 관리합니다.
"""

import logging
import logging.handlers
from datetime import datetime
from pathlib import Path
from typing import Optional

from config.settings import LoggingConfig, get_logging_config


class AppLogger:
    """애플리케이션 로거 클래스"""

    def __init__(self, config: Optional[LoggingConfig] = None):
        self.config = config or get_logging_config()
        self.log_dir = Path(self.config.log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self._setup_logging()

    def _setup_logging(self) -> None:
        """로깅 설정"""
        level = getattr(logging, self.config.level, logging.INFO)
        formatter = logging.Formatter(self.config.format)

        # 루트 로거 가져오기
        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.setLevel(level)

        # 콘솔 핸들러
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        # 파일 핸들러 (일반 로그)
        log_file = (
            self.log_dir
            / f"{self.config.file_prefix}_{datetime.now().strftime('%Y%m%d')}.log"
        )
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=self.config.max_bytes,
            backupCount=self.config.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

        # 에러 로그 파일 핸들러
        error_log_file = (
            self.log_dir
            / f"{self.config.file_prefix}_error_{datetime.now().strftime('%Y%m%d')}.log"
        )
        error_handler = logging.handlers.RotatingFileHandler(
            error_log_file,
            maxBytes=self.config.max_bytes,
            backupCount=self.config.backup_count,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        root_logger.addHandler(error_handler)

    def get_logger(self, name: str) -> logging.Logger:
        """특정 이름의 로거 반환"""
        return logging.getLogger(name)


def setup_logging(config: Optional[LoggingConfig] = None) -> AppLogger:
    """애플리케이션 시작 시 로깅 초기화"""
    return AppLogger(config)


def get_logger(name: str) -> logging.Logger:
    """특정 이름의 로거 반환 (편의 함수)"""
    return logging.getLogger(name)


def log_api_call(
    api_name: str,
    endpoint: str,
    status_code: Optional[int] = None,
    duration: Optional[float] = None,
) -> None:
    """API 호출 로그"""
    logger = get_logger("api")
    message = f"API 호출 - {api_name}: {endpoint}"
    if status_code:
        message += f", 상태코드: {status_code}"
    if duration:
        message += f", 응답시간: {duration:.3f}초"
    logger.info(message)


def log_performance_metric(metric_name: str, value: float, unit: str = "") -> None:
    """성능 메트릭 로그"""
    get_logger("performance").info(f"성능 메트릭 - {metric_name}: {value} {unit}")
