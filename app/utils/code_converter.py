"""
지역코드 / 콘텐츠타입 변환 유틸리티
"""

from typing import Dict, List

from config.constants import (
    AREA_CODES,
    AREA_NAMES,
    CONTENT_TYPE_IDS,
    CONTENT_TYPE_NAMES,
    UNKNOWN_CODE_NAME,
)


def get_area_name(area_code: str) -> str:
    """지역코드를 지역명으로 변환"""
    return AREA_NAMES.get(area_code, UNKNOWN_CODE_NAME)


def get_tour_type_name(content_type_id: str) -> str:
    """콘텐츠타입 ID 를 타입명으로 변환"""
    return CONTENT_TYPE_NAMES.get(content_type_id, UNKNOWN_CODE_NAME)


def get_area_options() -> List[Dict[str, str]]:
    """지역 필터 옵션 목록"""
    return [{"value": code, "label": get_area_name(code)} for code in AREA_CODES]


def get_tour_type_options() -> List[Dict[str, str]]:
    """관광 타입 필터 옵션 목록"""
    return [
        {"value": type_id, "label": get_tour_type_name(type_id)}
        for type_id in CONTENT_TYPE_IDS
    ]
