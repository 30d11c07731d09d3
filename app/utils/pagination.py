"""
페이지네이션 유틸리티

목록 API 는 전체 페이지 수를 요청하지 않으므로, 호출자가 total_pages 를
주지 않으면 추정값(현재 페이지 * 1.5 올림)을 사용하고, 마지막 페이지 여부는
현재 페이지 항목 수가 페이지 크기보다 작은지로 판단합니다.
"""

import math
from typing import List, Optional

from app.models import PageInfo
from config.constants import MAX_VISIBLE_PAGES


def get_visible_pages(
    current_page: int, total_pages: int, max_visible: int = MAX_VISIBLE_PAGES
) -> List[int]:
    """표시할 페이지 번호 계산"""
    if total_pages <= max_visible:
        # 총 페이지 수가 적으면 모두 표시
        return list(range(1, total_pages + 1))

    # 현재 페이지를 중심으로 표시
    start = max(1, current_page - max_visible // 2)
    end = min(total_pages, start + max_visible - 1)

    # 끝에 도달했을 때 조정
    if end - start < max_visible - 1:
        start = max(1, end - max_visible + 1)

    return list(range(start, end + 1))


def estimate_total_pages(current_page: int) -> int:
    """전체 페이지 수 추정값"""
    return math.ceil(current_page * 1.5)


def is_last_page(current_items_count: int, items_per_page: int) -> bool:
    """현재 항목 수가 페이지 크기보다 적으면 마지막 페이지로 간주"""
    return current_items_count < items_per_page


def build_page_info(
    current_page: int,
    items_per_page: int,
    current_items_count: int,
    total_pages: Optional[int] = None,
    max_visible: int = MAX_VISIBLE_PAGES,
) -> PageInfo:
    """페이지네이션 정보 생성"""
    is_estimated = total_pages is None
    final_total_pages = (
        estimate_total_pages(current_page) if is_estimated else total_pages
    )
    last_page = is_last_page(current_items_count, items_per_page)

    return PageInfo(
        current_page=current_page,
        total_pages=final_total_pages,
        is_total_estimated=is_estimated,
        visible_pages=get_visible_pages(current_page, final_total_pages, max_visible),
        has_previous=current_page > 1,
        has_next=not last_page and current_page < final_total_pages,
        is_last_page=last_page,
    )
