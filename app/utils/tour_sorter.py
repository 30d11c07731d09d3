"""
관광지 정렬 유틸리티

정렬 옵션:
1. 최신순 (modified_time 기준 내림차순, 같으면 content_id 오름차순)
2. 이름순 (title 기준 가나다순 오름차순, 대소문자/전각반각 무시, 숫자는 수치 비교)

모든 함수는 입력 목록을 변경하지 않고 새 목록을 반환합니다.
"""

import re
import unicodedata
from typing import List, Sequence, Tuple, Union

from app.models import TourItem
from config.constants import SortOption

_DIGITS = re.compile(r"(\d+)")


def _collation_key(title: str) -> Tuple[Tuple[int, Union[int, str]], ...]:
    """이름순 정렬 키

    NFKC 정규화로 전각/반각을, casefold 로 대소문자를 무시합니다.
    한글 음절은 유니코드 순서가 가나다순과 같습니다.
    """
    normalized = unicodedata.normalize("NFKC", title or "").casefold()
    parts = []
    for chunk in _DIGITS.split(normalized):
        if not chunk:
            continue
        if chunk.isdigit():
            parts.append((0, int(chunk)))
        else:
            parts.append((1, chunk))
    return tuple(parts)


def sort_by_latest(tours: Sequence[TourItem]) -> List[TourItem]:
    """관광지를 최신순으로 정렬"""
    by_id = sorted(tours, key=lambda tour: tour.content_id)
    return sorted(by_id, key=lambda tour: tour.modified_time or "0", reverse=True)


def sort_by_name(tours: Sequence[TourItem]) -> List[TourItem]:
    """관광지를 이름순(가나다순)으로 정렬"""
    return sorted(tours, key=lambda tour: _collation_key(tour.title))


def sort_tours(
    tours: Sequence[TourItem], sort_option: Union[SortOption, str]
) -> List[TourItem]:
    """정렬 옵션에 따라 관광지를 정렬 (알 수 없는 옵션은 최신순)"""
    if sort_option == SortOption.NAME or sort_option == SortOption.NAME.value:
        return sort_by_name(tours)
    return sort_by_latest(tours)
