"""
상수 정의 모듈

애플리케이션에서 사용하는 상수들을 정의합니다.
"""

from enum import Enum


class ContentType(Enum):
    """관광 콘텐츠 타입"""

    TOURIST_SPOT = "12"  # 관광지
    CULTURAL_FACILITY = "14"  # 문화시설
    FESTIVAL = "15"  # 축제공연행사
    TRAVEL_COURSE = "25"  # 여행코스
    LEISURE_SPORTS = "28"  # 레포츠
    ACCOMMODATION = "32"  # 숙박
    SHOPPING = "38"  # 쇼핑
    RESTAURANT = "39"  # 음식점


class SortOption(str, Enum):
    """목록 정렬 옵션"""

    LATEST = "latest"
    NAME = "name"


# 지역 코드 -> 지역명
AREA_NAMES = {
    "1": "서울",
    "2": "인천",
    "3": "대전",
    "4": "대구",
    "5": "광주",
    "6": "부산",
    "7": "울산",
    "8": "세종",
    "31": "경기",
    "32": "강원",
    "33": "충북",
    "34": "충남",
    "35": "경북",
    "36": "경남",
    "37": "전북",
    "38": "전남",
    "39": "제주",
}

AREA_CODES = tuple(AREA_NAMES.keys())

# 콘텐츠 타입 ID -> 타입명
CONTENT_TYPE_NAMES = {
    ContentType.TOURIST_SPOT.value: "관광지",
    ContentType.CULTURAL_FACILITY.value: "문화시설",
    ContentType.FESTIVAL.value: "축제/공연/행사",
    ContentType.TRAVEL_COURSE.value: "여행코스",
    ContentType.LEISURE_SPORTS.value: "레포츠",
    ContentType.ACCOMMODATION.value: "숙박",
    ContentType.SHOPPING.value: "쇼핑",
    ContentType.RESTAURANT.value: "음식점",
}

CONTENT_TYPE_IDS = tuple(CONTENT_TYPE_NAMES.keys())

UNKNOWN_CODE_NAME = "기타"

# 한국관광공사 API 공통 파라미터
TOUR_API_COMMON_PARAMS = {
    "MobileOS": "ETC",
    "MobileApp": "MyTrip",
    "_type": "json",
}

# 한국관광공사 API 엔드포인트
TOUR_API_ENDPOINTS = {
    "area_based_list": "areaBasedList2",
    "search_keyword": "searchKeyword2",
    "detail_common": "detailCommon2",
    "detail_pet_tour": "detailPetTour2",
}

TOUR_API_SUCCESS_CODE = "0000"

# 목록 조회 기본값
DEFAULT_PAGE_SIZE = 10
MAX_VISIBLE_PAGES = 5
TOP_N_STATS = 3

# 좌표 스케일 (KATEC 정수형 문자열 -> 미터)
COORDINATE_SCALE_FACTOR = 10_000_000
