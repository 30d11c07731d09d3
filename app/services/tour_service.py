"""
관광지 조회 서비스

목록/검색/상세/반려동물 정보를 조회합니다. 목록/검색/상세는 오류를
사용자용 메시지로 변환하여 전파하고, 반려동물 정보는 부가 정보이므로
모든 오류를 경고 로그로 남기고 None 을 반환합니다.
"""

from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError as ResponseFormatError

from app.collectors.tour_api_client import TourAPIClient
from app.core.error_handling import (
    ErrorContext,
    InvalidCoordinateError,
    MyTripError,
    NotFoundError,
    UpstreamAPIError,
    ValidationError,
    handle_exception,
)
from app.core.logger import get_logger
from app.core.query_cache import QueryCache
from app.models import LatLng, PetTourInfo, TourDetail, TourItem
from app.services.coordinate_converter import convert_tour_coordinates
from app.utils.tour_sorter import sort_tours
from config.constants import DEFAULT_PAGE_SIZE, SortOption
from config.settings import CacheConfig, get_cache_config

SEARCH_ERROR_MESSAGE = (
    "관광지 정보를 검색하는 중 오류가 발생했습니다. 잠시 후 다시 시도해주세요."
)


def apply_list_options(
    tours: Iterable[TourItem],
    sort_option: Union[SortOption, str] = SortOption.LATEST,
    bookmarked_ids: Optional[Iterable[str]] = None,
) -> List[TourItem]:
    """북마크 필터와 정렬 적용

    bookmarked_ids 가 주어지면 해당 관광지만 남깁니다 (현재 페이지 기준).
    """
    if bookmarked_ids is not None:
        allowed = set(bookmarked_ids)
        tours = [tour for tour in tours if tour.content_id in allowed]
    return sort_tours(list(tours), sort_option)


class TourService:
    """관광지 조회 서비스"""

    def __init__(
        self,
        client: TourAPIClient,
        cache: QueryCache,
        cache_config: Optional[CacheConfig] = None,
    ):
        self.client = client
        self.cache = cache
        self.cache_config = cache_config or get_cache_config()
        self.logger = get_logger(__name__)

    async def _cached(
        self,
        namespace: str,
        params: Dict[str, Any],
        fetcher: Callable[[], Awaitable[Any]],
    ) -> Any:
        key = QueryCache.make_key(namespace, params)
        return await self.cache.get_or_fetch(
            key, fetcher, ttl=self.cache_config.stale_time_seconds
        )

    async def get_tour_list(
        self,
        area_code: Optional[str] = None,
        content_type_id: Optional[str] = None,
        page: int = 1,
        size: int = DEFAULT_PAGE_SIZE,
    ) -> List[TourItem]:
        """지역/타입 필터 관광지 목록"""
        params = {
            "area_code": area_code,
            "content_type_id": content_type_id,
            "page": page,
            "size": size,
        }
        try:
            items = await self._cached(
                "tour_list",
                params,
                lambda: self.client.get_area_based_list(
                    area_code=area_code,
                    content_type_id=content_type_id,
                    num_of_rows=size,
                    page_no=page,
                ),
            )
            return [TourItem.model_validate(item) for item in items]
        except ResponseFormatError as e:
            raise self._invalid_response(e, "get_tour_list", params) from e
        except Exception as e:
            error = self._to_error(e, "get_tour_list", params)
            if error is e:
                raise
            raise error from e

    async def search_tours(
        self,
        keyword: str,
        area_code: Optional[str] = None,
        content_type_id: Optional[str] = None,
        page: int = 1,
        size: int = DEFAULT_PAGE_SIZE,
    ) -> List[TourItem]:
        """키워드 검색"""
        if not keyword or not keyword.strip():
            raise ValidationError("검색 키워드를 입력해주세요.", field_name="keyword")

        keyword = keyword.strip()
        params = {
            "keyword": keyword,
            "area_code": area_code,
            "content_type_id": content_type_id,
            "page": page,
            "size": size,
        }
        try:
            items = await self._cached(
                "tour_search",
                params,
                lambda: self.client.search_keyword(
                    keyword,
                    area_code=area_code,
                    content_type_id=content_type_id,
                    num_of_rows=size,
                    page_no=page,
                ),
            )
            return [TourItem.model_validate(item) for item in items]
        except ResponseFormatError as e:
            error = self._invalid_response(e, "search_tours", params)
            error.user_message = SEARCH_ERROR_MESSAGE
            raise error from e
        except UpstreamAPIError as e:
            e.user_message = SEARCH_ERROR_MESSAGE
            raise
        except Exception as e:
            error = self._to_error(e, "search_tours", params)
            if error is e:
                raise
            raise error from e

    async def get_tour_detail(self, content_id: str) -> TourDetail:
        """관광지 상세 정보"""
        if not content_id or not content_id.strip():
            raise ValidationError("관광지 ID가 필요합니다.", field_name="content_id")

        content_id = content_id.strip()
        try:
            item = await self._cached(
                "tour_detail",
                {"content_id": content_id},
                lambda: self.client.get_detail_common(content_id),
            )
            detail = TourDetail.model_validate(item) if item is not None else None
        except ResponseFormatError as e:
            raise self._invalid_response(e, "get_tour_detail", {"content_id": content_id}) from e
        except Exception as e:
            error = self._to_error(e, "get_tour_detail", {"content_id": content_id})
            if error is e:
                raise
            raise error from e

        if detail is None:
            raise NotFoundError(f"관광지 정보를 찾을 수 없습니다. (contentId: {content_id})")
        return detail

    def locate(self, tour: TourItem) -> Optional[LatLng]:
        """지도 표시용 좌표 (좌표가 없거나 잘못되면 None)"""
        if not tour.mapx or not tour.mapy:
            return None
        try:
            return convert_tour_coordinates(tour.mapx, tour.mapy)
        except InvalidCoordinateError as e:
            self.logger.warning(f"좌표 변환 실패: {tour.content_id} - {e.message}")
            return None

    async def get_tour_pet(self, content_id: str) -> Optional[PetTourInfo]:
        """반려동물 동반 여행 정보 (없거나 실패하면 None)"""
        if not content_id or not content_id.strip():
            self.logger.warning(f"관광지 ID가 없음: {content_id!r}")
            return None

        content_id = content_id.strip()
        try:
            item = await self._cached(
                "tour_pet",
                {"content_id": content_id},
                lambda: self.client.get_detail_pet_tour(content_id),
            )
            if item is None:
                return None
            return PetTourInfo.model_validate(item)
        except MyTripError as e:
            self.logger.warning(
                f"반려동물 정보 조회 실패: {content_id} - [{e.error_code}] {e.message}"
            )
            return None
        except Exception as e:
            self.logger.warning(f"반려동물 정보 조회 중 예상치 못한 오류: {content_id} - {e}")
            return None

    def _to_error(
        self, e: Exception, operation: str, params: Dict[str, Any]
    ) -> MyTripError:
        error = handle_exception(e, ErrorContext(operation=operation, parameters=params))
        self.logger.error(f"{operation} 실패: [{error.error_code}] {error.message}")
        return error

    def _invalid_response(
        self, e: ResponseFormatError, operation: str, params: Dict[str, Any]
    ) -> UpstreamAPIError:
        """응답 항목 형식 오류 (필수 필드 누락 등)"""
        self.logger.error(f"{operation} 응답 형식 오류: {e.error_count()}건")
        return UpstreamAPIError(
            f"API 응답 형식 오류: {e}",
            context=ErrorContext(operation=operation, parameters=params),
            cause=e,
        )
