"""
관광지 조회 서비스 테스트
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core.error_handling import (
    ConfigurationError,
    NetworkError,
    NotFoundError,
    UpstreamAPIError,
    ValidationError,
)
from app.core.query_cache import QueryCache
from app.models import TourItem
from app.services.tour_service import (
    SEARCH_ERROR_MESSAGE,
    TourService,
    apply_list_options,
)
from config.constants import SortOption
from config.settings import CacheConfig


@pytest.fixture
def client():
    client = MagicMock()
    client.get_area_based_list = AsyncMock(return_value=[])
    client.search_keyword = AsyncMock(return_value=[])
    client.get_detail_common = AsyncMock(return_value=None)
    client.get_detail_pet_tour = AsyncMock(return_value=None)
    return client


@pytest.fixture
def service(client):
    return TourService(client, QueryCache(), CacheConfig())


class TestTourList:
    """목록/검색 테스트"""

    @pytest.mark.asyncio
    async def test_list_returns_models(self, service, client, raw_tour_items):
        client.get_area_based_list.return_value = raw_tour_items

        tours = await service.get_tour_list(area_code="1", page=1, size=10)

        assert [tour.content_id for tour in tours] == ["126508", "126512"]
        assert tours[0].first_image.endswith("image2_1.jpg")
        client.get_area_based_list.assert_awaited_once_with(
            area_code="1", content_type_id=None, num_of_rows=10, page_no=1
        )

    @pytest.mark.asyncio
    async def test_list_is_cached(self, service, client, raw_tour_items):
        client.get_area_based_list.return_value = raw_tour_items

        await service.get_tour_list(area_code="1")
        await service.get_tour_list(area_code="1")
        await service.get_tour_list(area_code="2")

        assert client.get_area_based_list.await_count == 2

    @pytest.mark.asyncio
    async def test_list_propagates_network_error(self, service, client):
        client.get_area_based_list.side_effect = NetworkError("API 호출 실패: 500")

        with pytest.raises(NetworkError) as exc_info:
            await service.get_tour_list()

        assert "네트워크 오류" in exc_info.value.user_message

    @pytest.mark.asyncio
    async def test_list_wraps_unexpected_errors(self, service, client):
        client.get_area_based_list.side_effect = ConnectionResetError("reset")

        with pytest.raises(NetworkError):
            await service.get_tour_list()

    @pytest.mark.asyncio
    async def test_empty_keyword_rejected_before_network(self, service, client):
        for keyword in ("", "   "):
            with pytest.raises(ValidationError) as exc_info:
                await service.search_tours(keyword)
            assert exc_info.value.user_message == "검색 키워드를 입력해주세요."

        client.search_keyword.assert_not_called()

    @pytest.mark.asyncio
    async def test_search_trims_keyword(self, service, client, raw_tour_items):
        client.search_keyword.return_value = raw_tour_items[:1]

        tours = await service.search_tours("  경복궁 ")

        assert tours[0].title == "경복궁"
        assert client.search_keyword.await_args.args == ("경복궁",)

    @pytest.mark.asyncio
    async def test_search_upstream_error_message(self, service, client):
        client.search_keyword.side_effect = UpstreamAPIError("API 에러: 99", result_code="99")

        with pytest.raises(UpstreamAPIError) as exc_info:
            await service.search_tours("경복궁")

        assert exc_info.value.user_message == SEARCH_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_search_configuration_error(self, service, client):
        client.search_keyword.side_effect = ConfigurationError("no key")

        with pytest.raises(ConfigurationError) as exc_info:
            await service.search_tours("경복궁")

        assert "API 키가 필요합니다" in exc_info.value.user_message

    @pytest.mark.asyncio
    async def test_item_without_content_id_is_upstream_error(self, service, client):
        client.get_area_based_list.return_value = [{"title": "경복궁"}]

        with pytest.raises(UpstreamAPIError) as exc_info:
            await service.get_tour_list()

        assert exc_info.value.http_status == 502

    @pytest.mark.asyncio
    async def test_search_malformed_item_uses_search_message(self, service, client):
        client.search_keyword.return_value = [{"title": "경복궁"}]

        with pytest.raises(UpstreamAPIError) as exc_info:
            await service.search_tours("경복궁")

        assert exc_info.value.user_message == SEARCH_ERROR_MESSAGE


class TestTourDetail:
    """상세/반려동물 정보 테스트"""

    @pytest.mark.asyncio
    async def test_empty_content_id_rejected(self, service, client):
        with pytest.raises(ValidationError) as exc_info:
            await service.get_tour_detail(" ")

        assert exc_info.value.user_message == "관광지 ID가 필요합니다."
        client.get_detail_common.assert_not_called()

    @pytest.mark.asyncio
    async def test_detail(self, service, client, raw_tour_items):
        client.get_detail_common.return_value = {
            **raw_tour_items[0],
            "overview": "조선 왕조의 정궁",
            "homepage": "<a href=\"http://www.royalpalace.go.kr\">royalpalace</a>",
        }

        detail = await service.get_tour_detail("126508")

        assert detail.overview == "조선 왕조의 정궁"
        location = service.locate(detail)
        assert 37.0 < location.lat < 38.0
        assert 126.0 < location.lng < 127.5

    @pytest.mark.asyncio
    async def test_detail_not_found(self, service):
        with pytest.raises(NotFoundError):
            await service.get_tour_detail("999999")

    @pytest.mark.asyncio
    async def test_detail_malformed_item_is_not_validation_error(self, service, client):
        client.get_detail_common.return_value = {"overview": "내용"}

        with pytest.raises(UpstreamAPIError) as exc_info:
            await service.get_tour_detail("126508")

        assert not isinstance(exc_info.value, ValidationError)

    def test_locate_without_coordinates(self, service):
        assert service.locate(TourItem(contentid="1")) is None
        assert service.locate(TourItem(contentid="1", mapx="abc", mapy="1")) is None

    @pytest.mark.asyncio
    async def test_pet_info(self, service, client):
        client.get_detail_pet_tour.return_value = {
            "contentid": "126508",
            "acmpyTypeCd": "일부구역 동반가능",
            "acmpyNeedMtr": "목줄 착용",
        }

        pet = await service.get_tour_pet("126508")

        assert pet.acmpy_type_cd == "일부구역 동반가능"
        assert pet.has_pet_info

    @pytest.mark.asyncio
    async def test_pet_info_absent(self, service):
        assert await service.get_tour_pet("126508") is None

    @pytest.mark.asyncio
    async def test_pet_errors_swallowed(self, service, client):
        for error in (
            ConfigurationError("no key"),
            NetworkError("down"),
            UpstreamAPIError("bad"),
            RuntimeError("unexpected"),
        ):
            client.get_detail_pet_tour.side_effect = error
            assert await service.get_tour_pet("126508") is None

    @pytest.mark.asyncio
    async def test_pet_empty_content_id(self, service, client):
        assert await service.get_tour_pet("") is None
        client.get_detail_pet_tour.assert_not_called()


class TestApplyListOptions:
    """정렬/북마크 필터 테스트"""

    def test_bookmark_filter_and_sort(self, raw_tour_items):
        tours = [TourItem.model_validate(item) for item in raw_tour_items]

        result = apply_list_options(tours, SortOption.NAME, bookmarked_ids=["126512"])

        assert [tour.content_id for tour in result] == ["126512"]

    def test_no_filter_sorts_latest(self, raw_tour_items):
        tours = [TourItem.model_validate(item) for item in raw_tour_items]

        result = apply_list_options(tours)

        assert [tour.content_id for tour in result] == ["126512", "126508"]
