"""
한국관광공사 API 클라이언트

한국관광공사 관광정보 서비스(KorService2)를 비동기로 호출합니다.
응답의 items 는 "", None, {"item": {...}}, {"item": [...]} 중 하나로 오므로
이 모듈에서 즉시 list[dict] 로 정규화하여 반환합니다.
"""

import asyncio
import json
import logging
import time
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional

import aiohttp

from app.core.error_handling import (
    ConfigurationError,
    ErrorContext,
    NetworkError,
    UpstreamAPIError,
)
from app.core.logger import log_api_call
from config.constants import (
    TOUR_API_COMMON_PARAMS,
    TOUR_API_ENDPOINTS,
    TOUR_API_SUCCESS_CODE,
)
from config.settings import TourAPIConfig, get_tour_api_config


def normalize_items(body: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """응답 body 의 items 를 항상 list[dict] 로 변환"""
    if not body:
        return []

    items = body.get("items")
    if not items or not isinstance(items, dict):
        # 결과가 없으면 items 가 빈 문자열로 내려옴
        return []

    item = items.get("item")
    if item is None:
        return []
    if isinstance(item, dict):
        return [item]
    if isinstance(item, list):
        return [entry for entry in item if isinstance(entry, dict)]
    return []


def _clean_params(params: Dict[str, Any]) -> Dict[str, str]:
    """None 값 제거 및 문자열 변환"""
    return {key: str(value) for key, value in params.items() if value is not None and value != ""}


class TourAPIClient:
    """한국관광공사 API 클라이언트"""

    def __init__(self, config: Optional[TourAPIConfig] = None):
        self.config = config or get_tour_api_config()
        self.base_url = self.config.base_url.rstrip("/")
        self.logger = logging.getLogger(__name__)
        self.session: Optional[aiohttp.ClientSession] = None

    async def start(self) -> None:
        """HTTP 세션 생성"""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": "MyTrip/1.0 (Tour Discovery Service)"},
            )
            self.logger.info(f"관광 API 클라이언트 초기화 완료 - Base URL: {self.base_url}")

    async def close(self) -> None:
        """HTTP 세션 종료"""
        if self.session is not None and not self.session.closed:
            await self.session.close()
        self.session = None

    async def __aenter__(self):
        """비동기 컨텍스트 매니저 진입"""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """비동기 컨텍스트 매니저 종료"""
        await self.close()

    def _get_service_key(self, pet: bool = False) -> str:
        """API 서비스 키 조회"""
        key = self.config.get_pet_service_key() if pet else self.config.service_key
        if not key or not key.strip():
            raise ConfigurationError(
                "TOUR_API_KEY 환경변수가 설정되지 않았습니다. "
                "TOUR_API_KEY 또는 NEXT_PUBLIC_TOUR_API_KEY를 설정해주세요.",
                config_key="TOUR_PET_API_KEY" if pet else "TOUR_API_KEY",
            )
        return key.strip()

    async def _request_json(self, endpoint: str, params: Dict[str, str]) -> Dict[str, Any]:
        """HTTP GET 요청 후 JSON 응답 반환"""
        if self.session is None:
            await self.start()

        url = f"{self.base_url}/{endpoint}"
        context = ErrorContext(operation=endpoint, parameters=params)
        start = time.monotonic()

        try:
            async with self.session.get(url, params=params) as response:
                response_text = await response.text()
                status = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self.logger.error(f"API 호출 오류: {endpoint}, {e}")
            raise NetworkError(
                f"API 호출 실패: {endpoint} - {e}", url=url, context=context, cause=e
            ) from e

        log_api_call("KTO", endpoint, status, time.monotonic() - start)

        if status != 200:
            raise NetworkError(
                f"API 호출 실패: {status} - {response_text[:200]}",
                url=url,
                status_code=status,
                context=context,
            )

        # XML 응답인지 먼저 확인 (오류 응답은 보통 XML 형태)
        stripped = response_text.strip()
        if stripped.startswith("<"):
            raise self._parse_xml_error(stripped, context)

        try:
            return json.loads(stripped)
        except json.JSONDecodeError as e:
            raise UpstreamAPIError(
                f"JSON 파싱 실패: {stripped[:200]}", context=context, cause=e
            ) from e

    def _parse_xml_error(self, xml_response: str, context: ErrorContext) -> UpstreamAPIError:
        """XML 오류 응답을 UpstreamAPIError 로 변환"""
        try:
            root = ET.fromstring(xml_response)
        except ET.ParseError as e:
            return UpstreamAPIError(
                f"XML 파싱 오류: {xml_response[:200]}", context=context, cause=e
            )

        def _text(tag: str) -> str:
            node = root.find(f".//{tag}")
            return node.text.strip() if node is not None and node.text else ""

        reason_code = _text("returnReasonCode") or _text("resultCode")
        auth_message = _text("returnAuthMsg") or _text("resultMsg")
        error_message = _text("errMsg") or "Unknown error"

        self.logger.error(
            f"API 오류 - {error_message}: {auth_message} (코드: {reason_code})"
        )
        return UpstreamAPIError(
            f"API 에러: {reason_code} - {auth_message or error_message}",
            result_code=reason_code,
            result_msg=auth_message or error_message,
            context=context,
        )

    def _extract_body(self, data: Dict[str, Any], endpoint: str) -> Dict[str, Any]:
        """헤더의 resultCode 확인 후 body 반환"""
        if "response" in data:
            header = data.get("response", {}).get("header", {}) or {}
            result_code = header.get("resultCode")
            if result_code != TOUR_API_SUCCESS_CODE:
                result_msg = header.get("resultMsg", "알 수 없는 오류")
                raise UpstreamAPIError(
                    f"API 에러: {result_code} - {result_msg}",
                    result_code=str(result_code),
                    result_msg=result_msg,
                    context=ErrorContext(operation=endpoint),
                )
            return data.get("response", {}).get("body", {}) or {}

        if "resultCode" in data:
            # 오류 응답이 최상위에 오는 경우
            result_code = str(data.get("resultCode"))
            result_msg = data.get("resultMsg", "알 수 없는 오류")
            raise UpstreamAPIError(
                f"API 에러: {result_code} - {result_msg}",
                result_code=result_code,
                result_msg=result_msg,
                context=ErrorContext(operation=endpoint),
            )

        raise UpstreamAPIError(
            f"알 수 없는 응답 형태: {str(data)[:200]}",
            context=ErrorContext(operation=endpoint),
        )

    async def call(
        self, endpoint: str, params: Dict[str, Any], pet: bool = False
    ) -> Dict[str, Any]:
        """API 호출 후 body 반환"""
        request_params = {
            "serviceKey": self._get_service_key(pet=pet),
            **TOUR_API_COMMON_PARAMS,
            **_clean_params(params),
        }
        data = await self._request_json(endpoint, request_params)
        return self._extract_body(data, endpoint)

    async def get_area_based_list(
        self,
        area_code: Optional[str] = None,
        content_type_id: Optional[str] = None,
        num_of_rows: int = 10,
        page_no: int = 1,
    ) -> List[Dict[str, Any]]:
        """지역/타입 기반 관광지 목록 조회"""
        body = await self.call(
            TOUR_API_ENDPOINTS["area_based_list"],
            {
                "areaCode": area_code,
                "contentTypeId": content_type_id,
                "numOfRows": num_of_rows,
                "pageNo": page_no,
            },
        )
        return normalize_items(body)

    async def search_keyword(
        self,
        keyword: str,
        area_code: Optional[str] = None,
        content_type_id: Optional[str] = None,
        num_of_rows: int = 10,
        page_no: int = 1,
    ) -> List[Dict[str, Any]]:
        """키워드 검색"""
        body = await self.call(
            TOUR_API_ENDPOINTS["search_keyword"],
            {
                "keyword": keyword,
                "areaCode": area_code,
                "contentTypeId": content_type_id,
                "numOfRows": num_of_rows,
                "pageNo": page_no,
            },
        )
        return normalize_items(body)

    async def get_detail_common(self, content_id: str) -> Optional[Dict[str, Any]]:
        """관광지 공통 상세 정보 조회"""
        body = await self.call(
            TOUR_API_ENDPOINTS["detail_common"], {"contentId": content_id}
        )
        items = normalize_items(body)
        return items[0] if items else None

    async def get_detail_pet_tour(self, content_id: str) -> Optional[Dict[str, Any]]:
        """반려동물 동반 여행 정보 조회 (정보가 없으면 None)"""
        body = await self.call(
            TOUR_API_ENDPOINTS["detail_pet_tour"], {"contentId": content_id}, pet=True
        )
        items = normalize_items(body)
        return items[0] if items else None

    async def get_total_count(self, params: Dict[str, Any]) -> int:
        """목록 조회의 totalCount 만 조회 (1건만 요청)"""
        body = await self.call(
            TOUR_API_ENDPOINTS["area_based_list"],
            {**params, "numOfRows": 1, "pageNo": 1},
        )
        return int(body.get("totalCount") or 0)
