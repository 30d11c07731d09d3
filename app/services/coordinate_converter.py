"""
좌표 변환 서비스

한국관광공사 API 는 KATEC 계열 정수형 좌표(mapx, mapy)를 제공하고 지도는
WGS84 위경도를 사용합니다.

변환 과정:
1. 정수형 문자열을 10,000,000 으로 나누어 평면 좌표(미터)로 변환
2. 횡메르카토르(TM) 역변환 (EPSG:5181 과 같은 파라미터)
   +proj=tmerc +lat_0=38 +lon_0=127.5 +k=1 +x_0=200000 +y_0=500000 +ellps=GRS80
3. {lat, lng} 형식으로 반환

반복 계산 없이 Snyder 의 footpoint latitude 급수를 사용합니다.
"""

import math
import logging
from typing import Any, Tuple

from app.core.error_handling import InvalidCoordinateError
from app.models import LatLng
from config.constants import COORDINATE_SCALE_FACTOR

logger = logging.getLogger(__name__)

# 투영 파라미터
LAT_0 = 38.0  # 원점 위도(degree)
LON_0 = 127.5  # 중앙 경선(degree)
SCALE_K0 = 1.0  # 축척 계수
FALSE_EASTING = 200000.0  # X 원점 가산값(m)
FALSE_NORTHING = 500000.0  # Y 원점 가산값(m)

# GRS80 타원체
GRS80_A = 6378137.0
GRS80_F = 1 / 298.257222101

DEGRAD = math.pi / 180.0
RADDEG = 180.0 / math.pi

_E2 = GRS80_F * (2 - GRS80_F)  # 제1이심률 제곱
_EP2 = _E2 / (1 - _E2)  # 제2이심률 제곱
_E4 = _E2 * _E2
_E6 = _E4 * _E2
_M_COEF = 1 - _E2 / 4 - 3 * _E4 / 64 - 5 * _E6 / 256


def _meridian_arc(phi: float) -> float:
    """적도에서 위도 phi 까지의 자오선 호장(m)"""
    return GRS80_A * (
        _M_COEF * phi
        - (3 * _E2 / 8 + 3 * _E4 / 32 + 45 * _E6 / 1024) * math.sin(2 * phi)
        + (15 * _E4 / 256 + 45 * _E6 / 1024) * math.sin(4 * phi)
        - (35 * _E6 / 3072) * math.sin(6 * phi)
    )


_M0 = _meridian_arc(LAT_0 * DEGRAD)


def _parse_scaled(value: Any, name: str) -> float:
    """정수형 좌표 문자열을 미터 단위 실수로 변환"""
    try:
        scaled = float(value) / COORDINATE_SCALE_FACTOR
    except (TypeError, ValueError) as e:
        raise InvalidCoordinateError(
            f"유효하지 않은 좌표 값: {name}={value!r}",
            field_name=name,
            field_value=value,
            cause=e,
        ) from e

    if not math.isfinite(scaled):
        raise InvalidCoordinateError(
            f"유효하지 않은 좌표 값: {name}={value!r}",
            field_name=name,
            field_value=value,
        )
    return scaled


def tm_to_wgs84(x: float, y: float) -> Tuple[float, float]:
    """TM 평면 좌표(m)를 WGS84 (위도, 경도)로 역변환"""
    m = _M0 + (y - FALSE_NORTHING) / SCALE_K0
    mu = m / (GRS80_A * _M_COEF)

    sqrt_1_e2 = math.sqrt(1 - _E2)
    e1 = (1 - sqrt_1_e2) / (1 + sqrt_1_e2)

    phi1 = (
        mu
        + (3 * e1 / 2 - 27 * e1 ** 3 / 32) * math.sin(2 * mu)
        + (21 * e1 ** 2 / 16 - 55 * e1 ** 4 / 32) * math.sin(4 * mu)
        + (151 * e1 ** 3 / 96) * math.sin(6 * mu)
        + (1097 * e1 ** 4 / 512) * math.sin(8 * mu)
    )

    sin_phi1 = math.sin(phi1)
    cos_phi1 = math.cos(phi1)
    tan_phi1 = math.tan(phi1)

    c1 = _EP2 * cos_phi1 ** 2
    t1 = tan_phi1 ** 2
    n1 = GRS80_A / math.sqrt(1 - _E2 * sin_phi1 ** 2)
    r1 = GRS80_A * (1 - _E2) / (1 - _E2 * sin_phi1 ** 2) ** 1.5
    d = (x - FALSE_EASTING) / (n1 * SCALE_K0)

    phi = phi1 - (n1 * tan_phi1 / r1) * (
        d ** 2 / 2
        - (5 + 3 * t1 + 10 * c1 - 4 * c1 ** 2 - 9 * _EP2) * d ** 4 / 24
        + (61 + 90 * t1 + 298 * c1 + 45 * t1 ** 2 - 252 * _EP2 - 3 * c1 ** 2)
        * d ** 6
        / 720
    )
    lam = LON_0 * DEGRAD + (
        d
        - (1 + 2 * t1 + c1) * d ** 3 / 6
        + (5 - 2 * c1 + 28 * t1 - 3 * c1 ** 2 + 8 * _EP2 + 24 * t1 ** 2)
        * d ** 5
        / 120
    ) / cos_phi1

    return phi * RADDEG, lam * RADDEG


def wgs84_to_tm(lat: float, lng: float) -> Tuple[float, float]:
    """WGS84 (위도, 경도)를 TM 평면 좌표(m)로 변환"""
    phi = lat * DEGRAD
    sin_phi = math.sin(phi)
    cos_phi = math.cos(phi)
    tan_phi = math.tan(phi)

    n = GRS80_A / math.sqrt(1 - _E2 * sin_phi ** 2)
    t = tan_phi ** 2
    c = _EP2 * cos_phi ** 2
    a = (lng - LON_0) * DEGRAD * cos_phi
    m = _meridian_arc(phi)

    x = FALSE_EASTING + SCALE_K0 * n * (
        a
        + (1 - t + c) * a ** 3 / 6
        + (5 - 18 * t + t ** 2 + 72 * c - 58 * _EP2) * a ** 5 / 120
    )
    y = FALSE_NORTHING + SCALE_K0 * (
        m
        - _M0
        + n
        * tan_phi
        * (
            a ** 2 / 2
            + (5 - t + 9 * c + 4 * c ** 2) * a ** 4 / 24
            + (61 - 58 * t + t ** 2 + 600 * c - 330 * _EP2) * a ** 6 / 720
        )
    )
    return x, y


def convert_katec_to_wgs84(mapx: Any, mapy: Any) -> LatLng:
    """KATEC 정수형 좌표를 WGS84 좌표로 변환

    원점 ("2000000000000", "5000000000000") 은 (38.0, 127.5) 로 변환됩니다.
    숫자가 아닌 값은 InvalidCoordinateError 를 발생시킵니다.
    """
    katec_x = _parse_scaled(mapx, "mapx")
    katec_y = _parse_scaled(mapy, "mapy")

    try:
        lat, lng = tm_to_wgs84(katec_x, katec_y)
    except OverflowError:
        lat = lng = math.nan

    # 결과 유효성 검사
    if not (math.isfinite(lat) and math.isfinite(lng)):
        logger.error(f"좌표 변환 실패: mapx={mapx}, mapy={mapy}")
        raise InvalidCoordinateError(
            f"좌표 변환 결과가 유효하지 않습니다: lat={lat}, lng={lng}",
            field_name="mapx,mapy",
            field_value=f"{mapx},{mapy}",
        )

    return LatLng(lat=lat, lng=lng)


def convert_wgs84_to_katec(lat: float, lng: float) -> Tuple[str, str]:
    """WGS84 좌표를 KATEC 정수형 문자열 좌표로 변환"""
    x, y = wgs84_to_tm(lat, lng)
    return (
        str(round(x * COORDINATE_SCALE_FACTOR)),
        str(round(y * COORDINATE_SCALE_FACTOR)),
    )


def convert_tour_coordinates(mapx: Any, mapy: Any) -> LatLng:
    """TourItem / TourDetail 좌표를 지도 표시용으로 변환"""
    return convert_katec_to_wgs84(mapx, mapy)
