"""
공급사 응답 필드 파싱 유틸리티

모든 함수는 잘못된 입력에 대해 예외를 던지지 않고 기본값으로 대체한다.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional, Set, Tuple

from dropship_engine.models.product import Dimensions

_NUMBER = re.compile(r"\d+(?:\.\d+)?|\.\d+")


def parse_price(value: Any) -> Decimal:
    """
    가격 문자열 파싱

    숫자와 소수점 이외의 문자를 제거한 뒤 첫 번째 숫자를 사용한다.
    숫자가 없으면 0을 반환한다.

    >>> parse_price("$19.99 USD")
    Decimal('19.99')
    """
    if value is None or isinstance(value, bool):
        return Decimal(0)

    cleaned = re.sub(r"[^0-9.]", "", str(value))
    match = _NUMBER.search(cleaned)
    if not match:
        return Decimal(0)
    return Decimal(match.group())


def parse_stock(value: Any, default: int = 0) -> int:
    """재고 수량 파싱 (음수는 0)"""
    if value is None or value == "" or isinstance(value, bool):
        return default

    try:
        return max(0, int(Decimal(str(value).strip())))
    except (InvalidOperation, ValueError, OverflowError):
        digits = re.search(r"\d+", str(value))
        return int(digits.group()) if digits else default


def parse_optional_decimal(value: Any) -> Optional[Decimal]:
    """선택 수치 필드 파싱 (무게 등). 값이 없으면 None"""
    if value is None or value == "" or isinstance(value, bool):
        return None
    if not re.search(r"\d", str(value)):
        return None
    return parse_price(value)


def parse_dimensions(value: Any) -> Optional[Dimensions]:
    """
    규격 파싱

    {"length": .., "width": .., "height": ..} 또는 "10x20x5" 형식을 지원한다.
    """
    if isinstance(value, dict):
        parts = [value.get("length"), value.get("width"), value.get("height")]
    elif isinstance(value, str):
        parts = re.split(r"\s*[xX×*]\s*", value.strip())
    else:
        return None

    if len(parts) != 3:
        return None

    parsed = [parse_optional_decimal(part) for part in parts]
    if any(p is None for p in parsed):
        return None
    return Dimensions(length=parsed[0], width=parsed[1], height=parsed[2])


def parse_tags(value: Any) -> Set[str]:
    """태그 파싱 (리스트 또는 쉼표 구분 문자열)"""
    if isinstance(value, str):
        items: Iterable[Any] = value.split(",")
    elif isinstance(value, (list, tuple, set)):
        items = value
    else:
        return set()
    return {str(item).strip() for item in items if item is not None and str(item).strip()}


def parse_images(values: Any, *keys: str) -> List[str]:
    """
    이미지 URL 목록 파싱

    Args:
        values: 문자열 또는 딕셔너리 목록
        *keys: 딕셔너리 항목에서 URL을 찾을 키 (우선순위 순)

    Returns:
        중복 제거된 URL 목록 (처음 나온 순서 유지)
    """
    if isinstance(values, str):
        values = [values]
    if not isinstance(values, (list, tuple)):
        return []

    urls: List[str] = []
    for item in values:
        url = None
        if isinstance(item, str):
            url = item
        elif isinstance(item, dict):
            url = next((item[k] for k in keys if isinstance(item.get(k), str) and item[k]), None)
        if url and url.strip():
            urls.append(url.strip())
    return list(dict.fromkeys(urls))


def safe_str(value: Any, default: str = "") -> str:
    """문자열 변환 (None은 기본값)"""
    if value is None:
        return default
    return str(value).strip()


def safe_list(value: Any) -> List[Any]:
    """리스트가 아니면 빈 리스트"""
    return list(value) if isinstance(value, (list, tuple)) else []


def split_full_name(name: Optional[str]) -> Tuple[str, str]:
    """
    전체 이름을 (이름, 성)으로 분리

    첫 토큰이 이름, 나머지가 성이다. 토큰이 하나면 성은 빈 문자열.
    """
    parts = (name or "").split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])
