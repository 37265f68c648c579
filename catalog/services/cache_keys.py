"""
캐시 키 생성 규칙

같은 의미의 요청은 항상 같은 키가 되고, 다른 요청은 절대 같은 키가 되지 않아야 합니다.
가변 부분(카테고리, 필터 JSON 등) 뒤에는 항상 고정 형식의 접미사(:page:<n>:size:<n>...)가
붙으므로 키를 오른쪽부터 해석하면 원래 요청을 유일하게 복원할 수 있습니다.

키 형식은 Redis가 재시작 후에도 공유될 수 있으므로 프로세스와 무관하게 안정적이어야 합니다.
"""

import enum
import json
from decimal import Decimal

from catalog.schemas.product import ProductFilter

PRODUCT_KEY_PATTERN = "product:*"
PRODUCTS_KEY_PATTERN = "products:*"


def product_key(product_id: str) -> str:
    return f"product:{product_id}"


def list_all_key(
    include_inactive: bool, page: int, size: int, sort_by: str, sort_direction: str
) -> str:
    return (
        f"products:all:{str(bool(include_inactive)).lower()}"
        f"{_page_suffix(page, size)}{_sort_suffix(sort_by, sort_direction)}"
    )


def category_key(category: str, page: int, size: int) -> str:
    return f"products:category:{category}{_page_suffix(page, size)}"


def brand_key(brand: str, page: int, size: int) -> str:
    return f"products:brand:{brand}{_page_suffix(page, size)}"


def search_key(
    product_filter: ProductFilter,
    page: int,
    size: int,
    sort_by: str,
    sort_direction: str,
) -> str:
    """
    필터 검색 결과의 캐시 키

    Example:
        ProductFilter(brand="Acme"), page=0, size=10, 정렬 id desc
        -> products:search:{"brand":"Acme","category":null,...}:page:0:size:10:sort:id:desc
    """
    return (
        f"products:search:{canonical_filter(product_filter)}"
        f"{_page_suffix(page, size)}{_sort_suffix(sort_by, sort_direction)}"
    )


def canonical_filter(product_filter: ProductFilter) -> str:
    """
    필터를 키 정렬된 JSON으로 직렬화합니다.

    조건이 적용되지 않는 값(False 플래그, 빈 문자열)은 null로,
    Decimal은 정규화(10 == 10.00)하여 같은 의미의 필터가 같은 문자열이 되게 합니다.
    """
    data = {}
    for name in ProductFilter.model_fields:
        data[name] = _canonical_value(getattr(product_filter, name))
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _canonical_value(value):
    if value is False or value == "":
        return None
    if isinstance(value, Decimal):
        return format(value.normalize(), "f")
    if isinstance(value, enum.Enum):
        return value.value
    return value


def _page_suffix(page: int, size: int) -> str:
    return f":page:{page}:size:{size}"


def _sort_suffix(sort_by: str, sort_direction: str) -> str:
    return f":sort:{sort_by}:{sort_direction.lower()}"
