"""ProductFilter를 조건식 트리로 변환하는 순수 함수."""

from decimal import Decimal

from catalog.query.predicates import (
    And,
    ContainsIgnoreCase,
    Eq,
    Gt,
    Gte,
    IsNotNull,
    IsTrue,
    Lte,
    Or,
    Predicate,
)
from catalog.schemas.product import ProductFilter


def compile_filter(product_filter: ProductFilter) -> And:
    """
    필터를 AND로 결합된 조건식으로 변환합니다.

    규칙 (각 조건은 독립적으로 추가됨):
    - include_inactive가 명시적으로 True가 아니면 active 상품만
    - min_price / max_price: 가격 하한/상한 (경계 포함)
    - gender, season, brand, category: 동등 비교 (brand/category는 빈 문자열 제외)
    - search_term: name 또는 description에 대소문자 무시 부분 일치
    - in_stock=True: 재고 > 0
    - has_discount=True: 할인율이 존재하고 0보다 큼

    Args:
        product_filter: 검색 필터

    Returns:
        And 조건식 (조건이 하나도 없으면 빈 And = 전체 일치)
    """
    predicates: list[Predicate] = []

    if product_filter.include_inactive is not True:
        predicates.append(IsTrue("active"))

    if product_filter.min_price is not None:
        predicates.append(Gte("price", product_filter.min_price))

    if product_filter.max_price is not None:
        predicates.append(Lte("price", product_filter.max_price))

    if product_filter.gender is not None:
        predicates.append(Eq("gender", product_filter.gender))

    if product_filter.season is not None:
        predicates.append(Eq("season", product_filter.season))

    if product_filter.brand:
        predicates.append(Eq("brand", product_filter.brand))

    if product_filter.category:
        predicates.append(Eq("category", product_filter.category))

    if product_filter.search_term:
        term = product_filter.search_term
        predicates.append(
            Or(
                (
                    ContainsIgnoreCase("name", term),
                    ContainsIgnoreCase("description", term),
                )
            )
        )

    if product_filter.in_stock is True:
        predicates.append(Gt("stock_quantity", 0))

    if product_filter.has_discount is True:
        predicates.append(
            And(
                (
                    IsNotNull("discount_percentage"),
                    Gt("discount_percentage", Decimal(0)),
                )
            )
        )

    return And(tuple(predicates))
