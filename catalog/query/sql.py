"""
조건식 트리 -> SQLAlchemy WHERE 절 변환
"""

from sqlalchemy import ColumnElement, and_, false, func, or_, true

from catalog.models.product import Product
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


def _column(field: str):
    column = getattr(Product, field, None)
    if column is None:
        raise ValueError(f"Unknown product field: {field}")
    return column


def to_sql_clause(predicate: Predicate) -> ColumnElement[bool]:
    """
    조건식을 Product 테이블 대상 SQLAlchemy 불리언 표현식으로 변환합니다.

    검색어의 LIKE 와일드카드(%, _)는 이스케이프되어 문자 그대로 비교됩니다.

    Args:
        predicate: compile_filter()가 만든 조건식

    Returns:
        select(Product).where(...)에 넘길 수 있는 표현식

    Raises:
        ValueError: 알 수 없는 조건식 노드 또는 필드
    """
    if isinstance(predicate, And):
        if not predicate.children:
            return true()
        return and_(*(to_sql_clause(child) for child in predicate.children))

    if isinstance(predicate, Or):
        if not predicate.children:
            return false()
        return or_(*(to_sql_clause(child) for child in predicate.children))

    if isinstance(predicate, Eq):
        return _column(predicate.field) == predicate.value

    if isinstance(predicate, Gt):
        return _column(predicate.field) > predicate.value

    if isinstance(predicate, Gte):
        return _column(predicate.field) >= predicate.value

    if isinstance(predicate, Lte):
        return _column(predicate.field) <= predicate.value

    if isinstance(predicate, IsTrue):
        return _column(predicate.field).is_(True)

    if isinstance(predicate, IsNotNull):
        return _column(predicate.field).is_not(None)

    if isinstance(predicate, ContainsIgnoreCase):
        return func.lower(_column(predicate.field)).contains(
            predicate.term.lower(), autoescape=True
        )

    raise ValueError(f"Unsupported predicate: {predicate!r}")
