"""
상품 필터 -> 조건식 컴파일러

ProductFilter를 저장소와 무관한 조건식 트리로 변환하고,
그 트리를 메모리 내 평가 또는 SQLAlchemy WHERE 절로 해석합니다.
"""

from catalog.query.compiler import compile_filter
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
from catalog.query.sql import to_sql_clause

__all__ = [
    "compile_filter",
    "to_sql_clause",
    "Predicate",
    "And",
    "Or",
    "Eq",
    "Gt",
    "Gte",
    "Lte",
    "IsTrue",
    "IsNotNull",
    "ContainsIgnoreCase",
]
