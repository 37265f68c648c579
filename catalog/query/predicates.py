"""
조건식 트리

상품 속성 하나에 대한 조건(Eq, Gte, ...)과 이를 묶는 And/Or로 구성됩니다.
모든 노드는 불변 객체이므로 여러 요청에서 동시에 공유해도 안전합니다.

matches()는 메모리 내 평가용이며, 값이 None인 속성은 어떤 비교 조건도 만족하지 않습니다
(SQL의 NULL 비교와 동일한 의미).
"""

from dataclasses import dataclass
from typing import Any


class Predicate:
    """조건식 노드의 공통 부모"""

    def matches(self, record: Any) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class Eq(Predicate):
    field: str
    value: Any

    def matches(self, record: Any) -> bool:
        current = getattr(record, self.field)
        return current is not None and current == self.value


@dataclass(frozen=True)
class Gt(Predicate):
    field: str
    value: Any

    def matches(self, record: Any) -> bool:
        current = getattr(record, self.field)
        return current is not None and current > self.value


@dataclass(frozen=True)
class Gte(Predicate):
    field: str
    value: Any

    def matches(self, record: Any) -> bool:
        current = getattr(record, self.field)
        return current is not None and current >= self.value


@dataclass(frozen=True)
class Lte(Predicate):
    field: str
    value: Any

    def matches(self, record: Any) -> bool:
        current = getattr(record, self.field)
        return current is not None and current <= self.value


@dataclass(frozen=True)
class IsTrue(Predicate):
    field: str

    def matches(self, record: Any) -> bool:
        return getattr(record, self.field) is True


@dataclass(frozen=True)
class IsNotNull(Predicate):
    field: str

    def matches(self, record: Any) -> bool:
        return getattr(record, self.field) is not None


@dataclass(frozen=True)
class ContainsIgnoreCase(Predicate):
    """대소문자 구분 없는 부분 문자열 일치"""

    field: str
    term: str

    def matches(self, record: Any) -> bool:
        current = getattr(record, self.field)
        if current is None:
            return False
        return self.term.lower() in current.lower()


@dataclass(frozen=True)
class And(Predicate):
    """하위 조건을 모두 만족 (하위 조건이 없으면 항상 참)"""

    children: tuple[Predicate, ...] = ()

    def matches(self, record: Any) -> bool:
        return all(child.matches(record) for child in self.children)


@dataclass(frozen=True)
class Or(Predicate):
    """하위 조건 중 하나 이상 만족 (하위 조건이 없으면 항상 거짓)"""

    children: tuple[Predicate, ...] = ()

    def matches(self, record: Any) -> bool:
        return any(child.matches(record) for child in self.children)
