"""
필터 컴파일러 테스트

compile_filter()가 만든 조건식을 메모리 내 상품 레코드에 적용하여 검증합니다.
"""

from decimal import Decimal
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from catalog.models import Gender, Season
from catalog.query import (
    And,
    ContainsIgnoreCase,
    Eq,
    Gt,
    Gte,
    IsNotNull,
    IsTrue,
    Lte,
    Or,
    compile_filter,
)
from catalog.schemas.product import ProductFilter


def make_record(**overrides):
    """조건식 평가용 상품 레코드"""
    data = {
        "name": "Basic Tee",
        "description": "cotton t-shirt",
        "price": Decimal("20000"),
        "stock_quantity": 5,
        "category": "Tops",
        "brand": "Acme",
        "gender": Gender.UNISEX,
        "season": Season.SUMMER,
        "discount_percentage": None,
        "active": True,
    }
    data.update(overrides)
    return SimpleNamespace(**data)


def matching(product_filter: ProductFilter, records):
    predicate = compile_filter(product_filter)
    return [record for record in records if predicate.matches(record)]


class TestCompileStructure:
    """Test: 조건식 트리 구성"""

    def test_empty_filter_only_active(self):
        """Test: 빈 필터는 활성 상품 조건 하나만 포함"""
        assert compile_filter(ProductFilter()) == And((IsTrue("active"),))

    def test_include_inactive_true_has_no_conditions(self):
        """Test: include_inactive=True면 조건 없음 (전체 일치)"""
        predicate = compile_filter(ProductFilter(include_inactive=True))

        assert predicate == And(())
        assert predicate.matches(make_record(active=False))

    def test_include_inactive_false_same_as_absent(self):
        """Test: include_inactive=False는 생략한 것과 같음"""
        assert compile_filter(ProductFilter(include_inactive=False)) == compile_filter(
            ProductFilter()
        )

    def test_full_filter_structure(self):
        """Test: 모든 필드를 채운 필터의 조건식"""
        product_filter = ProductFilter(
            search_term="jacket",
            min_price=Decimal("10"),
            max_price=Decimal("100"),
            category="Outerwear",
            brand="Acme",
            gender=Gender.MEN,
            season=Season.WINTER,
            in_stock=True,
            has_discount=True,
        )

        predicate = compile_filter(product_filter)

        assert set(predicate.children) == {
            IsTrue("active"),
            Gte("price", Decimal("10")),
            Lte("price", Decimal("100")),
            Eq("gender", Gender.MEN),
            Eq("season", Season.WINTER),
            Eq("brand", "Acme"),
            Eq("category", "Outerwear"),
            Or(
                (
                    ContainsIgnoreCase("name", "jacket"),
                    ContainsIgnoreCase("description", "jacket"),
                )
            ),
            Gt("stock_quantity", 0),
            And((IsNotNull("discount_percentage"), Gt("discount_percentage", Decimal(0)))),
        }

    def test_empty_strings_add_no_conditions(self):
        """Test: 빈 문자열 brand/category/search_term은 조건을 추가하지 않음"""
        predicate = compile_filter(ProductFilter(brand="", category="", search_term=""))

        assert predicate == And((IsTrue("active"),))

    def test_false_flags_add_no_conditions(self):
        """Test: in_stock=False, has_discount=False는 조건을 추가하지 않음"""
        predicate = compile_filter(ProductFilter(in_stock=False, has_discount=False))

        assert predicate == And((IsTrue("active"),))


class TestCompileMatching:
    """Test: 조건식 평가 결과"""

    def test_has_discount_excludes_null_and_zero(self):
        """Test: 할인율 None, 0은 제외하고 0보다 큰 상품만 일치"""
        p1 = make_record(name="P1", discount_percentage=None)
        p2 = make_record(name="P2", discount_percentage=Decimal("0"))
        p3 = make_record(name="P3", discount_percentage=Decimal("10"))

        result = matching(ProductFilter(has_discount=True), [p1, p2, p3])

        assert result == [p3]

    def test_search_term_matches_name_or_description_ignoring_case(self):
        """Test: 검색어는 이름 또는 설명에 대소문자 무시 부분 일치"""
        by_name = make_record(name="Denim JACKET", description=None)
        by_description = make_record(name="Outer", description="light Jacket for spring")
        neither = make_record(name="Jeans", description="blue denim")

        result = matching(
            ProductFilter(search_term="jacket"), [by_name, by_description, neither]
        )

        assert result == [by_name, by_description]

    def test_inactive_products_excluded_by_default(self):
        """Test: 기본 필터는 비활성 상품 제외"""
        active = make_record(active=True)
        inactive = make_record(active=False)

        assert matching(ProductFilter(), [active, inactive]) == [active]
        assert matching(ProductFilter(include_inactive=True), [active, inactive]) == [
            active,
            inactive,
        ]

    def test_price_bounds_are_inclusive(self):
        """Test: 가격 하한/상한은 경계값 포함"""
        records = [make_record(price=Decimal(p)) for p in ("9.99", "10", "50", "100", "100.01")]

        result = matching(
            ProductFilter(min_price=Decimal("10"), max_price=Decimal("100")), records
        )

        assert [r.price for r in result] == [Decimal("10"), Decimal("50"), Decimal("100")]

    def test_in_stock_excludes_zero_stock(self):
        """Test: in_stock=True는 재고 0인 상품 제외"""
        sold_out = make_record(stock_quantity=0)
        available = make_record(stock_quantity=1)

        assert matching(ProductFilter(in_stock=True), [sold_out, available]) == [available]

    def test_missing_season_never_matches_season_filter(self):
        """Test: 시즌이 없는 상품은 시즌 조건에 일치하지 않음"""
        no_season = make_record(season=None)

        assert matching(ProductFilter(season=Season.SUMMER), [no_season]) == []

    def test_brand_and_category_exact_match(self):
        """Test: 브랜드/카테고리는 정확히 일치해야 함"""
        acme = make_record(brand="Acme", category="Tops")
        other = make_record(brand="Acme Kids", category="Tops")

        assert matching(ProductFilter(brand="Acme", category="Tops"), [acme, other]) == [acme]


class TestProductFilterValidation:
    """Test: 필터 입력 검증"""

    def test_min_price_greater_than_max_price_rejected(self):
        """Test: min_price > max_price면 검증 오류"""
        with pytest.raises(ValidationError):
            ProductFilter(min_price=Decimal("100"), max_price=Decimal("10"))

    def test_negative_price_rejected(self):
        """Test: 음수 가격은 검증 오류"""
        with pytest.raises(ValidationError):
            ProductFilter(min_price=Decimal("-1"))

    def test_filter_is_immutable(self):
        """Test: 필터는 생성 후 변경 불가"""
        product_filter = ProductFilter(brand="Acme")

        with pytest.raises(ValidationError):
            product_filter.brand = "Other"
