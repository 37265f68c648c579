"""
조건식 -> SQL WHERE 절 변환 테스트

in-memory SQLite에서 실제로 실행하여 메모리 내 평가와 같은 결과인지 확인합니다.
"""

from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from catalog.db.database import create_db_engine
from catalog.models import Gender, Product
from catalog.models.product import generate_sku
from catalog.query import And, Eq, Or, Predicate, compile_filter, to_sql_clause
from catalog.schemas.product import ProductFilter


def add_product(db: Session, **overrides) -> Product:
    data = {
        "name": "Basic Tee",
        "description": "cotton t-shirt",
        "price": Decimal("20000"),
        "stock_quantity": 5,
        "category": "Tops",
        "brand": "Acme",
        "gender": Gender.UNISEX,
        "sku": generate_sku("Tops"),
    }
    data.update(overrides)
    product = Product(**data)
    db.add(product)
    db.commit()
    return product


def names(db: Session, predicate: Predicate) -> set[str]:
    stmt = select(Product.name).where(to_sql_clause(predicate))
    return set(db.scalars(stmt).all())


class TestToSqlClause:
    """Test: SQL 변환 결과 검증"""

    def test_has_discount_excludes_null_and_zero(self, test_db: Session):
        """Test: 할인율 NULL, 0은 제외"""
        add_product(test_db, name="P1", discount_percentage=None)
        add_product(test_db, name="P2", discount_percentage=Decimal("0"))
        add_product(test_db, name="P3", discount_percentage=Decimal("10"))

        result = names(test_db, compile_filter(ProductFilter(has_discount=True)))

        assert result == {"P3"}

    def test_search_term_ignores_case(self, test_db: Session):
        """Test: 검색어 대소문자 무시 (이름 또는 설명)"""
        add_product(test_db, name="Denim JACKET", description=None)
        add_product(test_db, name="Outer", description="Light Jacket")
        add_product(test_db, name="Jeans", description="blue denim")

        result = names(test_db, compile_filter(ProductFilter(search_term="jacket")))

        assert result == {"Denim JACKET", "Outer"}

    def test_search_term_ignores_case_for_non_ascii(self, test_db: Session):
        """Test: 악센트 문자도 대소문자 무시 (메모리 내 평가와 같은 결과)"""
        summer = add_product(test_db, name="ÉTÉ JACKE", description=None)
        add_product(test_db, name="Winter Coat", description=None)
        predicate = compile_filter(ProductFilter(search_term="été"))

        assert predicate.matches(summer)
        assert names(test_db, predicate) == {"ÉTÉ JACKE"}

    def test_engine_factory_registers_unicode_lower(self):
        """Test: create_db_engine으로 만든 SQLite 엔진은 유니코드 lower() 사용"""
        engine = create_db_engine("sqlite:///:memory:")
        try:
            with engine.connect() as connection:
                lowered = connection.execute(select(func.lower("ÄRMEL Ü"))).scalar_one()
        finally:
            engine.dispose()

        assert lowered == "ärmel ü"

    def test_like_wildcards_are_literal(self, test_db: Session):
        """Test: 검색어의 %와 _는 와일드카드가 아닌 문자로 비교"""
        add_product(test_db, name="100% Wool Coat")
        add_product(test_db, name="Wool Coat")
        add_product(test_db, name="Knit_Cap")
        add_product(test_db, name="KnitXCap")

        assert names(test_db, compile_filter(ProductFilter(search_term="%"))) == {
            "100% Wool Coat"
        }
        assert names(test_db, compile_filter(ProductFilter(search_term="t_c"))) == {
            "Knit_Cap"
        }

    def test_inactive_excluded_unless_included(self, test_db: Session):
        """Test: 비활성 상품은 include_inactive=True일 때만 포함"""
        add_product(test_db, name="On", active=True)
        add_product(test_db, name="Off", active=False)

        assert names(test_db, compile_filter(ProductFilter())) == {"On"}
        assert names(
            test_db, compile_filter(ProductFilter(include_inactive=True))
        ) == {"On", "Off"}

    def test_price_bounds_inclusive(self, test_db: Session):
        """Test: 가격 경계값 포함"""
        add_product(test_db, name="cheap", price=Decimal("9.99"))
        add_product(test_db, name="low", price=Decimal("10"))
        add_product(test_db, name="high", price=Decimal("100"))
        add_product(test_db, name="expensive", price=Decimal("100.01"))

        product_filter = ProductFilter(min_price=Decimal("10"), max_price=Decimal("100"))

        assert names(test_db, compile_filter(product_filter)) == {"low", "high"}

    def test_gender_enum_equality(self, test_db: Session):
        """Test: 성별 Enum 비교"""
        add_product(test_db, name="men", gender=Gender.MEN)
        add_product(test_db, name="women", gender=Gender.WOMEN)

        result = names(test_db, compile_filter(ProductFilter(gender=Gender.MEN)))

        assert result == {"men"}

    def test_empty_and_or(self, test_db: Session):
        """Test: 빈 And는 전체, 빈 Or는 없음"""
        add_product(test_db, name="only")

        assert names(test_db, And(())) == {"only"}
        assert names(test_db, Or(())) == set()

    def test_unknown_field_rejected(self):
        """Test: 존재하지 않는 필드는 ValueError"""
        with pytest.raises(ValueError):
            to_sql_clause(Eq("no_such_field", 1))

    def test_unknown_predicate_rejected(self):
        """Test: 알 수 없는 노드는 ValueError"""
        with pytest.raises(ValueError):
            to_sql_clause(Predicate())
