#!/usr/bin/env python3
"""
테스트 데이터 초기화 스크립트

부하 테스트 실행 전 카탈로그에 상품을 채워 넣습니다.
"""

import argparse
import random
import sys

import requests

CATEGORIES = ["Outerwear", "Tops", "Bottoms", "Dresses", "Knitwear", "Shoes"]
BRANDS = ["Northwind", "Acme", "Bluefield", "Harbor", "Oakline"]
GENDERS = ["MEN", "WOMEN", "UNISEX", "KIDS"]
SEASONS = ["SPRING", "SUMMER", "FALL", "WINTER", "ALL_SEASON"]
NOUNS = ["Jacket", "Coat", "Shirt", "Jeans", "Sweater", "Dress", "Sneakers", "Hoodie"]


def check_health(base_url: str) -> bool:
    """서버 헬스체크"""
    try:
        response = requests.get(f"{base_url}/health", timeout=5)
        return response.status_code == 200
    except requests.RequestException:
        return False


def create_test_product(base_url: str, index: int) -> dict:
    """랜덤 속성의 테스트 상품 생성"""
    noun = random.choice(NOUNS)
    discount = random.choice([None, 0, 10, 15, 30])

    response = requests.post(
        f"{base_url}/api/v1/products",
        json={
            "name": f"Load Test {noun} {index}",
            "description": f"{random.choice(['cotton', 'wool', 'leather'])} {noun.lower()}",
            "price": str(random.randint(10, 300) * 1000),
            "stock_quantity": random.randint(0, 50),
            "category": random.choice(CATEGORIES),
            "brand": random.choice(BRANDS),
            "gender": random.choice(GENDERS),
            "season": random.choice(SEASONS),
            "available_sizes": ["S", "M", "L"],
            "available_colors": ["black", "navy"],
            "discount_percentage": discount,
        },
        timeout=10,
    )

    if response.status_code != 201:
        print(f"❌ Product creation failed: {response.status_code}")
        print(response.text)
        sys.exit(1)

    return response.json()


def main():
    parser = argparse.ArgumentParser(description="카탈로그 부하 테스트 데이터 생성")
    parser.add_argument("--base-url", default="http://localhost:8080")
    parser.add_argument("--count", type=int, default=200, help="생성할 상품 수")
    args = parser.parse_args()

    if not check_health(args.base_url):
        print(f"❌ Server is not healthy: {args.base_url}")
        sys.exit(1)

    for index in range(1, args.count + 1):
        product = create_test_product(args.base_url, index)
        if index % 50 == 0:
            print(f"✅ {index} products created (last SKU: {product['sku']})")

    print(f"✅ Done: {args.count} products")


if __name__ == "__main__":
    main()
