"""
카탈로그 부하 테스트 시나리오

테스트 시나리오:
1. 조회 위주 트래픽: 목록/검색/상세 조회 (캐시 적중률 확인)
2. 쓰기 경합: 같은 상품에 조회수 증가/수정이 몰릴 때 409 충돌 비율 확인
3. 캐시 정합성: 수정 직후 상세 조회가 수정된 값을 반환하는지 확인

성능 목표:
- 조회 응답시간: P50 < 50ms, P99 < 300ms
- 정합성: 수정 후 오래된 캐시 응답 0건
"""

import random
import uuid
from typing import Optional

from locust import HttpUser, TaskSet, task, between, events


# 전역 메트릭 수집
version_conflicts = 0
successful_updates = 0
stale_reads = 0

SEARCH_TERMS = ["jacket", "coat", "shirt", "jeans", "sweater", "dress"]
CATEGORIES = ["Outerwear", "Tops", "Bottoms", "Dresses", "Knitwear", "Shoes"]


class CatalogTaskSet(TaskSet):
    """카탈로그 사용자 행동 모델"""

    def on_start(self):
        self.product_id: Optional[str] = None

    @task(5)
    def list_products(self):
        """상품 목록 조회"""
        with self.client.get(
            "/api/v1/products",
            params={"page": random.randint(0, 3), "size": 20},
            name="[Catalog] List",
            catch_response=True,
        ) as response:
            if response.status_code == 200:
                items = response.json()["items"]
                if items and not self.product_id:
                    self.product_id = random.choice(items)["id"]
                response.success()
            else:
                response.failure(f"List failed: {response.status_code}")

    @task(4)
    def search_products(self):
        """필터 검색"""
        params = {
            "search_term": random.choice(SEARCH_TERMS),
            "in_stock": random.choice(["true", "false"]),
            "page": 0,
            "size": 20,
        }
        if random.random() < 0.5:
            params["max_price"] = random.randint(50, 300) * 1000

        with self.client.get(
            "/api/v1/products/search",
            params=params,
            name="[Catalog] Search",
            catch_response=True,
        ) as response:
            if response.status_code == 200:
                response.success()
            else:
                response.failure(f"Search failed: {response.status_code}")

    @task(2)
    def list_by_category(self):
        """카테고리별 조회"""
        category = random.choice(CATEGORIES)
        self.client.get(
            f"/api/v1/products/category/{category}",
            name="[Catalog] By Category",
        )

    @task(3)
    def view_product(self):
        """조회수 증가 (경합 시 409는 정상)"""
        if not self.product_id:
            return

        with self.client.post(
            f"/api/v1/products/{self.product_id}/view",
            name="[Catalog] View",
            catch_response=True,
        ) as response:
            if response.status_code in (200, 409):
                response.success()
            else:
                response.failure(f"View failed: {response.status_code}")

    @task(1)
    def update_and_read_back(self):
        """수정 후 상세 조회로 캐시 무효화 확인"""
        if not self.product_id:
            return

        global version_conflicts, successful_updates, stale_reads

        current = self.client.get(
            f"/api/v1/products/{self.product_id}", name="[Catalog] Detail"
        )
        if current.status_code != 200:
            return

        new_material = f"blend-{uuid.uuid4().hex[:6]}"
        with self.client.put(
            f"/api/v1/products/{self.product_id}",
            json={"material": new_material, "version": current.json()["version"]},
            name="[Catalog] Update",
            catch_response=True,
        ) as response:
            if response.status_code == 409:
                version_conflicts += 1
                response.success()
                return
            if response.status_code != 200:
                response.failure(f"Update failed: {response.status_code}")
                return
            successful_updates += 1
            response.success()
            updated_version = response.json()["version"]

        read_back = self.client.get(
            f"/api/v1/products/{self.product_id}", name="[Catalog] Detail"
        )
        if read_back.status_code == 200 and read_back.json()["version"] < updated_version:
            stale_reads += 1


class Shopper(HttpUser):
    """일반 사용자 (조회 위주)"""

    tasks = [CatalogTaskSet]
    wait_time = between(0.5, 2)
    host = "http://localhost:8080"


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    """테스트 시작 시 초기화"""
    global version_conflicts, successful_updates, stale_reads
    version_conflicts = 0
    successful_updates = 0
    stale_reads = 0

    print("\n" + "=" * 60)
    print("🚀 Catalog Load Test Started")
    print(f"Target: {environment.host}")
    print("=" * 60 + "\n")


@events.test_stop.add_listener
def on_test_stop(environment, **kwargs):
    """테스트 종료 시 결과 출력"""
    print("\n" + "=" * 60)
    print("📊 Test Results Summary")
    print("=" * 60)
    print(f"✅ Successful Updates: {successful_updates}")
    print(f"🔁 Version Conflicts (409): {version_conflicts}")
    print(f"🚨 Stale Reads After Update: {stale_reads}")
    print("=" * 60)

    if stale_reads > 0:
        print("❌ FAIL: stale cache entries served after a write.")
    else:
        print("✅ PASS: no stale reads after writes.")
    print("=" * 60 + "\n")
