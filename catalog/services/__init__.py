"""비즈니스 로직 서비스."""

from catalog.services.cache_service import CacheService
from catalog.services.product_service import ProductService

__all__ = ["CacheService", "ProductService"]
