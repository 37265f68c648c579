"""영속성 계층."""

from catalog.repositories.product_repository import ProductRepository

__all__ = ["ProductRepository"]
