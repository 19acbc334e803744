"""Application service: List and Search Products use cases (queries)."""

from __future__ import annotations

from stockbill.application.dto import ProductDTO
from stockbill.application.mappers import product_to_dto
from stockbill.domain.repository.product_repository import SEARCH_LIMIT, ProductRepository


class ListProductsHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self) -> list[ProductDTO]:
        """The whole catalog, latest additions first."""
        return [product_to_dto(p) for p in self._product_repo.list_all()]


class SearchProductsHandler:

    def __init__(self, product_repo: ProductRepository, limit: int = SEARCH_LIMIT) -> None:
        self._product_repo = product_repo
        self._limit = limit

    def handle(self, text: str) -> list[ProductDTO]:
        products = self._product_repo.search((text or "").strip(), limit=self._limit)
        return [product_to_dto(p) for p in products]
