"""Application service: Update Product use case."""

from __future__ import annotations

from stockbill.application.dto import ProductDTO
from stockbill.application.mappers import product_to_dto
from stockbill.domain.exceptions import EntityNotFoundError
from stockbill.domain.model.value_objects import Money, TaxRate
from stockbill.domain.repository.product_repository import ProductRepository


class UpdateProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        product_id: str,
        *,
        name: str | None = None,
        variant: str | None = None,
        price: str | None = None,
        quantity: int | None = None,
        category: str | None = None,
        tax_rate: int | None = None,
    ) -> ProductDTO:
        """Overwrite only the supplied fields of a product.

        This does NOT affect any existing invoices; they captured a
        snapshot of the product at issuance time.
        """
        product = self._product_repo.update(
            product_id,
            name=name,
            variant=variant,
            price=Money.of(price) if price is not None else None,
            quantity=quantity,
            category=category,
            tax_rate=TaxRate(tax_rate) if tax_rate is not None else None,
        )
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
        return product_to_dto(product)
