"""Application service: Add Product use case.

Adding a product whose (name, variant) already exists does not create a
second record: the stock is added to the existing one and its price
(plus category and tax rate, when given) is replaced.
"""

from __future__ import annotations

import logging

from stockbill.application.dto import UpsertResultDTO
from stockbill.application.mappers import product_to_dto
from stockbill.domain.exceptions import DuplicateKeyError, ValidationError
from stockbill.domain.model.product import DEFAULT_VARIANT, Product
from stockbill.domain.model.value_objects import Money, TaxRate
from stockbill.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class UpsertProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        name: str,
        quantity: int,
        price: str,
        variant: str = DEFAULT_VARIANT,
        tax_rate: int | None = None,
        category: str | None = None,
    ) -> UpsertResultDTO:
        """Create the product, or merge into the existing (name, variant)."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if not variant or not variant.strip():
            raise ValidationError("Product variant is required")

        name, variant = name.strip(), variant.strip()
        unit_price = Money.of(price)
        rate = TaxRate(tax_rate) if tax_rate is not None else None

        merged = self._restock(name, variant, quantity, unit_price, category, rate)
        if merged is not None:
            return merged

        product = Product.create(
            name=name,
            variant=variant,
            price=unit_price,
            quantity=quantity,
            category=category,
            tax_rate=rate,
        )
        try:
            self._product_repo.add(product)
        except DuplicateKeyError:
            # Another caller inserted the same key first; fall back to merging.
            merged = self._restock(name, variant, quantity, unit_price, category, rate)
            if merged is None:
                raise
            return merged

        logger.info("Added product %s '%s (%s)'", product.id, product.name, product.variant)
        return UpsertResultDTO(product=product_to_dto(product), created=True)

    def _restock(
        self,
        name: str,
        variant: str,
        quantity: int,
        price: Money,
        category: str | None,
        tax_rate: TaxRate | None,
    ) -> UpsertResultDTO | None:
        product = self._product_repo.restock(
            name, variant, quantity, price, category=category, tax_rate=tax_rate
        )
        if product is None:
            return None
        logger.info(
            "Restocked product %s '%s (%s)' to %d",
            product.id,
            product.name,
            product.variant,
            product.quantity,
        )
        return UpsertResultDTO(product=product_to_dto(product), created=False)
