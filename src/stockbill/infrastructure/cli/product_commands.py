"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from stockbill.application.delete_product import DeleteProductHandler
from stockbill.application.dto import ProductDTO
from stockbill.application.list_products import ListProductsHandler, SearchProductsHandler
from stockbill.application.show_product import ShowProductHandler
from stockbill.application.update_product import UpdateProductHandler
from stockbill.application.upsert_product import UpsertProductHandler
from stockbill.domain.exceptions import DomainException
from stockbill.infrastructure.bootstrap import product_repository


def _display_products(products: list[ProductDTO]) -> None:
    if not products:
        click.echo("No products found.")
        return

    click.echo(
        f"{'ID':<32}  {'Name':<20} {'Variant':<10} {'Price':>10} {'Qty':>6} {'GST':>4}"
    )
    click.echo("-" * 89)
    for p in products:
        click.echo(
            f"{p.id:<32}  {p.name:<20} {p.variant:<10} {p.price:>10} {p.quantity:>6} {p.tax_rate:>3}%"
        )


def _display_product(p: ProductDTO) -> None:
    click.echo(f"Product {p.id}")
    click.echo(f"  Name:     {p.name}")
    click.echo(f"  Variant:  {p.variant}")
    click.echo(f"  Category: {p.category}")
    click.echo(f"  Price:    {p.price}")
    click.echo(f"  Stock:    {p.quantity}")
    click.echo(f"  GST:      {p.tax_rate}%")
    click.echo(f"  Added:    {p.created_at}")


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--variant", default="Standard", show_default=True, help="Variant, e.g. '500ml'.")
@click.option("--quantity", required=True, type=click.IntRange(min=0), help="Units to add to stock.")
@click.option("--price", required=True, help="Unit price (e.g. 15.00).")
@click.option("--gst", "tax_rate", type=click.IntRange(0, 100), default=None, help="GST percentage.")
@click.option("--category", default=None, help="Category (defaults to 'General').")
@click.pass_obj
def product_add(config, name, variant, quantity, price, tax_rate, category) -> None:
    """Add a product, or restock it if the name and variant already exist."""
    handler = UpsertProductHandler(product_repo=product_repository(config))

    try:
        result = handler.handle(
            name=name,
            quantity=quantity,
            price=price,
            variant=variant,
            tax_rate=tax_rate,
            category=category,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    p = result.product
    if result.created:
        click.echo(f"Product {p.id} '{p.name} ({p.variant})' added at {p.price}")
    else:
        click.echo(f"Product {p.id} '{p.name} ({p.variant})' restocked to {p.quantity}")


@click.command("list")
@click.pass_obj
def product_list(config) -> None:
    """List all products in the catalog, newest first."""
    _display_products(ListProductsHandler(product_repository(config)).handle())


@click.command("search")
@click.argument("text", default="")
@click.pass_obj
def product_search(config, text: str) -> None:
    """Find products whose name contains TEXT."""
    _display_products(SearchProductsHandler(product_repository(config)).handle(text))


@click.command("show")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def product_show(config, product_id: str) -> None:
    """Show a single product."""
    try:
        dto = ShowProductHandler(product_repository(config)).handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    _display_product(dto)


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--name", default=None)
@click.option("--variant", default=None)
@click.option("--price", default=None, help="New price (e.g. 29.99).")
@click.option("--quantity", type=click.IntRange(min=0), default=None, help="New stock level.")
@click.option("--gst", "tax_rate", type=click.IntRange(0, 100), default=None)
@click.option("--category", default=None)
@click.pass_obj
def product_update(config, product_id, name, variant, price, quantity, tax_rate, category) -> None:
    """Update only the given fields of a product."""
    handler = UpdateProductHandler(product_repo=product_repository(config))

    try:
        dto = handler.handle(
            product_id,
            name=name,
            variant=variant,
            price=price,
            quantity=quantity,
            category=category,
            tax_rate=tax_rate,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product_id} updated.")
    _display_product(dto)


@click.command("delete")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def product_delete(config, product_id: str) -> None:
    """Remove a product from the catalog."""
    try:
        DeleteProductHandler(product_repository(config)).handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product_id} deleted.")
