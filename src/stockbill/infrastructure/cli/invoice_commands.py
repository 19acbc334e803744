"""CLI commands for the Invoice aggregate."""

from __future__ import annotations

from pathlib import Path

import click

from stockbill.application.deliver_invoice import DeliverInvoiceHandler, document_path
from stockbill.application.dto import InvoiceDTO, LineItemSpec
from stockbill.application.issue_invoice import IssueInvoiceHandler
from stockbill.application.list_invoices import ListInvoicesHandler
from stockbill.application.search_invoices import SearchInvoicesHandler
from stockbill.application.show_invoice import ShowInvoiceHandler
from stockbill.domain.exceptions import DomainException, EntityNotFoundError
from stockbill.domain.model.product import DEFAULT_VARIANT
from stockbill.domain.repository.product_repository import ProductRepository
from stockbill.infrastructure.bootstrap import (
    invoice_renderer,
    invoice_repository,
    messaging_gateway,
    product_repository,
)


def _parse_items(raw: str) -> list[tuple[str, int]]:
    """Parse 'ID:2,ID:5' into (product_id, quantity) pairs."""
    pairs: list[tuple[str, int]] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductId:Quantity'."
            )
        product_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        pairs.append((product_id.strip(), qty))
    return pairs


def _line_items(
    product_repo: ProductRepository, pairs: list[tuple[str, int]]
) -> list[LineItemSpec]:
    """Snapshot catalog products into line items, computing each line total."""
    specs: list[LineItemSpec] = []
    for product_id, qty in pairs:
        product = product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
        name = product.name
        if product.variant != DEFAULT_VARIANT:
            name = f"{product.name} ({product.variant})"
        specs.append(
            LineItemSpec(
                product_id=product.id,
                name=name,
                quantity=qty,
                price=str(product.price.amount),
                total=str(product.price.amount * qty),
                tax_rate=product.tax_rate.value,
            )
        )
    return specs


def _display_invoice(dto: InvoiceDTO) -> None:
    click.echo(f"Invoice {dto.invoice_number}  (id={dto.id}, serial={dto.serial_no})")
    customer = dto.customer_name
    if dto.customer_phone:
        customer = f"{customer} ({dto.customer_phone})"
    click.echo(f"Customer: {customer}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>10} {'Total':>12}")
    click.echo(f"  {'-'*54}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<24} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>12}"
        )
    click.echo(f"  {'-'*54}")
    click.echo(f"  {'Subtotal':<30} {dto.subtotal:>23}")
    click.echo(f"  {'GST':<30} {dto.tax:>23}")
    click.echo(f"  {'Grand Total':<30} {dto.grand_total:>23}")


def _display_invoice_list(invoices: list[InvoiceDTO]) -> None:
    if not invoices:
        click.echo("No invoices found.")
        return

    click.echo(f"{'ID':<32}  {'Number':<22} {'Customer':<20} {'Total':>12}  Created")
    click.echo("-" * 110)
    for inv in invoices:
        click.echo(
            f"{inv.id:<32}  {inv.invoice_number:<22} {inv.customer_name:<20} "
            f"{inv.grand_total:>12}  {inv.created_at}"
        )


@click.command("issue")
@click.option("--number", "invoice_number", required=True, help="Invoice number.")
@click.option("--customer", required=True, help="Customer name.")
@click.option("--phone", default=None, help="Customer phone number.")
@click.option("--items", required=True, help="Items as 'ProductId:Qty,ProductId:Qty'.")
@click.option("--gst", "tax", default=None, help="GST amount; defaults to 18% of the subtotal.")
@click.pass_obj
def invoice_issue(config, invoice_number, customer, phone, items, tax) -> None:
    """Issue an invoice and take the sold items out of stock."""
    pairs = _parse_items(items)
    product_repo = product_repository(config)
    handler = IssueInvoiceHandler(
        invoice_repo=invoice_repository(config),
        product_repo=product_repo,
    )

    try:
        dto = handler.handle(
            invoice_number=invoice_number,
            customer_name=customer,
            items=_line_items(product_repo, pairs),
            customer_phone=phone,
            tax_override=tax,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if dto.invoice_number != invoice_number.strip():
        click.echo(f"Invoice number '{invoice_number}' was taken; issued as {dto.invoice_number}.")
    _display_invoice(dto)
    for warning in dto.stock_warnings:
        click.echo(f"Warning: {warning}", err=True)


@click.command("list")
@click.pass_obj
def invoice_list(config) -> None:
    """List invoice history, newest first."""
    _display_invoice_list(ListInvoicesHandler(invoice_repository(config)).handle())


@click.command("search")
@click.argument("text", default="")
@click.pass_obj
def invoice_search(config, text: str) -> None:
    """Find invoices by number or customer name."""
    _display_invoice_list(SearchInvoicesHandler(invoice_repository(config)).handle(text))


@click.command("show")
@click.option("--id", "invoice_id", required=True, help="Invoice ID to display.")
@click.pass_obj
def invoice_show(config, invoice_id: str) -> None:
    """Show details of an invoice."""
    try:
        dto = ShowInvoiceHandler(invoice_repository(config)).handle(invoice_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_invoice(dto)


@click.command("pdf")
@click.option("--id", "invoice_id", required=True, help="Invoice ID to render.")
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Target file (defaults to the invoice directory).",
)
@click.pass_obj
def invoice_pdf(config, invoice_id: str, output: Path | None) -> None:
    """Render an invoice to PDF."""
    invoice = invoice_repository(config).get_by_id(invoice_id)
    if invoice is None:
        raise click.ClickException(f"Invoice '{invoice_id}' not found")

    target = output or document_path(config.invoice_dir, invoice)
    target.parent.mkdir(parents=True, exist_ok=True)
    invoice_renderer().render(invoice, target)
    click.echo(f"Invoice {invoice.invoice_number} written to {target}")


@click.command("send")
@click.option("--id", "invoice_id", required=True, help="Invoice ID to send.")
@click.option("--phone", required=True, help="Recipient WhatsApp number.")
@click.pass_obj
def invoice_send(config, invoice_id: str, phone: str) -> None:
    """Send an invoice on WhatsApp (text summary + PDF)."""
    with messaging_gateway(config) as gateway:
        handler = DeliverInvoiceHandler(
            invoice_repo=invoice_repository(config),
            renderer=invoice_renderer(),
            gateway=gateway,
            invoice_dir=config.invoice_dir,
        )
        try:
            receipt = handler.handle(invoice_id, phone)
        except DomainException as exc:
            raise click.ClickException(str(exc))

    click.echo(f"Invoice {receipt.invoice_number} sent to {receipt.chat_id} (text + PDF).")
