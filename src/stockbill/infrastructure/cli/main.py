from __future__ import annotations

import click

from stockbill.infrastructure.bootstrap import settings
from stockbill.infrastructure.cli.invoice_commands import (
    invoice_issue,
    invoice_list,
    invoice_pdf,
    invoice_search,
    invoice_send,
    invoice_show,
)
from stockbill.infrastructure.cli.product_commands import (
    product_add,
    product_delete,
    product_list,
    product_search,
    product_show,
    product_update,
)
from stockbill.infrastructure.logging_config import configure_logging

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override STOCKBILL_LOG_LEVEL.",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """stockbill: inventory and invoicing back office"""
    config = settings()
    configure_logging(level=(log_level or config.log_level).upper())
    ctx.obj = config


@cli.group()
def invoice() -> None:
    """Issue, look up and send invoices."""


@cli.group()
def product() -> None:
    """Manage the product catalog."""


# Register subcommands
invoice.add_command(invoice_issue)
invoice.add_command(invoice_list)
invoice.add_command(invoice_pdf)
invoice.add_command(invoice_search)
invoice.add_command(invoice_send)
invoice.add_command(invoice_show)
product.add_command(product_add)
product.add_command(product_delete)
product.add_command(product_list)
product.add_command(product_search)
product.add_command(product_show)
product.add_command(product_update)
