import click

from branchstock.infrastructure.bootstrap import build_services
from branchstock.infrastructure.cli.batch_commands import (
    batch_deactivate_expired,
    batch_list,
    batch_notify,
    batch_register,
    batch_remove,
    batch_retire,
    batch_show,
    batch_update,
)
from branchstock.infrastructure.cli.catalog_commands import (
    branch_add,
    branch_list,
    product_add,
    product_list,
)
from branchstock.infrastructure.cli.notification_commands import notifications
from branchstock.infrastructure.cli.stock_commands import (
    stock_adjust,
    stock_allocate,
    stock_available,
    stock_list,
    stock_minimum,
    stock_release,
    stock_transfer,
)
from branchstock.infrastructure.config import get_settings
from branchstock.infrastructure.logging_config import configure_logging


@click.group()
@click.option("--data-dir", type=click.Path(file_okay=False), default=None,
              help="Directory holding the JSON data files.")
@click.option("-v", "--verbose", is_flag=True, help="Log state changes to stderr.")
@click.pass_context
def cli(ctx: click.Context, data_dir: str | None, verbose: bool) -> None:
    """Branch Stock: batch allocation and transfers between branches"""
    try:
        settings = get_settings(data_dir)
    except ValueError as exc:
        raise click.UsageError(str(exc))

    configure_logging("INFO" if verbose else settings.log_level)
    # Tests may hand in pre-built services through ``obj``.
    if ctx.obj is None:
        ctx.obj = build_services(settings)


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def branch() -> None:
    """Manage branches."""


@cli.group()
def batch() -> None:
    """Manage batches."""


@cli.group()
def stock() -> None:
    """Manage branch stock."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_list)
branch.add_command(branch_add)
branch.add_command(branch_list)
batch.add_command(batch_deactivate_expired)
batch.add_command(batch_list)
batch.add_command(batch_notify)
batch.add_command(batch_register)
batch.add_command(batch_remove)
batch.add_command(batch_retire)
batch.add_command(batch_show)
batch.add_command(batch_update)
stock.add_command(stock_adjust)
stock.add_command(stock_allocate)
stock.add_command(stock_available)
stock.add_command(stock_list)
stock.add_command(stock_minimum)
stock.add_command(stock_release)
stock.add_command(stock_transfer)
cli.add_command(notifications)
