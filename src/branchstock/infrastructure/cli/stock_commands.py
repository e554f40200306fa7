"""CLI commands for branch stock: allocation, corrections and transfers."""

from __future__ import annotations

import click

from branchstock.application.adjust_stock import AdjustStockHandler, SetMinimumStockHandler
from branchstock.application.allocate_stock import AllocateStockHandler
from branchstock.application.dto import BranchStockDTO
from branchstock.application.release_stock import ReleaseStockHandler
from branchstock.application.show_stock import ShowStockHandler
from branchstock.application.transfer_stock import TransferStockHandler
from branchstock.domain.exceptions import DomainException
from branchstock.infrastructure.bootstrap import Services


def _display_stock(dto: BranchStockDTO) -> None:
    low = "  LOW" if dto.low_stock else ""
    click.echo(
        f"Stock #{dto.id}: branch #{dto.branch_id}, batch #{dto.batch_id}, "
        f"qty {dto.quantity} (min {dto.minimum_stock}){low}"
    )


@click.command("allocate")
@click.option("--branch", "branch_id", required=True, help="Branch ID receiving the stock.")
@click.option("--batch", "batch_id", required=True, help="Batch ID to allocate from.")
@click.option("--quantity", required=True, type=int, help="Units to allocate.")
@click.option("--minimum", "minimum_stock", type=int, default=0, show_default=True,
              help="Low-stock threshold for this allocation.")
@click.pass_obj
def stock_allocate(
    services: Services,
    branch_id: str,
    batch_id: str,
    quantity: int,
    minimum_stock: int,
) -> None:
    """Allocate part of a batch to a branch."""
    handler = AllocateStockHandler(ledger=services.ledger)

    try:
        dto = handler.handle(
            branch_id=branch_id,
            batch_id=batch_id,
            quantity=quantity,
            minimum_stock=minimum_stock,
        )
    except DomainException as exc:
        raise click.ClickException(f"{exc.kind}: {exc}")

    _display_stock(dto)


@click.command("adjust")
@click.option("--id", "stock_id", required=True, help="Stock ID.")
@click.option("--quantity", required=True, type=int, help="Counted quantity.")
@click.pass_obj
def stock_adjust(services: Services, stock_id: str, quantity: int) -> None:
    """Correct a stock row to a counted quantity."""
    handler = AdjustStockHandler(ledger=services.ledger)

    try:
        dto = handler.handle(stock_id, quantity)
    except DomainException as exc:
        raise click.ClickException(f"{exc.kind}: {exc}")

    if dto.quantity == 0:
        click.echo(f"Stock #{dto.id} adjusted to 0 and removed")
    else:
        _display_stock(dto)


@click.command("minimum")
@click.option("--id", "stock_id", required=True, help="Stock ID.")
@click.option("--value", "minimum_stock", required=True, type=int, help="New low-stock threshold.")
@click.pass_obj
def stock_minimum(services: Services, stock_id: str, minimum_stock: int) -> None:
    """Change the low-stock threshold of a stock row."""
    handler = SetMinimumStockHandler(ledger=services.ledger)

    try:
        dto = handler.handle(stock_id, minimum_stock)
    except DomainException as exc:
        raise click.ClickException(f"{exc.kind}: {exc}")

    _display_stock(dto)


@click.command("release")
@click.option("--id", "stock_id", required=True, help="Stock ID.")
@click.pass_obj
def stock_release(services: Services, stock_id: str) -> None:
    """Remove a stock row, returning its units to the batch."""
    handler = ReleaseStockHandler(ledger=services.ledger)

    try:
        dto = handler.handle(stock_id)
    except DomainException as exc:
        raise click.ClickException(f"{exc.kind}: {exc}")

    click.echo(f"Stock #{dto.id} released ({dto.quantity} units back to batch #{dto.batch_id})")


@click.command("transfer")
@click.option("--from", "source_stock_id", required=True, help="Source stock ID.")
@click.option("--to", "target_branch_id", required=True, help="Destination branch ID.")
@click.option("--quantity", required=True, type=int, help="Units to move.")
@click.pass_obj
def stock_transfer(
    services: Services,
    source_stock_id: str,
    target_branch_id: str,
    quantity: int,
) -> None:
    """Move units of a batch from one branch to another."""
    handler = TransferStockHandler(coordinator=services.coordinator)

    try:
        dto = handler.handle(
            source_stock_id=source_stock_id,
            target_branch_id=target_branch_id,
            quantity=quantity,
        )
    except DomainException as exc:
        raise click.ClickException(f"{exc.kind}: {exc}")

    click.echo(f"Transfer {dto.status}: {dto.quantity} units")
    if dto.source_removed:
        click.echo(f"Stock #{dto.source.id} emptied and removed")
    else:
        _display_stock(dto.source)
    _display_stock(dto.target)


@click.command("list")
@click.option("--branch", "branch_id", default=None, help="Only rows held by this branch.")
@click.option("--product", "product_id", default=None, help="Only rows of this product.")
@click.option("--batch", "batch_id", default=None, help="Only rows granted from this batch.")
@click.option("--low", "low_only", is_flag=True, help="Only rows at or below their minimum.")
@click.pass_obj
def stock_list(
    services: Services,
    branch_id: str | None,
    product_id: str | None,
    batch_id: str | None,
    low_only: bool,
) -> None:
    """List stock rows."""
    handler = ShowStockHandler(ledger=services.ledger)

    try:
        rows = handler.handle(
            branch_id=branch_id, product_id=product_id, batch_id=batch_id, low_only=low_only
        )
    except DomainException as exc:
        raise click.ClickException(f"{exc.kind}: {exc}")

    if not rows:
        click.echo("No stock found.")
        return

    click.echo(f"{'ID':<6} {'Branch':<8} {'Product':<8} {'Batch':<8} {'Qty':>6} {'Min':>6} {'Low':>4}")
    click.echo("-" * 52)
    for dto in rows:
        click.echo(
            f"{dto.id:<6} {dto.branch_id:<8} {dto.product_id:<8} {dto.batch_id:<8} "
            f"{dto.quantity:>6} {dto.minimum_stock:>6} {'yes' if dto.low_stock else '':>4}"
        )


@click.command("available")
@click.option("--batch", "batch_id", required=True, help="Batch ID.")
@click.pass_obj
def stock_available(services: Services, batch_id: str) -> None:
    """Show how many units of a batch are still unallocated."""
    handler = ShowStockHandler(ledger=services.ledger)

    try:
        available = handler.available(batch_id)
    except DomainException as exc:
        raise click.ClickException(f"{exc.kind}: {exc}")

    click.echo(f"Batch #{batch_id}: {available} units available to allocate")
