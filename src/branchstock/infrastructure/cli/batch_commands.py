"""CLI commands for the Batch aggregate."""

from __future__ import annotations

import click

from branchstock.application.dto import BatchDTO
from branchstock.application.register_batch import RegisterBatchHandler
from branchstock.application.retire_batch import (
    DeactivateExpiredHandler,
    RemoveBatchHandler,
    RetireBatchHandler,
)
from branchstock.application.show_batches import ShowBatchesHandler
from branchstock.application.update_batch import (
    SetBatchNotificationHandler,
    UpdateBatchHandler,
)
from branchstock.domain.exceptions import DomainException
from branchstock.infrastructure.bootstrap import Services


def _status(dto: BatchDTO) -> str:
    if not dto.active:
        return "INACTIVE"
    if dto.expired:
        return "EXPIRED"
    if dto.expiring_soon:
        return "EXPIRING"
    return "OK"


def _display_batch(dto: BatchDTO) -> None:
    click.echo(f"Batch #{dto.id}  {dto.batch_number}  (status={_status(dto)})")
    click.echo(f"Product:    #{dto.product_id}")
    click.echo(f"Expires:    {dto.expiration_date}  ({dto.days_until_expiration} days, warn at {dto.warning_days})")
    click.echo(f"Quantity:   {dto.quantity}  (allocated {dto.allocated}, available {dto.available})")
    click.echo(f"Notify:     {'on' if dto.notification_enabled else 'off'}")


@click.command("register")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--number", "batch_number", required=True, help="Batch number (unique per product).")
@click.option("--quantity", required=True, type=int, help="Units received.")
@click.option("--expires", "expiration_date", required=True, help="Expiration date, YYYY-MM-DD.")
@click.option("--warning-days", type=int, default=None, help="Days of warning before expiration.")
@click.pass_obj
def batch_register(
    services: Services,
    product_id: str,
    batch_number: str,
    quantity: int,
    expiration_date: str,
    warning_days: int | None,
) -> None:
    """Register a newly received batch."""
    handler = RegisterBatchHandler(registry=services.registry, clock=services.clock)

    try:
        dto = handler.handle(
            product_id=product_id,
            batch_number=batch_number,
            quantity=quantity,
            expiration_date=expiration_date,
            warning_days=warning_days,
        )
    except DomainException as exc:
        raise click.ClickException(f"{exc.kind}: {exc}")

    click.echo(f"Batch #{dto.id} registered")
    _display_batch(dto)


@click.command("update")
@click.option("--id", "batch_id", required=True, help="Batch ID.")
@click.option("--number", "batch_number", default=None, help="New batch number.")
@click.option("--quantity", type=int, default=None, help="New declared quantity.")
@click.option("--expires", "expiration_date", default=None, help="New expiration date, YYYY-MM-DD.")
@click.option("--warning-days", type=int, default=None, help="New warning window in days.")
@click.pass_obj
def batch_update(
    services: Services,
    batch_id: str,
    batch_number: str | None,
    quantity: int | None,
    expiration_date: str | None,
    warning_days: int | None,
) -> None:
    """Correct a batch's number, quantity, date or warning window."""
    handler = UpdateBatchHandler(
        registry=services.registry, ledger=services.ledger, clock=services.clock
    )

    try:
        dto = handler.handle(
            batch_id=batch_id,
            batch_number=batch_number,
            quantity=quantity,
            expiration_date=expiration_date,
            warning_days=warning_days,
        )
    except DomainException as exc:
        raise click.ClickException(f"{exc.kind}: {exc}")

    _display_batch(dto)


@click.command("show")
@click.option("--id", "batch_id", required=True, help="Batch ID to display.")
@click.pass_obj
def batch_show(services: Services, batch_id: str) -> None:
    """Show details of a batch."""
    handler = ShowBatchesHandler(
        registry=services.registry, ledger=services.ledger, clock=services.clock
    )

    try:
        dto = handler.handle_one(batch_id)
    except DomainException as exc:
        raise click.ClickException(f"{exc.kind}: {exc}")

    _display_batch(dto)


@click.command("list")
@click.option("--product", "product_id", default=None, help="Only batches of this product.")
@click.option("--expiring", is_flag=True, help="Only active batches inside their warning window.")
@click.option("--expired", is_flag=True, help="Only batches past their expiration date.")
@click.pass_obj
def batch_list(services: Services, product_id: str | None, expiring: bool, expired: bool) -> None:
    """List batches."""
    handler = ShowBatchesHandler(
        registry=services.registry, ledger=services.ledger, clock=services.clock
    )

    try:
        rows = handler.handle(product_id=product_id, expiring=expiring, expired=expired)
    except DomainException as exc:
        raise click.ClickException(f"{exc.kind}: {exc}")

    if not rows:
        click.echo("No batches found.")
        return

    click.echo(
        f"{'ID':<6} {'Number':<14} {'Product':<8} {'Qty':>6} {'Alloc':>6} "
        f"{'Expires':<11} {'Days':>5} {'Status':<9}"
    )
    click.echo("-" * 72)
    for dto in rows:
        click.echo(
            f"{dto.id:<6} {dto.batch_number:<14} {dto.product_id:<8} {dto.quantity:>6} "
            f"{dto.allocated:>6} {dto.expiration_date:<11} {dto.days_until_expiration:>5} "
            f"{_status(dto):<9}"
        )


@click.command("notify")
@click.option("--id", "batch_id", required=True, help="Batch ID.")
@click.argument("state", type=click.Choice(["on", "off"]))
@click.pass_obj
def batch_notify(services: Services, batch_id: str, state: str) -> None:
    """Turn expiration warnings for a batch on or off."""
    enabled = state == "on"
    handler = SetBatchNotificationHandler(registry=services.registry)

    try:
        handler.handle(batch_id, enabled)
    except DomainException as exc:
        raise click.ClickException(f"{exc.kind}: {exc}")

    click.echo(f"Notifications for batch #{batch_id} turned {'on' if enabled else 'off'}")


@click.command("retire")
@click.option("--id", "batch_id", required=True, help="Batch ID.")
@click.pass_obj
def batch_retire(services: Services, batch_id: str) -> None:
    """Deactivate a batch by hand."""
    handler = RetireBatchHandler(registry=services.registry)

    try:
        handler.handle(batch_id)
    except DomainException as exc:
        raise click.ClickException(f"{exc.kind}: {exc}")

    click.echo(f"Batch #{batch_id} retired")


@click.command("remove")
@click.option("--id", "batch_id", required=True, help="Batch ID.")
@click.pass_obj
def batch_remove(services: Services, batch_id: str) -> None:
    """Delete a batch that no branch holds stock of."""
    handler = RemoveBatchHandler(registry=services.registry)

    try:
        handler.handle(batch_id)
    except DomainException as exc:
        raise click.ClickException(f"{exc.kind}: {exc}")

    click.echo(f"Batch #{batch_id} removed")


@click.command("deactivate-expired")
@click.pass_obj
def batch_deactivate_expired(services: Services) -> None:
    """Deactivate every batch past its expiration date."""
    count = DeactivateExpiredHandler(registry=services.registry).handle()
    click.echo(f"Deactivated {count} expired batch(es)")
