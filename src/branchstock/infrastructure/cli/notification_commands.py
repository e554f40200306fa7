"""CLI command listing batches that need an expiration warning."""

from __future__ import annotations

import click

from branchstock.application.show_notifications import ShowNotificationsHandler
from branchstock.infrastructure.bootstrap import Services


@click.command("notifications")
@click.pass_obj
def notifications(services: Services) -> None:
    """Show batches about to expire that have warnings enabled."""
    rows = ShowNotificationsHandler(deriver=services.deriver).handle()

    if not rows:
        click.echo("No batches need attention.")
        return

    click.echo(
        f"{'Batch':<14} {'Product':<20} {'Brand':<12} {'Expires':<11} {'Days':>5} {'Qty':>6} {'Alloc':>6}"
    )
    click.echo("-" * 80)
    for n in rows:
        click.echo(
            f"{n.batch_number:<14} {n.product_name:<20} {n.product_brand:<12} {n.expiration_date:<11} "
            f"{n.days_until_expiration:>5} {n.quantity:>6} {n.allocated:>6}"
        )
