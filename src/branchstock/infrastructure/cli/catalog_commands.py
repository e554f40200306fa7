"""CLI commands for the reference data this core depends on.

Products and branches are owned by other systems; these commands exist so
the engine can be exercised on its own.
"""

from __future__ import annotations

import click

from branchstock.application.add_branch import AddBranchHandler
from branchstock.application.add_product import AddProductHandler
from branchstock.domain.exceptions import DomainException
from branchstock.infrastructure.bootstrap import Services


@click.command("add")
@click.option("--sku", required=True, help="Stock keeping unit.")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Unit price (e.g. 15.00).")
@click.option("--brand", default="", help="Brand name.")
@click.option("--unit", default="unit", show_default=True, help="Unit of measure.")
@click.pass_obj
def product_add(services: Services, sku: str, name: str, price: str, brand: str, unit: str) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(product_repo=services.products)

    try:
        product = handler.handle(sku=sku, name=name, price=price, brand=brand, unit=unit)
    except DomainException as exc:
        raise click.ClickException(f"{exc.kind}: {exc}")

    click.echo(f"Product #{product.id} '{product.name}' ({product.sku}) added at {product.unit_price}")


@click.command("list")
@click.pass_obj
def product_list(services: Services) -> None:
    """List all products in the catalog."""
    products = services.products.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'SKU':<12} {'Name':<24} {'Price':>10} {'Active':>7}")
    click.echo("-" * 63)
    for p in products:
        click.echo(
            f"{p.id:<6} {p.sku:<12} {p.name:<24} {str(p.unit_price):>10} "
            f"{'yes' if p.active else 'no':>7}"
        )


@click.command("add")
@click.option("--name", required=True, help="Branch name.")
@click.pass_obj
def branch_add(services: Services, name: str) -> None:
    """Register a branch that can hold stock."""
    handler = AddBranchHandler(branch_repo=services.branches)

    try:
        branch = handler.handle(name=name)
    except DomainException as exc:
        raise click.ClickException(f"{exc.kind}: {exc}")

    click.echo(f"Branch #{branch.id} '{branch.name}' added")


@click.command("list")
@click.pass_obj
def branch_list(services: Services) -> None:
    """List all branches."""
    branches = services.branches.list_all()

    if not branches:
        click.echo("No branches found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Active':>7}")
    click.echo("-" * 39)
    for b in branches:
        click.echo(f"{b.id:<6} {b.name:<24} {'yes' if b.active else 'no':>7}")
