"""CLI commands for the product catalog."""

from __future__ import annotations

import click

from quikprint.infrastructure.cli.context import CliState, pass_state


@click.command("list")
@pass_state
def product_list(state: CliState) -> None:
    """List all products in the catalog."""
    products = state.services.catalog.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<24} {'Name':<28} {'Base price':>16}")
    click.echo("-" * 70)
    for p in products:
        click.echo(f"{p.id:<24} {p.name:<28} {str(p.base_price):>16}")
        for option in p.options:
            values = ", ".join(c.value for c in option.choices)
            suffix = f" [{values}]" if values else ""
            unit = f" ({option.unit})" if option.unit else ""
            click.echo(f"    {option.id}: {option.kind.value}{unit}{suffix}")
