"""CLI command for price quotes."""

from __future__ import annotations

import click

from quikprint.domain.exceptions import DomainException
from quikprint.infrastructure.cli.context import CliState, parse_options, pass_state


@click.command("quote")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", default=0, type=int, help="Quantity (0 reads it from the options).")
@click.option("--option", "options", multiple=True, help="Configuration as key=value (repeatable).")
@pass_state
def price_quote(state: CliState, product_id: str, quantity: int, options: tuple[str, ...]) -> None:
    """Show the price breakdown for a product configuration."""
    config = parse_options(options)

    try:
        dto = state.services.calculate_price.handle(product_id, config, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    cur = dto.currency
    click.echo(f"Quote for {product_id}  (quantity={dto.quantity})")
    click.echo(f"  {'Base price':<28} {cur} {dto.base_price:>12}")
    for name, amount in dto.option_modifiers.items():
        click.echo(f"  {'Option ' + name:<28} {cur} {amount:>12}")
    if dto.tier_price is not None:
        click.echo(f"  {'Tier price':<28} {cur} {dto.tier_price:>12}")
    if dto.dimensional_cost is not None:
        click.echo(f"  {'Dimensional cost':<28} {cur} {dto.dimensional_cost:>12}")
    for name, amount in dto.add_ons.items():
        click.echo(f"  {'Add-on ' + name:<28} {cur} {amount:>12}")
    click.echo(f"  {'Setup fee':<28} {cur} {dto.setup_fee:>12}")
    click.echo(f"  {'Rush fee':<28} {cur} {dto.rush_fee:>12}")
    click.echo(f"  {'-' * 45}")
    click.echo(f"  {'Subtotal':<28} {cur} {dto.subtotal:>12}")
    click.echo(f"  {'Total':<28} {cur} {dto.total:>12}")
