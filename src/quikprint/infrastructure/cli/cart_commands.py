"""CLI commands for shopping carts."""

from __future__ import annotations

import click

from quikprint.domain.exceptions import DomainException
from quikprint.infrastructure.cli.context import CliState, parse_options, pass_state


@click.command("add")
@click.option("--user", "user_id", required=True, help="Customer user ID.")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Quantity to order.")
@click.option("--option", "options", multiple=True, help="Configuration as key=value (repeatable).")
@click.option("--file", "uploaded_file", default=None, help="Reference to the uploaded artwork.")
@pass_state
def cart_add(
    state: CliState,
    user_id: str,
    product_id: str,
    quantity: int,
    options: tuple[str, ...],
    uploaded_file: str | None,
) -> None:
    """Price a configuration and put it in the user's cart."""
    config = parse_options(options)

    try:
        dto = state.services.add_to_cart.handle(
            user_id, product_id, quantity, config, uploaded_file=uploaded_file
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Added {dto.quantity} x {dto.product_id} to cart  (total={dto.total_price})")
    click.echo(f"Item ID: {dto.id}")


@click.command("show")
@click.option("--user", "user_id", required=True, help="Customer user ID.")
@pass_state
def cart_show(state: CliState, user_id: str) -> None:
    """Show the user's cart."""
    dto = state.services.show_cart.handle(user_id)

    if not dto.items:
        click.echo("Cart is empty.")
        return

    click.echo(f"  {'Item ID':<36}  {'Product':<24} {'Qty':>6} {'Total':>14}")
    click.echo(f"  {'-' * 84}")
    for item in dto.items:
        click.echo(f"  {item.id:<36}  {item.product_id:<24} {item.quantity:>6} {item.total_price:>14}")
    click.echo(f"  {'-' * 84}")
    click.echo(f"  {'Subtotal (' + str(dto.count) + ' items)':<69} {dto.subtotal:>14}")


@click.command("update")
@click.argument("item_id")
@click.option("--user", "user_id", required=True, help="Customer user ID.")
@click.option("--quantity", type=int, default=None, help="New quantity.")
@click.option("--option", "options", multiple=True, help="Replacement configuration as key=value (repeatable).")
@pass_state
def cart_update(
    state: CliState,
    item_id: str,
    user_id: str,
    quantity: int | None,
    options: tuple[str, ...],
) -> None:
    """Change a cart item's quantity or configuration and re-price it."""
    config = parse_options(options) if options else None
    if quantity is None and config is None:
        raise click.UsageError("Nothing to update: pass --quantity and/or --option.")

    try:
        dto = state.services.update_cart_item.handle(
            item_id, user_id, quantity=quantity, configuration=config
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Updated {dto.id}: {dto.quantity} x {dto.product_id}  (total={dto.total_price})")


@click.command("remove")
@click.argument("item_id")
@click.option("--user", "user_id", required=True, help="Customer user ID.")
@pass_state
def cart_remove(state: CliState, item_id: str, user_id: str) -> None:
    """Remove an item from the user's cart."""
    try:
        state.services.remove_cart_item.handle(item_id, user_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Removed {item_id} from cart.")
