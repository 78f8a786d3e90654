"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from quikprint.application.dto import OrderDTO
from quikprint.application.update_order_status import parse_status
from quikprint.domain.exceptions import DomainException
from quikprint.domain.model.order import ShippingAddress
from quikprint.infrastructure.cli.context import CliState, pass_state


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.order_number}  (status={dto.status})")
    click.echo(f"ID:       {dto.id}")
    click.echo(f"Customer: {dto.user_id}")
    click.echo(f"Created:  {dto.created_at}")
    addr = dto.shipping_address
    click.echo(f"Ship to:  {addr['name']}, {addr['street']}, {addr['city']}, "
               f"{addr['state']} {addr['zip']}, {addr['country']}")
    click.echo()
    click.echo(f"  {'Product':<24} {'Qty':>6} {'Unit':>12} {'Total':>12}")
    click.echo(f"  {'-' * 57}")
    for item in dto.items:
        click.echo(
            f"  {item.product_id:<24} {item.quantity:>6} {item.unit_price:>12} {item.total_price:>12}"
        )
    click.echo(f"  {'-' * 57}")
    click.echo(f"  {'Subtotal':<44} {dto.subtotal:>12}")
    click.echo(f"  {'Shipping':<44} {dto.shipping:>12}")
    click.echo(f"  {'Tax':<44} {dto.tax:>12}")
    click.echo(f"  {'Order Total (' + dto.currency + ')':<44} {dto.total:>12}")

    if dto.history:
        click.echo()
        click.echo("History:")
        for h in dto.history:
            note = f"  {h.note}" if h.note else ""
            click.echo(f"  {h.created_at}  {h.status:<18}{note}")
    if dto.notes:
        click.echo()
        click.echo("Notes:")
        for n in dto.notes:
            click.echo(f"  {n.created_at}  {n.created_by or '-'}: {n.note}")


@click.command("create")
@click.option("--user", "user_id", required=True, help="Customer user ID.")
@click.option("--name", required=True, help="Recipient name.")
@click.option("--street", required=True)
@click.option("--city", required=True)
@click.option("--state", "region", required=True, help="State or region.")
@click.option("--zip", "zip_code", required=True, help="Postal code.")
@click.option("--country", required=True)
@pass_state
def order_create(
    state: CliState,
    user_id: str,
    name: str,
    street: str,
    city: str,
    region: str,
    zip_code: str,
    country: str,
) -> None:
    """Create an order from the user's cart."""
    address = ShippingAddress(
        name=name, street=street, city=city, state=region, zip=zip_code, country=country
    )

    try:
        dto = state.services.create_order.handle(user_id=user_id, shipping_address=address)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("show")
@click.argument("order_ref")
@click.option("--user", "user_id", default=None, help="Only show the order if it belongs to this user.")
@pass_state
def order_show(state: CliState, order_ref: str, user_id: str | None) -> None:
    """Show an order by ID or order number."""
    try:
        dto = state.services.show_order.handle(order_ref, user_id=user_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--user", "user_id", default=None, help="Only this user's orders.")
@click.option("--status", "status_raw", default=None, help="Filter by status (all users).")
@pass_state
def order_list(state: CliState, user_id: str | None, status_raw: str | None) -> None:
    """List orders, newest first."""
    handler = state.services.list_orders
    try:
        if user_id is not None:
            orders = handler.for_user(user_id)
        else:
            orders = handler.all(parse_status(status_raw) if status_raw else None)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'Order':<22} {'Customer':<16} {'Status':<18} {'Total':>14}")
    click.echo("-" * 73)
    for o in orders:
        click.echo(f"{o.order_number:<22} {o.user_id:<16} {o.status:<18} {o.total:>14}")


@click.command("status")
@click.argument("order_id")
@click.argument("status_raw", metavar="STATUS")
@click.option("--note", default="", help="Reason recorded in the status history.")
@click.option("--actor", default=None, help="Operator making the change.")
@pass_state
def order_status(
    state: CliState, order_id: str, status_raw: str, note: str, actor: str | None
) -> None:
    """Move an order to a new status."""
    try:
        status = parse_status(status_raw)
        dto = state.services.update_order_status.handle(order_id, status, note=note, actor=actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_number} is now {dto.status}.")


@click.command("note")
@click.argument("order_id")
@click.argument("text")
@click.option("--actor", default=None, help="Author of the note.")
@pass_state
def order_note(state: CliState, order_id: str, text: str, actor: str | None) -> None:
    """Attach an internal note to an order."""
    try:
        state.services.add_order_note.handle(order_id, text, actor=actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Note added to order {order_id}.")
