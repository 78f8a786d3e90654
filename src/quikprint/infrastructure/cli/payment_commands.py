"""CLI commands for payments."""

from __future__ import annotations

import click

from quikprint.domain.exceptions import DomainException
from quikprint.infrastructure.cli.context import CliState, pass_state


@click.command("init")
@click.argument("order_id")
@click.option("--user", "user_id", required=True, help="Customer user ID (must own the order).")
@click.option("--email", required=True, help="Customer email for the checkout.")
@pass_state
def payment_init(state: CliState, order_id: str, user_id: str, email: str) -> None:
    """Open a hosted checkout for an order awaiting payment."""
    try:
        dto = state.services.initialize_payment.handle(order_id, user_id, email)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Reference:    {dto.reference}")
    click.echo(f"Checkout URL: {dto.authorization_url}")


@click.command("verify")
@click.argument("reference")
@pass_state
def payment_verify(state: CliState, reference: str) -> None:
    """Ask the gateway about a payment and apply the result."""
    try:
        dto = state.services.reconciler.verify(reference)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Gateway status: {dto.gateway_status}")
    click.echo(f"Payment:        {dto.payment_status}")
    click.echo(f"Order:          {dto.order_status}")
