import logging
from pathlib import Path

import click
import uvicorn

from quikprint.infrastructure.cli.cart_commands import (
    cart_add,
    cart_remove,
    cart_show,
    cart_update,
)
from quikprint.infrastructure.cli.context import CliState, pass_state
from quikprint.infrastructure.cli.order_commands import (
    order_create,
    order_list,
    order_note,
    order_show,
    order_status,
)
from quikprint.infrastructure.cli.payment_commands import payment_init, payment_verify
from quikprint.infrastructure.cli.pricing_commands import price_quote
from quikprint.infrastructure.cli.product_commands import product_list
from quikprint.infrastructure.config import ConfigurationError, Settings
from quikprint.infrastructure.http.app import create_app


@click.group()
@click.option("--env-file", type=click.Path(path_type=Path), default=None, help="Path to a .env file.")
@click.option("--log-level", default=None, help="Logging level (default: QUIKPRINT_LOG_LEVEL or INFO).")
@click.pass_context
def cli(ctx: click.Context, env_file: Path | None, log_level: str | None) -> None:
    """QuikPrint: print-on-demand orders and payments"""
    if ctx.obj is None:
        try:
            ctx.obj = CliState(Settings.from_env(env_file))
        except ConfigurationError as exc:
            raise click.ClickException(str(exc))
    level = (log_level or ctx.obj.settings.log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.group()
def product() -> None:
    """Browse the catalog."""


@cli.group()
def price() -> None:
    """Price configurations."""


@cli.group()
def cart() -> None:
    """Manage carts."""


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def payment() -> None:
    """Manage payments."""


@cli.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, type=int, show_default=True)
@pass_state
def serve(state: CliState, host: str, port: int) -> None:
    """Run the HTTP API."""
    uvicorn.run(create_app(state.services), host=host, port=port, log_level=state.settings.log_level.lower())


# Register subcommands
product.add_command(product_list)
price.add_command(price_quote)
cart.add_command(cart_add)
cart.add_command(cart_show)
cart.add_command(cart_update)
cart.add_command(cart_remove)
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_note)
order.add_command(order_show)
order.add_command(order_status)
payment.add_command(payment_init)
payment.add_command(payment_verify)
