import click

from storefront.infrastructure.cli.cart_commands import (
    cart_add,
    cart_apply_discount,
    cart_clear,
    cart_remove,
    cart_remove_discount,
    cart_set_quantity,
    cart_show,
)
from storefront.infrastructure.cli.checkout_commands import checkout
from storefront.infrastructure.cli.discount_commands import (
    discount_add,
    discount_check,
    discount_list,
)
from storefront.infrastructure.cli.order_commands import (
    order_advance,
    order_cancel,
    order_list,
    order_notes,
    order_show,
    order_transition,
)
from storefront.infrastructure.logging import configure_logging
from storefront.infrastructure.settings import load_settings


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL (DEBUG, INFO, ...).")
def cli(log_level: str | None) -> None:
    """Storefront — cart, checkout and order fulfillment"""
    configure_logging(log_level or load_settings().log_level)


@cli.group()
def cart() -> None:
    """Manage the shopping cart."""


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def discount() -> None:
    """Manage discount codes."""


# Register subcommands
cart.add_command(cart_add)
cart.add_command(cart_apply_discount)
cart.add_command(cart_clear)
cart.add_command(cart_remove)
cart.add_command(cart_remove_discount)
cart.add_command(cart_set_quantity)
cart.add_command(cart_show)
cli.add_command(checkout)
order.add_command(order_advance)
order.add_command(order_cancel)
order.add_command(order_list)
order.add_command(order_notes)
order.add_command(order_show)
order.add_command(order_transition)
discount.add_command(discount_add)
discount.add_command(discount_check)
discount.add_command(discount_list)
