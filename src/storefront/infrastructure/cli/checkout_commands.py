"""CLI command for checking out the cart."""

from __future__ import annotations

import click

from storefront.application.dto import to_order_dto
from storefront.application.place_order import PlaceOrderHandler
from storefront.domain.exceptions import DomainException
from storefront.domain.model.value_objects import CustomerIdentity, ShippingAddress
from storefront.infrastructure.bootstrap import (
    cart_store,
    discount_repository,
    order_repository,
)
from storefront.infrastructure.cli.order_commands import display_order
from storefront.infrastructure.identity import StaticIdentityProvider
from storefront.infrastructure.settings import load_settings


@click.command("checkout")
@click.option("--customer-id", required=True, envvar="STOREFRONT_CUSTOMER_ID", help="Signed-in customer ID.")
@click.option("--email", required=True, envvar="STOREFRONT_CUSTOMER_EMAIL", help="Customer email.")
@click.option("--customer-name", required=True, envvar="STOREFRONT_CUSTOMER_NAME", help="Customer name.")
@click.option("--ship-name", required=True, help="Recipient name.")
@click.option("--street", required=True, help="Street address.")
@click.option("--apt", default="", help="Apartment / suite.")
@click.option("--city", required=True, help="City.")
@click.option("--state", required=True, help="State (e.g. CA).")
@click.option("--zip", "zip_code", required=True, help="ZIP code (12345 or 12345-6789).")
@click.option("--country", default="US", show_default=True, help="Country.")
@click.option("--phone", default="", help="Phone number (optional).")
def checkout(
    customer_id: str,
    email: str,
    customer_name: str,
    ship_name: str,
    street: str,
    apt: str,
    city: str,
    state: str,
    zip_code: str,
    country: str,
    phone: str,
) -> None:
    """Place an order for everything in the cart."""
    settings = load_settings()
    identity = StaticIdentityProvider(
        CustomerIdentity(id=customer_id, email=email, name=customer_name)
    )
    address = ShippingAddress(
        name=ship_name,
        street=street,
        apt=apt,
        city=city,
        state=state,
        zip=zip_code,
        country=country,
        phone=phone,
    )
    handler = PlaceOrderHandler(
        order_repo=order_repository(),
        discount_repo=discount_repository(),
        rates=settings.shipping_rates,
        order_prefix=settings.order_prefix,
    )

    try:
        placed = handler.handle(cart_store(), address, identity.current_customer())
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_order(
        to_order_dto(placed, settings.currency_symbol, settings.processing_status_name)
    )
    click.echo()
    click.echo(f"Thank you for shopping at {settings.store_name}. An invoice will follow.")
