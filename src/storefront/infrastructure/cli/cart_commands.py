"""CLI commands for the shopping cart."""

from __future__ import annotations

import click

from storefront.application.apply_discount import ApplyDiscountHandler
from storefront.application.cart_store import CartStore
from storefront.domain.exceptions import DomainException
from storefront.domain.model.cart import LineItem
from storefront.domain.service.discount_validator import DiscountValidator
from storefront.domain.service.pricing import format_money
from storefront.infrastructure.bootstrap import cart_store, discount_repository
from storefront.infrastructure.cli.options import parse_variants
from storefront.infrastructure.settings import load_settings


def display_cart(store: CartStore) -> None:
    """Shared formatting for displaying the cart."""
    symbol = load_settings().currency_symbol
    if store.cart.is_empty:
        click.echo("Your cart is empty.")
        return

    click.echo(f"  {'Product':<28} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*55}")
    for item in store.items:
        name = item.product_name
        if item.variants:
            name = f"{name} ({item.variant_label})"
        click.echo(
            f"  {name:<28} {item.quantity:>5} "
            f"{format_money(item.unit_price, symbol):>10} "
            f"{format_money(item.line_total, symbol):>10}"
        )
    click.echo(f"  {'-'*55}")
    click.echo(f"  {'Subtotal':<35} {format_money(store.subtotal, symbol):>20}")
    shipping = format_money(store.shipping, symbol) if store.shipping else "FREE"
    click.echo(f"  {'Shipping':<35} {shipping:>20}")
    if store.cart.discount_code:
        label = f"Discount ({store.cart.discount_code})"
        amount = "-" + format_money(store.cart.discount_amount, symbol)
        click.echo(f"  {label:<35} {amount:>20}")
    click.echo(f"  {'Total':<35} {format_money(store.total, symbol):>20}")
    click.echo(f"  {store.item_count} item(s)")


@click.command("add")
@click.option("--product-id", required=True, help="Product ID.")
@click.option("--name", "product_name", required=True, help="Product name.")
@click.option("--price", required=True, type=int, help="Unit price in cents.")
@click.option("--qty", "quantity", default=1, show_default=True, type=int, help="Quantity.")
@click.option("--variant", "variants", multiple=True, help="Variant choice as 'dimension=choice'.")
@click.option("--sku", default="", help="Stock keeping unit.")
def cart_add(
    product_id: str,
    product_name: str,
    price: int,
    quantity: int,
    variants: tuple[str, ...],
    sku: str,
) -> None:
    """Add a product to the cart."""
    store = cart_store()
    try:
        store.add_item(
            LineItem(
                product_id=product_id,
                product_name=product_name,
                unit_price=price,
                quantity=quantity,
                variants=parse_variants(variants),
                sku=sku,
            )
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_cart(store)


@click.command("remove")
@click.option("--product-id", required=True, help="Product ID.")
@click.option("--variant", "variants", multiple=True, help="Variant choice as 'dimension=choice'.")
def cart_remove(product_id: str, variants: tuple[str, ...]) -> None:
    """Remove a line from the cart."""
    store = cart_store()
    try:
        store.remove_item(product_id, parse_variants(variants))
    except DomainException as exc:
        raise click.ClickException(str(exc))
    display_cart(store)


@click.command("set-qty")
@click.option("--product-id", required=True, help="Product ID.")
@click.option("--variant", "variants", multiple=True, help="Variant choice as 'dimension=choice'.")
@click.option("--qty", "quantity", required=True, type=int, help="New quantity (0 removes).")
def cart_set_quantity(product_id: str, variants: tuple[str, ...], quantity: int) -> None:
    """Change the quantity of a cart line."""
    store = cart_store()
    try:
        store.set_quantity(product_id, parse_variants(variants), quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    display_cart(store)


@click.command("show")
def cart_show() -> None:
    """Show the cart and its running totals."""
    display_cart(cart_store())


@click.command("clear")
def cart_clear() -> None:
    """Empty the cart."""
    try:
        cart_store().clear()
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo("Cart cleared.")


@click.command("apply-discount")
@click.argument("code")
def cart_apply_discount(code: str) -> None:
    """Validate a discount code and apply it to the cart."""
    store = cart_store()
    handler = ApplyDiscountHandler(DiscountValidator(discount_repository()), store)

    try:
        verdict = handler.handle(code)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not verdict.is_valid:
        raise click.ClickException(
            f"Discount code '{verdict.code}' is not applicable ({verdict.reason.value})."
        )
    display_cart(store)


@click.command("remove-discount")
def cart_remove_discount() -> None:
    """Remove the discount from the cart."""
    store = cart_store()
    try:
        store.remove_discount()
    except DomainException as exc:
        raise click.ClickException(str(exc))
    display_cart(store)
