"""CLI commands for discount codes (operator)."""

from __future__ import annotations

from datetime import datetime, timezone

import click

from storefront.application.create_discount import CreateDiscountHandler
from storefront.domain.exceptions import DomainException
from storefront.domain.model.discount import Discount, DiscountKind
from storefront.domain.service.discount_validator import DiscountValidator
from storefront.domain.service.pricing import format_money
from storefront.infrastructure.bootstrap import discount_repository
from storefront.infrastructure.settings import load_settings


def _describe_value(discount: Discount, symbol: str) -> str:
    if discount.kind is DiscountKind.PERCENTAGE:
        return f"{discount.value}%"
    return format_money(discount.value, symbol)


@click.command("add")
@click.option("--code", required=True, help="Code customers will enter (stored upper-case).")
@click.option(
    "--kind",
    type=click.Choice([k.value for k in DiscountKind]),
    required=True,
    help="Percentage off or fixed amount off.",
)
@click.option("--value", required=True, type=int, help="Percent (0-100) or amount in cents.")
@click.option("--min-order", default=0, type=int, help="Minimum subtotal in cents (0 = none).")
@click.option("--max-uses", default=0, type=int, help="Redemption cap (0 = unlimited).")
@click.option("--expires", type=click.DateTime(), default=None, help="Expiry (UTC).")
@click.option("--inactive", is_flag=True, default=False, help="Create the code disabled.")
def discount_add(
    code: str,
    kind: str,
    value: int,
    min_order: int,
    max_uses: int,
    expires: datetime | None,
    inactive: bool,
) -> None:
    """Create a new discount code."""
    handler = CreateDiscountHandler(discount_repository())
    try:
        created = handler.handle(
            code=code,
            kind=DiscountKind(kind),
            value=value,
            min_order_value=min_order,
            max_uses=max_uses,
            expires_at=expires.replace(tzinfo=timezone.utc) if expires else None,
            is_active=not inactive,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Discount {created.code} created.")


@click.command("list")
def discount_list() -> None:
    """List all discount codes."""
    symbol = load_settings().currency_symbol
    discounts = discount_repository().list_all()

    if not discounts:
        click.echo("No discounts found.")
        return

    click.echo(f"{'Code':<16} {'Value':>10} {'Min order':>10} {'Used':>10} {'Expires':<12} {'Active':<6}")
    click.echo("-" * 69)
    for d in discounts:
        uses = f"{d.used_count}/{d.max_uses}" if d.max_uses else str(d.used_count)
        expires = d.expires_at.strftime("%Y-%m-%d") if d.expires_at else "never"
        click.echo(
            f"{d.code:<16} {_describe_value(d, symbol):>10} "
            f"{format_money(d.min_order_value, symbol):>10} {uses:>10} "
            f"{expires:<12} {'yes' if d.is_active else 'no':<6}"
        )


@click.command("check")
@click.argument("code")
@click.option("--subtotal", required=True, type=int, help="Order subtotal in cents.")
def discount_check(code: str, subtotal: int) -> None:
    """Check whether a code applies to a subtotal, without redeeming it."""
    symbol = load_settings().currency_symbol
    try:
        verdict = DiscountValidator(discount_repository()).validate(code, subtotal)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if verdict.is_valid:
        click.echo(f"{verdict.code} applies: -{format_money(verdict.amount, symbol)}")
    else:
        click.echo(f"{verdict.code} does not apply: {verdict.reason.value}")
