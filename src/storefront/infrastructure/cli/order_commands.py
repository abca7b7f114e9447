"""CLI commands for the Order aggregate (operator and customer actions)."""

from __future__ import annotations

import click

from storefront.application.annotate_order import AnnotateOrderHandler
from storefront.application.cancel_order import CancelOrderHandler
from storefront.application.dto import OrderDTO
from storefront.application.list_orders import ListOrdersHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.application.status_labels import ACTION_LABELS
from storefront.application.transition_order import (
    AdvanceOrderHandler,
    TransitionOrderHandler,
)
from storefront.domain.exceptions import DomainException
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.value_objects import TrackingInfo
from storefront.infrastructure.bootstrap import order_repository
from storefront.infrastructure.settings import load_settings

_STATUS_CHOICE = click.Choice([s.value for s in OrderStatus])


def display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.order_number}  (status={dto.status_label})")
    click.echo(f"Customer: {dto.customer_name} <{dto.customer_email}>")
    click.echo(f"Placed:   {dto.created_at}")
    click.echo(f"Ship to:  {dto.shipping_address}")
    click.echo()
    click.echo(f"  {'Product':<28} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*55}")
    for item in dto.items:
        name = f"{item.product_name} ({item.variants})" if item.variants else item.product_name
        click.echo(
            f"  {name:<28} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*55}")
    click.echo(f"  {'Subtotal':<35} {dto.subtotal:>20}")
    click.echo(f"  {'Shipping':<35} {dto.shipping_cost:>20}")
    if dto.discount_code:
        label = f"Discount ({dto.discount_code})"
        click.echo(f"  {label:<35} {'-' + dto.discount_amount:>20}")
    click.echo(f"  {'Order Total':<35} {dto.total:>20}")

    if dto.payment_due_at:
        click.echo(f"Payment due: {dto.payment_due_at}")
    if dto.tracking:
        click.echo(f"Tracking:    {dto.tracking}")
    if dto.cancellation_reason:
        click.echo(f"Cancelled:   {dto.cancellation_reason}")
    if dto.admin_notes:
        click.echo(f"Notes:       {dto.admin_notes}")
    if dto.available_actions:
        click.echo(f"Actions:     {', '.join(dto.available_actions)}")

    click.echo()
    click.echo("History:")
    for entry in dto.history:
        note = f"  {entry.note}" if entry.note else ""
        click.echo(f"  {entry.timestamp}  {entry.status}{note}")


def _tracking(carrier: str | None, number: str | None, url: str) -> TrackingInfo | None:
    if carrier is None and number is None:
        return None
    return TrackingInfo(carrier=carrier or "", number=number or "", url=url)


def _show_handler() -> ShowOrderHandler:
    settings = load_settings()
    return ShowOrderHandler(
        order_repository(),
        currency_symbol=settings.currency_symbol,
        processing_name=settings.processing_status_name,
    )


@click.command("show")
@click.option("--number", "order_number", required=True, help="Order number.")
@click.option("--customer-id", default=None, help="Only show if owned by this customer.")
def order_show(order_number: str, customer_id: str | None) -> None:
    """Show details of an existing order."""
    try:
        dto = _show_handler().handle(order_number, customer_id=customer_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_order(dto)


@click.command("list")
@click.option("--customer-id", default=None, help="Only this customer's orders.")
@click.option("--status", type=_STATUS_CHOICE, default=None, help="Only orders in this status.")
def order_list(customer_id: str | None, status: str | None) -> None:
    """List orders, newest first."""
    settings = load_settings()
    handler = ListOrdersHandler(
        order_repository(),
        currency_symbol=settings.currency_symbol,
        processing_name=settings.processing_status_name,
    )
    try:
        rows = handler.handle(
            customer_id=customer_id,
            status=OrderStatus(status) if status else None,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not rows:
        click.echo("No orders found.")
        return

    click.echo(f"{'Order':<20} {'Date':<11} {'Customer':<20} {'Status':<18} {'Items':>5} {'Total':>10}")
    click.echo("-" * 89)
    for row in rows:
        click.echo(
            f"{row.order_number:<20} {row.created_at:<11} {row.customer_name:<20} "
            f"{row.status:<18} {row.item_count:>5} {row.total:>10}"
        )


@click.command("advance")
@click.option("--number", "order_number", required=True, help="Order number.")
@click.option("--note", default="", help="Note recorded in the status history.")
@click.option("--carrier", default=None, help="Shipping carrier (required to ship).")
@click.option("--tracking-number", default=None, help="Tracking number (required to ship).")
@click.option("--tracking-url", default="", help="Tracking URL.")
def order_advance(
    order_number: str,
    note: str,
    carrier: str | None,
    tracking_number: str | None,
    tracking_url: str,
) -> None:
    """Move an order to its next fulfillment step."""
    handler = AdvanceOrderHandler(order_repository())
    try:
        updated = handler.handle(
            order_number,
            note=note,
            tracking=_tracking(carrier, tracking_number, tracking_url),
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_number}: {ACTION_LABELS[updated.status]} done, now {updated.status.value}.")


@click.command("transition")
@click.option("--number", "order_number", required=True, help="Order number.")
@click.option("--to", "next_status", required=True, type=_STATUS_CHOICE, help="Target status.")
@click.option("--note", default="", help="Note recorded in the status history.")
@click.option("--carrier", default=None, help="Shipping carrier (required to ship).")
@click.option("--tracking-number", default=None, help="Tracking number (required to ship).")
@click.option("--tracking-url", default="", help="Tracking URL.")
def order_transition(
    order_number: str,
    next_status: str,
    note: str,
    carrier: str | None,
    tracking_number: str | None,
    tracking_url: str,
) -> None:
    """Move an order to a named status, if the state machine allows it."""
    handler = TransitionOrderHandler(order_repository())
    try:
        updated = handler.handle(
            order_number,
            OrderStatus(next_status),
            note=note,
            tracking=_tracking(carrier, tracking_number, tracking_url),
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_number} is now {updated.status.value}.")


@click.command("cancel")
@click.option("--number", "order_number", required=True, help="Order number.")
@click.option("--reason", default="", help="Cancellation reason.")
@click.option("--customer-id", default=None, help="Cancel as this customer (self-service).")
def order_cancel(order_number: str, reason: str, customer_id: str | None) -> None:
    """Cancel an order that has not started processing."""
    handler = CancelOrderHandler(order_repository())
    try:
        handler.handle(order_number, reason=reason, customer_id=customer_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_number} cancelled.")


@click.command("notes")
@click.option("--number", "order_number", required=True, help="Order number.")
@click.option("--text", required=True, help="Internal notes (replaces existing).")
def order_notes(order_number: str, text: str) -> None:
    """Set internal operator notes on an order."""
    handler = AnnotateOrderHandler(order_repository())
    try:
        handler.handle(order_number, text)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Notes saved for order {order_number}.")
