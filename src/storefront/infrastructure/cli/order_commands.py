"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from storefront.application.dto import CartItemSpec, CartSpec, OrderDTO
from storefront.application.list_orders import ListMyOrdersHandler, ListOrdersHandler
from storefront.application.place_order import PlaceOrderHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.application.update_order_status import UpdateOrderStatusHandler
from storefront.infrastructure.bootstrap import order_repository, product_repository, settings
from storefront.infrastructure.cli.context import domain_errors, emit_json, state


def _parse_items(raw_items: tuple[str, ...]) -> list[CartItemSpec]:
    """Parse 'ID:QTY' or 'ID:QTY:SIZE' strings into CartItemSpec list.

    The quantity is passed through untouched; the use case coerces it.
    """
    specs: list[CartItemSpec] = []
    for raw in raw_items:
        parts = raw.strip().split(":")
        if len(parts) > 3:
            raise click.BadParameter(
                f"Invalid item format '{raw}'. Expected 'ProductId[:Qty[:Size]]'."
            )
        product_ref = parts[0].strip()
        quantity = parts[1].strip() if len(parts) > 1 else None
        size = parts[2].strip().upper() if len(parts) > 2 and parts[2].strip() else None
        specs.append(CartItemSpec(product_ref=product_ref, quantity=quantity, size=size))
    return specs


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"User:     {dto.user_id or '-'}")
    click.echo(f"Ship to:  {dto.shipping_address or '-'}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Size':>4} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*52}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.size or '':>4} {item.quantity:>5} "
            f"{item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*52}")
    click.echo(f"  {'Order Total':<27} {dto.total_amount:>25}")


@click.command("place")
@click.option(
    "--item", "items", multiple=True,
    help="Cart line as 'ProductId:Qty' or 'ProductId:Qty:Size'. Repeatable.",
)
@click.option("--address", default="", help="Shipping address.")
@click.option("--idempotency-key", default=None, help="Replays return the original order.")
def order_place(items: tuple[str, ...], address: str, idempotency_key: str | None) -> None:
    """Place an order (no login required)."""
    cart = CartSpec(
        items=_parse_items(items),
        shipping_address=address,
        idempotency_key=idempotency_key,
    )
    handler = PlaceOrderHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
        timeout_seconds=settings().order_timeout_seconds,
    )

    with domain_errors():
        dto = handler.handle(cart, principal=state().principal)

    if state().as_json:
        emit_json(dto)
        return
    click.echo(f"Order #{dto.id} created  (status={dto.status})")
    click.echo()
    _display_order(dto)


@click.command("mine")
def order_mine() -> None:
    """List your own orders, newest first."""
    handler = ListMyOrdersHandler(order_repo=order_repository())

    with domain_errors():
        orders = handler.handle(state().principal)

    if state().as_json:
        emit_json(orders)
        return
    if not orders:
        click.echo("No orders found.")
        return
    for dto in orders:
        click.echo(f"#{dto.id:<6} {dto.created_at:<22} {dto.status:<12} {dto.total_amount:>12}")


@click.command("list")
@click.option("--page", default=1, type=int, show_default=True)
@click.option("--limit", default=20, type=int, show_default=True)
def order_list(page: int, limit: int) -> None:
    """List all orders (admin)."""
    handler = ListOrdersHandler(order_repo=order_repository())

    with domain_errors():
        result = handler.handle(state().principal, page=page, limit=limit)

    if state().as_json:
        emit_json(result)
        return
    meta = result.meta
    click.echo(f"Page {meta['page']}/{meta['totalPages']}  ({meta['total']} orders)")
    click.echo(f"{'ID':<7} {'User':<12} {'Status':<12} {'Total':>12}")
    click.echo("-" * 46)
    for dto in result.items:
        click.echo(f"{dto.id:<7} {dto.user_id or '-':<12} {dto.status:<12} {dto.total_amount:>12}")


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show one order (admin, or its owner)."""
    handler = ShowOrderHandler(order_repo=order_repository())

    with domain_errors():
        dto = handler.handle(state().principal, order_id)

    if state().as_json:
        emit_json(dto)
        return
    _display_order(dto)


@click.command("status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to update.")
@click.option("--status", "new_status", required=True, help="New order status.")
def order_status(order_id: int, new_status: str) -> None:
    """Change an order's status (admin)."""
    handler = UpdateOrderStatusHandler(order_repo=order_repository())

    with domain_errors():
        dto = handler.handle(state().principal, order_id, new_status)

    if state().as_json:
        emit_json(dto)
        return
    click.echo(f"Order #{dto.id} status is now {dto.status}")
