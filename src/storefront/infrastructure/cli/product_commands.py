"""CLI commands for the Product aggregate."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

import click

from storefront.application.add_product import AddProductHandler
from storefront.application.delete_product import DeleteProductHandler
from storefront.application.dto import ProductDTO, ProductSpec, SizeDTO
from storefront.application.list_products import ListProductsHandler, ShowProductHandler
from storefront.application.update_product import UpdateProductHandler
from storefront.domain.repository.product_repository import SORT_KEYS, ProductQuery
from storefront.infrastructure.bootstrap import order_repository, product_repository
from storefront.infrastructure.cli.context import domain_errors, emit_json, state


def _parse_sizes(raw: tuple[str, ...]) -> list[SizeDTO] | None:
    """Parse ('S=3', 'M=5') into SizeDTO list; None when no --size was given."""
    if not raw:
        return None
    sizes: list[SizeDTO] = []
    for pair in raw:
        if "=" not in pair:
            raise click.BadParameter(f"Invalid size '{pair}'. Expected 'Label=Stock'.")
        label, stock_str = pair.split("=", 1)
        try:
            stock = int(stock_str)
        except ValueError:
            raise click.BadParameter(f"Invalid stock '{stock_str}' for size '{label}'.")
        sizes.append(SizeDTO(label=label.strip(), stock=stock))
    return sizes


def _parse_decimal(raw: str | None, name: str) -> Decimal | None:
    if raw is None:
        return None
    try:
        return Decimal(raw)
    except InvalidOperation:
        raise click.BadParameter(f"Invalid {name} '{raw}'.")


def _display_product(dto: ProductDTO) -> None:
    click.echo(f"Product {dto.id}  '{dto.name}'  (status={dto.status})")
    click.echo(f"Category: {dto.category}   Brand: {dto.brand}   Price: {dto.price}")
    click.echo(f"In stock: {dto.count_in_stock}")
    for size in dto.sizes:
        click.echo(f"  {size.label:<4} {size.stock:>6}")


def _product_options(func):
    """Options shared by add and update; all optional at the click level."""
    options = [
        click.option("--name", default=None, help="Product name."),
        click.option("--category", default=None, help="Category, e.g. Top, Bottom, Accessories."),
        click.option("--price", default=None, help="Price (e.g. 15.00)."),
        click.option("--brand", default=None, help="Brand."),
        click.option("--description", default=None),
        click.option("--image", default=None, help="Image URL."),
        click.option("--size", "sizes", multiple=True, help="Size stock as 'Label=Stock'. Repeatable."),
        click.option("--count", "count_in_stock", default=None, type=int, help="Stock count (unsized products)."),
        click.option("--status", default=None, help="available, out_of_stock or discontinued."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _product_spec(name, category, price, brand, description, image, sizes, count_in_stock, status) -> ProductSpec:
    return ProductSpec(
        name=name,
        category=category,
        price=price,
        brand=brand,
        description=description,
        image=image,
        sizes=_parse_sizes(sizes),
        count_in_stock=count_in_stock,
        status=status,
    )


@click.command("add")
@_product_options
def product_add(**fields) -> None:
    """Add a new product to the catalog (admin)."""
    handler = AddProductHandler(product_repo=product_repository())

    with domain_errors():
        dto = handler.handle(state().principal, _product_spec(**fields))

    if state().as_json:
        emit_json(dto)
        return
    click.echo(f"Product {dto.id} '{dto.name}' added at {dto.price}")
    _display_product(dto)


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@_product_options
def product_update(product_id: str, **fields) -> None:
    """Update a product (admin). Existing orders keep their prices."""
    handler = UpdateProductHandler(product_repo=product_repository())

    with domain_errors():
        dto = handler.handle(state().principal, product_id, _product_spec(**fields))

    if state().as_json:
        emit_json(dto)
        return
    _display_product(dto)


@click.command("delete")
@click.option("--id", "product_id", required=True, help="Product ID.")
def product_delete(product_id: str) -> None:
    """Delete a product, or discontinue it if orders reference it (admin)."""
    handler = DeleteProductHandler(
        product_repo=product_repository(),
        order_repo=order_repository(),
    )

    with domain_errors():
        outcome = handler.handle(state().principal, product_id)

    if state().as_json:
        emit_json({"id": product_id, "result": outcome})
        return
    click.echo(f"Product {product_id} {outcome}.")


@click.command("show")
@click.option("--id", "product_id", required=True, help="Product ID.")
def product_show(product_id: str) -> None:
    """Show one product."""
    handler = ShowProductHandler(product_repo=product_repository())

    with domain_errors():
        dto = handler.handle(product_id)

    if state().as_json:
        emit_json(dto)
        return
    _display_product(dto)


@click.command("list")
@click.option("--category", default=None)
@click.option("--min-price", default=None)
@click.option("--max-price", default=None)
@click.option("--q", "keyword", default=None, help="Text search over name, brand and category.")
@click.option("--in-stock", is_flag=True, default=False, help="Only products that can be ordered.")
@click.option("--sort", default="newest", type=click.Choice(SORT_KEYS), show_default=True)
@click.option("--page", default=1, type=int, show_default=True)
@click.option("--limit", default=20, type=int, show_default=True)
def product_list(category, min_price, max_price, keyword, in_stock, sort, page, limit) -> None:
    """List products in the catalog."""
    handler = ListProductsHandler(product_repo=product_repository())

    with domain_errors():
        query = ProductQuery(
            category=category,
            min_price=_parse_decimal(min_price, "min price"),
            max_price=_parse_decimal(max_price, "max price"),
            keyword=keyword,
            in_stock=in_stock,
            sort=sort,
            page=page,
            limit=limit,
        )
        result = handler.handle(query)

    if state().as_json:
        emit_json(result)
        return
    if not result.items:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<34} {'Name':<20} {'Price':>10} {'Stock':>6}  Status")
    click.echo("-" * 86)
    for p in result.items:
        click.echo(f"{p.id:<34} {p.name:<20} {p.price:>10} {p.count_in_stock:>6}  {p.status}")
    meta = result.meta
    click.echo(f"Page {meta['page']}/{meta['totalPages']}  ({meta['total']} products)")
