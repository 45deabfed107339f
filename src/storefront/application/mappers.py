"""Domain -> DTO mapping shared by the use cases."""

from __future__ import annotations

from storefront.application.dto import (
    CategoryDTO,
    OrderDTO,
    OrderLineItemDTO,
    ProductDTO,
    SizeDTO,
)
from storefront.domain.model.category import Category
from storefront.domain.model.order import Order
from storefront.domain.model.product import Product


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        user_id=order.user_id,
        status=order.status.value,
        items=[
            OrderLineItemDTO(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                line_total=str(item.line_total),
                size=item.size,
            )
            for item in order.items
        ],
        total_amount=str(order.total_amount),
        shipping_address=order.shipping_address,
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
    )


def product_to_dto(product: Product) -> ProductDTO:
    return ProductDTO(
        id=product.id,
        name=product.name,
        category=product.category,
        price=str(product.price),
        brand=product.brand,
        sizes=[SizeDTO(s.label, s.stock) for s in product.sizes],
        count_in_stock=product.count_in_stock,
        status=product.status.value,
        description=product.description,
        image=product.image,
        created_at=product.created_at.strftime("%Y-%m-%d %H:%M UTC"),
    )


def category_to_dto(category: Category) -> CategoryDTO:
    return CategoryDTO(
        id=category.id,
        name=category.name,
        slug=category.slug,
        description=category.description,
    )
