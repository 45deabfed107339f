"""Integration tests for the PlaceOrder use case.

Uses in-memory fake repositories — no file I/O.
"""

import pytest

from storefront.application.dto import CartItemSpec, CartSpec
from storefront.application.place_order import PlaceOrderHandler
from storefront.domain.exceptions import BadRequest, InsufficientStock, OrderTimeout
from storefront.domain.model.inventory import derive_after_write
from storefront.domain.model.principal import Principal
from storefront.domain.model.product import Product, ProductStatus, SizeStock
from storefront.domain.model.value_objects import Money
from tests.fakes import FakeOrderRepository, FakeProductRepository


def _shirt(pid: str = "shirt", price: str = "120.00", **sizes: int) -> Product:
    product = Product(
        id=pid, name="Slim Shirt", category="Top", price=Money.of(price),
        sizes=[SizeStock(label, stock) for label, stock in sizes.items()],
    )
    return derive_after_write(product)


def _mug(pid: str = "mug", stock: int = 5, price: str = "15.00") -> Product:
    product = Product(id=pid, name="Mug", category="Accessories", price=Money.of(price))
    return derive_after_write(product, supplied_count=stock)


def _setup(
    products: list[Product] | None = None,
    timeout_seconds: float | None = None,
) -> tuple[PlaceOrderHandler, FakeOrderRepository, FakeProductRepository]:
    """Build handler with fake repos, optionally pre-loaded with products."""
    if products is None:
        products = [_shirt(S=0, M=5, L=0), _mug()]
    order_repo = FakeOrderRepository()
    product_repo = FakeProductRepository(products)
    handler = PlaceOrderHandler(order_repo, product_repo, timeout_seconds=timeout_seconds)
    return handler, order_repo, product_repo


def _cart(*items: CartItemSpec, **kwargs) -> CartSpec:
    return CartSpec(items=list(items), **kwargs)


class TestPlaceOrderHappyPath:

    def test_creates_pending_order_with_total(self):
        handler, _, _ = _setup()
        dto = handler.handle(_cart(
            CartItemSpec("shirt", 2, "M"),
            CartItemSpec("mug", 3),
        ))
        assert dto.status == "pending"
        assert dto.total_amount == "$285.00"
        assert [i.line_total for i in dto.items] == ["$240.00", "$45.00"]

    def test_persists_order_for_principal(self):
        handler, order_repo, _ = _setup()
        dto = handler.handle(_cart(CartItemSpec("mug", 1)), principal=Principal("u1"))
        saved = order_repo.get_by_id(dto.id)
        assert saved is not None
        assert saved.user_id == "u1"

    def test_guest_checkout(self):
        handler, _, _ = _setup()
        dto = handler.handle(_cart(CartItemSpec("mug", 1)))
        assert dto.user_id is None

    def test_sequential_ids(self):
        handler, _, _ = _setup()
        first = handler.handle(_cart(CartItemSpec("mug", 1)))
        second = handler.handle(_cart(CartItemSpec("mug", 1)))
        assert second.id == first.id + 1

    def test_last_sized_units_flip_product_out_of_stock(self):
        handler, _, product_repo = _setup()
        handler.handle(_cart(CartItemSpec("shirt", 5, "M")))
        product = product_repo.get_by_id("shirt")
        assert [s.stock for s in product.sizes] == [0, 0, 0]
        assert product.count_in_stock == 0
        assert product.status == ProductStatus.OUT_OF_STOCK

    def test_stock_decremented_by_exact_quantities(self):
        handler, _, product_repo = _setup()
        handler.handle(_cart(CartItemSpec("mug", 2), CartItemSpec("mug", 1)))
        assert product_repo.get_by_id("mug").count_in_stock == 2

    @pytest.mark.parametrize("raw, expected", [("3", 3), (None, 1), ("abc", 1), (0, 1), (-2, 1), (2.7, 2)])
    def test_quantity_is_coerced(self, raw, expected):
        handler, _, product_repo = _setup()
        dto = handler.handle(_cart(CartItemSpec("mug", raw)))
        assert dto.items[0].quantity == expected
        assert product_repo.get_by_id("mug").count_in_stock == 5 - expected


class TestPriceSnapshot:

    def test_later_price_change_does_not_affect_order(self):
        handler, order_repo, product_repo = _setup()
        dto = handler.handle(_cart(CartItemSpec("mug", 3)))

        product = product_repo.get_by_id("mug")
        product.update_price(Money.of("99.00"))
        product_repo.save(product)

        saved = order_repo.get_by_id(dto.id)
        assert saved.items[0].unit_price == Money.of("15.00")
        assert str(saved.total_amount) == "$45.00"


class TestPlaceOrderValidation:

    def test_empty_cart(self):
        handler, _, _ = _setup()
        with pytest.raises(BadRequest, match="items is required"):
            handler.handle(_cart())

    @pytest.mark.parametrize("ref", ["not a valid id", "", None, 42])
    def test_malformed_product_ref(self, ref):
        handler, _, _ = _setup()
        with pytest.raises(BadRequest, match="invalid product"):
            handler.handle(_cart(CartItemSpec(ref, 1)))

    def test_unknown_product(self):
        handler, _, _ = _setup()
        with pytest.raises(BadRequest, match="product not found: ghost"):
            handler.handle(_cart(CartItemSpec("ghost", 1)))

    def test_discontinued_product(self):
        mug = derive_after_write(_mug(), requested_status=ProductStatus.DISCONTINUED)
        handler, order_repo, _ = _setup([mug])
        with pytest.raises(BadRequest, match="product discontinued: Mug"):
            handler.handle(_cart(CartItemSpec("mug", 1)))
        assert order_repo.count() == 0

    def test_sized_product_needs_size(self):
        handler, _, _ = _setup()
        with pytest.raises(BadRequest, match="size is required for Slim Shirt"):
            handler.handle(_cart(CartItemSpec("shirt", 1)))

    def test_unknown_size(self):
        handler, _, _ = _setup()
        with pytest.raises(BadRequest, match="unknown size XL"):
            handler.handle(_cart(CartItemSpec("shirt", 1, "XL")))


class TestPlaceOrderInsufficientStock:

    def test_rejected_with_no_order_and_no_stock_change(self):
        handler, order_repo, product_repo = _setup([_mug(stock=3)])
        with pytest.raises(InsufficientStock, match="insufficient stock for Mug"):
            handler.handle(_cart(CartItemSpec("mug", 10)))
        assert order_repo.count() == 0
        assert product_repo.get_by_id("mug").count_in_stock == 3

    def test_other_lines_are_untouched(self):
        handler, order_repo, product_repo = _setup([_mug(stock=5), _mug("cup", stock=1)])
        with pytest.raises(InsufficientStock):
            handler.handle(_cart(CartItemSpec("mug", 2), CartItemSpec("cup", 2)))
        assert product_repo.get_by_id("mug").count_in_stock == 5
        assert product_repo.get_by_id("cup").count_in_stock == 1
        assert order_repo.count() == 0

    def test_repeated_lines_are_counted_together(self):
        handler, _, product_repo = _setup([_mug(stock=3)])
        with pytest.raises(InsufficientStock) as excinfo:
            handler.handle(_cart(CartItemSpec("mug", 2), CartItemSpec("mug", 2)))
        assert excinfo.value.requested == 4
        assert excinfo.value.available == 3
        assert product_repo.get_by_id("mug").count_in_stock == 3

    def test_different_sizes_do_not_share_stock(self):
        handler, _, product_repo = _setup([_shirt(S=1, M=1)])
        handler.handle(_cart(CartItemSpec("shirt", 1, "S"), CartItemSpec("shirt", 1, "M")))
        assert product_repo.get_by_id("shirt").count_in_stock == 0


class TestPlaceOrderRollback:

    def test_save_failure_releases_stock(self):
        handler, order_repo, product_repo = _setup()
        order_repo.fail_on_save = True
        with pytest.raises(OSError):
            handler.handle(_cart(CartItemSpec("shirt", 2, "M"), CartItemSpec("mug", 1)))
        assert product_repo.get_by_id("shirt").count_in_stock == 5
        assert product_repo.get_by_id("mug").count_in_stock == 5

    def test_timeout_rolls_back(self):
        handler, order_repo, product_repo = _setup(timeout_seconds=-1)
        with pytest.raises(OrderTimeout):
            handler.handle(_cart(CartItemSpec("mug", 1)))
        assert product_repo.get_by_id("mug").count_in_stock == 5
        assert order_repo.count() == 0

    def test_too_many_lines_rejected_before_reserving(self, monkeypatch):
        handler, order_repo, product_repo = _setup([_mug(stock=100)])
        taken: list[str] = []
        monkeypatch.setattr(
            product_repo, "decrement_stock", lambda pid, qty, size=None: taken.append(pid)
        )
        with pytest.raises(BadRequest, match="Maximum 50 items per order"):
            handler.handle(_cart(*[CartItemSpec("mug", 1)] * 51))
        assert taken == []
        assert product_repo.get_by_id("mug").count_in_stock == 100
        assert order_repo.count() == 0

    def test_fifty_lines_allowed(self):
        handler, _, product_repo = _setup([_mug(stock=100)])
        dto = handler.handle(_cart(*[CartItemSpec("mug", 1)] * 50))
        assert len(dto.items) == 50
        assert product_repo.get_by_id("mug").count_in_stock == 50


class TestPlaceOrderIdempotency:

    def test_replay_returns_original_order(self):
        handler, order_repo, product_repo = _setup()
        first = handler.handle(_cart(CartItemSpec("mug", 2), idempotency_key="k-1"))
        again = handler.handle(_cart(CartItemSpec("mug", 2), idempotency_key="k-1"))
        assert again.id == first.id
        assert order_repo.count() == 1
        assert product_repo.get_by_id("mug").count_in_stock == 3

    def test_different_keys_place_separate_orders(self):
        handler, order_repo, _ = _setup()
        handler.handle(_cart(CartItemSpec("mug", 1), idempotency_key="a"))
        handler.handle(_cart(CartItemSpec("mug", 1), idempotency_key="b"))
        assert order_repo.count() == 2
