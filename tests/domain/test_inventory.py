"""Unit tests for the Inventory Model (stock and status derivation)."""

import copy

import pytest

from storefront.domain.exceptions import BadRequest, InsufficientStock, InvariantViolation
from storefront.domain.model.inventory import (
    apply_decrement,
    apply_increment,
    check_consistent,
    derive_after_write,
    derive_status,
)
from storefront.domain.model.product import Product, ProductStatus, SizeStock
from storefront.domain.model.value_objects import Money


def _shirt(*sizes: tuple[str, int], **kwargs) -> Product:
    return Product(
        id="p1",
        name="Slim Shirt",
        category="Top",
        price=Money.of("120.00"),
        sizes=[SizeStock(label, stock) for label, stock in sizes],
        **kwargs,
    )


def _mug(count: int = 0, **kwargs) -> Product:
    return Product(
        id="p2", name="Mug", category="Accessories", price=Money.of("9.00"),
        count_in_stock=count, **kwargs,
    )


class TestDeriveStatus:

    def test_positive_stock_is_available(self):
        assert derive_status(1) == ProductStatus.AVAILABLE

    def test_zero_stock_is_out_of_stock(self):
        assert derive_status(0) == ProductStatus.OUT_OF_STOCK

    def test_discontinued_is_sticky(self):
        assert derive_status(5, ProductStatus.DISCONTINUED) == ProductStatus.DISCONTINUED


class TestDeriveSizedProducts:

    def test_count_is_sum_of_sizes(self):
        product = derive_after_write(_shirt(("S", 0), ("M", 5), ("L", 0)))
        assert product.count_in_stock == 5
        assert product.status == ProductStatus.AVAILABLE

    def test_supplied_count_is_overwritten_when_lenient(self):
        product = derive_after_write(_shirt(("S", 2), ("M", 3)), supplied_count=99)
        assert product.count_in_stock == 5

    def test_matching_supplied_count_passes_strict(self):
        product = derive_after_write(_shirt(("S", 2), ("M", 3)), supplied_count=5, strict=True)
        assert product.count_in_stock == 5

    def test_mismatched_supplied_count_fails_strict(self):
        product = _shirt(("S", 2), ("M", 3), count_in_stock=5, status=ProductStatus.AVAILABLE)
        with pytest.raises(InvariantViolation, match="does not match sum of sizes 5"):
            derive_after_write(product, supplied_count=7, strict=True)
        assert product.count_in_stock == 5

    def test_sized_category_without_sizes_has_no_stock(self):
        product = derive_after_write(_shirt(count_in_stock=4))
        assert product.count_in_stock == 0
        assert product.status == ProductStatus.OUT_OF_STOCK

    def test_unsized_category_with_sizes_derives_from_sizes(self):
        product = Product(
            id="p3", name="Cap", category="Accessories", price=Money.of("5"),
            sizes=[SizeStock("M", 2), SizeStock("L", 1)], count_in_stock=10,
        )
        derive_after_write(product)
        assert product.count_in_stock == 3


class TestDeriveUnsizedProducts:

    def test_supplied_count_is_authoritative(self):
        product = derive_after_write(_mug(), supplied_count=7)
        assert product.count_in_stock == 7
        assert product.status == ProductStatus.AVAILABLE

    def test_count_left_alone_when_not_supplied(self):
        product = derive_after_write(_mug(3))
        assert product.count_in_stock == 3

    def test_negative_count_rejected(self):
        with pytest.raises(InvariantViolation, match="non-negative"):
            derive_after_write(_mug(), supplied_count=-1)


class TestDeriveDiscontinued:

    def test_requested_discontinued_is_kept(self):
        product = derive_after_write(_mug(5), requested_status=ProductStatus.DISCONTINUED)
        assert product.status == ProductStatus.DISCONTINUED
        assert product.count_in_stock == 5

    def test_stock_still_derived_when_discontinued(self):
        product = derive_after_write(
            _shirt(("M", 4)), requested_status=ProductStatus.DISCONTINUED
        )
        assert product.count_in_stock == 4
        assert product.status == ProductStatus.DISCONTINUED

    def test_unrelated_write_does_not_undo_discontinued(self):
        product = _mug(5, status=ProductStatus.DISCONTINUED)
        derive_after_write(product, supplied_count=8)
        assert product.status == ProductStatus.DISCONTINUED

    def test_explicit_other_status_reactivates(self):
        product = _mug(5, status=ProductStatus.DISCONTINUED)
        derive_after_write(product, requested_status=ProductStatus.AVAILABLE)
        assert product.status == ProductStatus.AVAILABLE

    def test_reactivation_still_derives_from_stock(self):
        product = _mug(0, status=ProductStatus.DISCONTINUED)
        derive_after_write(product, requested_status=ProductStatus.AVAILABLE)
        assert product.status == ProductStatus.OUT_OF_STOCK


class TestDeriveIdempotent:

    @pytest.mark.parametrize(
        "product, kwargs",
        [
            (_shirt(("S", 1), ("XL", 2)), {"supplied_count": 9}),
            (_mug(), {"supplied_count": 4}),
            (_mug(4), {"requested_status": ProductStatus.DISCONTINUED}),
            (_mug(0, status=ProductStatus.DISCONTINUED), {"requested_status": ProductStatus.AVAILABLE}),
        ],
    )
    def test_twice_equals_once(self, product, kwargs):
        once = derive_after_write(copy.deepcopy(product), **kwargs)
        twice = derive_after_write(derive_after_write(copy.deepcopy(product), **kwargs), **kwargs)
        assert once == twice


class TestCheckConsistent:

    def test_consistent_record_passes(self):
        check_consistent(derive_after_write(_shirt(("M", 2))))

    def test_count_mismatch_detected(self):
        product = _shirt(("M", 2), count_in_stock=3, status=ProductStatus.AVAILABLE)
        with pytest.raises(InvariantViolation, match="stock"):
            check_consistent(product)

    def test_status_mismatch_detected(self):
        product = _mug(0, status=ProductStatus.AVAILABLE)
        with pytest.raises(InvariantViolation, match="status"):
            check_consistent(product)


class TestApplyDecrement:

    def test_unsized_decrements_aggregate(self):
        product = derive_after_write(_mug(5))
        apply_decrement(product, 2)
        assert product.count_in_stock == 3
        assert product.status == ProductStatus.AVAILABLE

    def test_last_unit_flips_to_out_of_stock(self):
        product = derive_after_write(_mug(2))
        apply_decrement(product, 2)
        assert product.count_in_stock == 0
        assert product.status == ProductStatus.OUT_OF_STOCK

    def test_insufficient_stock_leaves_product_untouched(self):
        product = derive_after_write(_mug(3))
        before = copy.deepcopy(product)
        with pytest.raises(InsufficientStock) as excinfo:
            apply_decrement(product, 10)
        assert product == before
        assert excinfo.value.requested == 10
        assert excinfo.value.available == 3
        assert str(excinfo.value) == "insufficient stock for Mug"

    def test_sized_decrements_named_bucket_and_aggregate(self):
        product = derive_after_write(_shirt(("S", 1), ("M", 5)))
        apply_decrement(product, 2, "M")
        assert [s.stock for s in product.sizes] == [1, 3]
        assert product.count_in_stock == 4

    def test_sized_checks_the_bucket_not_the_total(self):
        product = derive_after_write(_shirt(("S", 1), ("M", 5)))
        with pytest.raises(InsufficientStock):
            apply_decrement(product, 2, "S")

    def test_sized_requires_size(self):
        product = derive_after_write(_shirt(("M", 5)))
        with pytest.raises(BadRequest, match="size is required for Slim Shirt"):
            apply_decrement(product, 1)

    def test_unknown_size_rejected(self):
        product = derive_after_write(_shirt(("M", 5)))
        with pytest.raises(BadRequest, match="unknown size XL"):
            apply_decrement(product, 1, "XL")

    def test_discontinued_is_never_changed(self):
        product = derive_after_write(_mug(1), requested_status=ProductStatus.DISCONTINUED)
        apply_decrement(product, 1)
        assert product.status == ProductStatus.DISCONTINUED

    def test_non_positive_quantity_rejected(self):
        with pytest.raises(BadRequest, match="must be positive"):
            apply_decrement(derive_after_write(_mug(3)), 0)


class TestApplyIncrement:

    def test_restores_aggregate(self):
        product = derive_after_write(_mug(0))
        apply_increment(product, 2)
        assert product.count_in_stock == 2
        assert product.status == ProductStatus.AVAILABLE

    def test_restores_bucket(self):
        product = derive_after_write(_shirt(("M", 0)))
        apply_increment(product, 3, "M")
        assert product.count_in_stock == 3

    def test_discontinued_stays_discontinued(self):
        product = derive_after_write(_mug(0), requested_status=ProductStatus.DISCONTINUED)
        apply_increment(product, 2)
        assert product.status == ProductStatus.DISCONTINUED
