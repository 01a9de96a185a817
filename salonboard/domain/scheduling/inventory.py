"""
Inventory linkage

A service may be linked to a stock-tracked product; every booked line of that
service consumes one unit. Demand for a whole booking is checked before any
quantity is changed, so a booking either gets all of its units or none.
"""

from dataclasses import dataclass
from typing import Any, Mapping

from .composer import Cart
from .errors import InsufficientStockError, Outcome

DEFAULT_LOW_STOCK_THRESHOLD = 5


@dataclass(frozen=True)
class ProductStock:
    id: int
    name: str
    quantity: int
    low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD

    @classmethod
    def from_product(cls, product: Any) -> "ProductStock":
        threshold = product.low_stock_threshold
        return cls(
            id=product.id,
            name=product.name,
            quantity=product.quantity,
            low_stock_threshold=DEFAULT_LOW_STOCK_THRESHOLD if threshold is None else threshold,
        )


def is_low_stock(product: ProductStock) -> bool:
    return product.quantity <= product.low_stock_threshold


def linked_demand(cart: Cart) -> dict[int, int]:
    """Units needed per linked product, in order of first appearance"""
    demand: dict[int, int] = {}
    for line in cart.lines:
        if line.linked_product_id is not None:
            demand[line.linked_product_id] = demand.get(line.linked_product_id, 0) + 1
    return demand


def additional_demand(before: Mapping[int, int], after: Mapping[int, int]) -> dict[int, int]:
    """Units `after` needs beyond what `before` already consumed"""
    return {
        product_id: needed - before.get(product_id, 0)
        for product_id, needed in after.items()
        if needed > before.get(product_id, 0)
    }


def check_and_reserve(
    demand: Mapping[int, int], products: Mapping[int, ProductStock]
) -> Outcome[dict[int, int]]:
    """
    Validate cumulative demand against current stock, then compute new quantities.

    Args:
        demand: units needed per product id
        products: current stock keyed by product id

    Returns:
        Outcome holding the new quantity per product id, or the first
        InsufficientStockError. Nothing is decremented on failure.
    """
    # First pass: every product must cover its whole demand
    for product_id, needed in demand.items():
        product = products.get(product_id)
        if product is None:
            return Outcome.failure(InsufficientStockError(product_id, None, needed, 0))
        if product.quantity < needed:
            return Outcome.failure(
                InsufficientStockError(product_id, product.name, needed, product.quantity)
            )

    # Second pass: apply
    return Outcome.success(
        {product_id: products[product_id].quantity - needed for product_id, needed in demand.items()}
    )


def check_and_reserve_product(product: ProductStock, quantity_needed: int = 1) -> Outcome[int]:
    """Single-product form of check_and_reserve"""
    outcome = check_and_reserve({product.id: quantity_needed}, {product.id: product})
    if not outcome.ok:
        return Outcome.failure(outcome.error)
    return Outcome.success(outcome.value[product.id])
