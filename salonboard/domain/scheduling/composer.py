"""Booking composer - builds one appointment payload from an ordered cart of services"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union


@dataclass(frozen=True)
class CartLine:
    name: str
    price: float
    duration_minutes: int
    service_id: Optional[int] = None
    linked_product_id: Optional[int] = None
    loyalty_points_multiplier: int = 1

    @classmethod
    def from_service(cls, service: Any) -> "CartLine":
        """Build a line from a Service row (or anything shaped like one)"""
        return cls(
            name=service.name,
            price=float(service.price),
            duration_minutes=int(service.duration_minutes),
            service_id=getattr(service, "id", None),
            linked_product_id=getattr(service, "linked_product_id", None),
            loyalty_points_multiplier=getattr(service, "loyalty_points_multiplier", None) or 1,
        )


@dataclass(frozen=True)
class Cart:
    """Ordered, immutable list of service lines. Totals are derived on construction."""

    lines: tuple[CartLine, ...] = ()
    total_duration: int = field(init=False)
    total_price: float = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "lines", tuple(self.lines))
        object.__setattr__(self, "total_duration", sum(line.duration_minutes for line in self.lines))
        object.__setattr__(self, "total_price", round(sum(line.price for line in self.lines), 2))

    @property
    def names(self) -> list[str]:
        return [line.name for line in self.lines]

    @property
    def service_summary(self) -> str:
        # Display value only; the lines themselves are canonical
        return ", ".join(self.names)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def __len__(self) -> int:
        return len(self.lines)


def _as_line(service: Union[CartLine, Any]) -> CartLine:
    return service if isinstance(service, CartLine) else CartLine.from_service(service)


def add_service(cart: Cart, service: Union[CartLine, Any]) -> Cart:
    return Cart(cart.lines + (_as_line(service),))


def remove_service(cart: Cart, index: int) -> Cart:
    if not 0 <= index < len(cart.lines):
        raise IndexError(f"Cart has no line at index {index}")
    return Cart(cart.lines[:index] + cart.lines[index + 1:])


@dataclass(frozen=True)
class AddService:
    service: Any


@dataclass(frozen=True)
class RemoveService:
    index: int


CartAction = Union[AddService, RemoveService]


def compose_services(cart: Cart, action: CartAction) -> Cart:
    """Apply one cart action and return the new cart"""
    if isinstance(action, AddService):
        return add_service(cart, action.service)
    if isinstance(action, RemoveService):
        return remove_service(cart, action.index)
    raise TypeError(f"Unknown cart action: {action!r}")


def cart_of(*services: Any) -> Cart:
    """Cart holding the given services in order"""
    cart = Cart()
    for service in services:
        cart = add_service(cart, service)
    return cart
