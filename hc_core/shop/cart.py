# hc_core/shop/cart.py
"""
Shopping cart state.

CartState is immutable; `reduce_cart(state, action)` returns a new state for
each action. CartStore holds the current state for one caller (a session, a
client view, a test) and is passed around explicitly.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Callable, Union

from django.conf import settings

from hc_core.common.display import money

DEFAULT_SHIPPING_FLAT = "5.99"
DEFAULT_TAX_RATE = "0.08"


@dataclass(frozen=True)
class CartLine:
    product_id: str
    name: str
    price: Decimal
    quantity: int
    pharmacy_id: str | None = None

    @property
    def line_total(self) -> Decimal:
        return money(Decimal(self.price) * self.quantity)


@dataclass(frozen=True)
class CartState:
    lines: tuple[CartLine, ...] = ()

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def get(self, product_id: str) -> CartLine | None:
        for line in self.lines:
            if line.product_id == str(product_id):
                return line
        return None


# ----------------------------
# Actions
# ----------------------------
@dataclass(frozen=True)
class AddItem:
    product_id: str
    name: str
    price: Decimal
    quantity: int = 1
    pharmacy_id: str | None = None


@dataclass(frozen=True)
class RemoveItem:
    product_id: str


@dataclass(frozen=True)
class UpdateQuantity:
    product_id: str
    quantity: int


@dataclass(frozen=True)
class ClearCart:
    pass


CartAction = Union[AddItem, RemoveItem, UpdateQuantity, ClearCart]


def reduce_cart(state: CartState, action: CartAction) -> CartState:
    if isinstance(action, AddItem):
        pid = str(action.product_id)
        if action.quantity <= 0:
            return state
        existing = state.get(pid)
        if existing is not None:
            lines = tuple(
                replace(line, quantity=line.quantity + action.quantity) if line.product_id == pid else line
                for line in state.lines
            )
            return replace(state, lines=lines)
        line = CartLine(
            product_id=pid,
            name=action.name,
            price=money(action.price),
            quantity=action.quantity,
            pharmacy_id=str(action.pharmacy_id) if action.pharmacy_id else None,
        )
        return replace(state, lines=state.lines + (line,))

    if isinstance(action, RemoveItem):
        pid = str(action.product_id)
        return replace(state, lines=tuple(line for line in state.lines if line.product_id != pid))

    if isinstance(action, UpdateQuantity):
        pid = str(action.product_id)
        if action.quantity <= 0:
            return reduce_cart(state, RemoveItem(pid))
        return replace(
            state,
            lines=tuple(
                replace(line, quantity=action.quantity) if line.product_id == pid else line
                for line in state.lines
            ),
        )

    if isinstance(action, ClearCart):
        return CartState()

    raise TypeError(f"Unknown cart action: {action!r}")


@dataclass
class CartStore:
    state: CartState = field(default_factory=CartState)
    _listeners: list[Callable[[CartState], None]] = field(default_factory=list, repr=False)

    def dispatch(self, action: CartAction) -> CartState:
        self.state = reduce_cart(self.state, action)
        for listener in list(self._listeners):
            listener(self.state)
        return self.state

    def subscribe(self, listener: Callable[[CartState], None]) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def totals(self) -> dict[str, Decimal]:
        return compute_totals(self.state.lines)

    def to_checkout_items(self) -> list[dict]:
        return [{"product": line.product_id, "quantity": line.quantity} for line in self.state.lines]


def _setting(name: str, default: str) -> Decimal:
    value = getattr(settings, name, default) if settings.configured else default
    return Decimal(str(value))


def compute_totals(
    lines,
    *,
    shipping_flat: Decimal | str | None = None,
    tax_rate: Decimal | str | None = None,
) -> dict[str, Decimal]:
    """
    subtotal = sum(price * qty); flat shipping only when there is something
    to ship; tax on the subtotal. Every figure is rounded to cents.
    """
    lines = list(lines)
    shipping_flat = Decimal(str(shipping_flat)) if shipping_flat is not None else _setting(
        "HC_SHIPPING_FLAT", DEFAULT_SHIPPING_FLAT
    )
    tax_rate = Decimal(str(tax_rate)) if tax_rate is not None else _setting("HC_TAX_RATE", DEFAULT_TAX_RATE)

    subtotal = money(sum((Decimal(line.price) * line.quantity for line in lines), Decimal("0.00")))
    shipping = money(shipping_flat if lines else 0)
    tax = money(subtotal * tax_rate)

    return {
        "subtotal": subtotal,
        "shipping": shipping,
        "tax": tax,
        "total": money(subtotal + shipping + tax),
    }
