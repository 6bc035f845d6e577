"""
Shopper cart kept in memory for one browsing session.

Lines are keyed by (product, variant), so each variant of a product gets its
own line. Nothing here touches the database: checkout only clears the cart
and raises a short-lived confirmation flag.
"""
import time
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable

from django.conf import settings


def make_line_id(product_id, variant_id=None):
    if variant_id is None:
        return str(product_id)
    return f"{product_id}:{variant_id}"


@dataclass
class CartLine:
    product_id: int
    variant_id: int | None
    name: str
    price: Decimal
    image: str | None
    quantity: int = 1

    @property
    def line_id(self):
        return make_line_id(self.product_id, self.variant_id)

    @property
    def line_total(self):
        return self.price * self.quantity


@dataclass
class Cart:
    clock: Callable[[], float] = time.monotonic
    confirmation_seconds: float = field(default_factory=lambda: settings.CHECKOUT_CONFIRMATION_SECONDS)
    lines: list = field(default_factory=list)
    _success_until: float | None = None

    # ---------------------------
    # Mutations
    # ---------------------------
    def add(self, product, variant=None):
        """
        Add one unit. An existing line for the same product and variant is
        incremented and keeps the price, name and image it was created with.
        """
        variant_id = variant.id if variant is not None else None
        line = self.get(make_line_id(product.id, variant_id))
        if line is not None:
            line.quantity += 1
            return line

        if variant is not None:
            line = CartLine(
                product_id=product.id,
                variant_id=variant_id,
                name=f"{product.name} ({variant.name})",
                price=Decimal(variant.price),
                image=variant.image or product.primary_image,
            )
        else:
            line = CartLine(
                product_id=product.id,
                variant_id=None,
                name=product.name,
                price=Decimal(product.price),
                image=product.primary_image,
            )
        self.lines.append(line)
        return line

    def remove(self, line_id):
        self.lines = [line for line in self.lines if line.line_id != str(line_id)]

    def remove_product(self, product_id):
        """Drop every line of a product, whatever its variant"""
        self.lines = [line for line in self.lines if str(line.product_id) != str(product_id)]

    def update_quantity(self, line_id, delta):
        """
        Shift a line's quantity by `delta`. A change that would bring it to
        zero or below is ignored; use remove() to drop a line.
        """
        line = self.get(line_id)
        if line is None:
            return None
        new_quantity = line.quantity + delta
        if new_quantity > 0:
            line.quantity = new_quantity
        return line

    def checkout(self):
        self.lines = []
        self._success_until = self.clock() + self.confirmation_seconds

    # ---------------------------
    # Reads
    # ---------------------------
    def get(self, line_id):
        for line in self.lines:
            if line.line_id == str(line_id):
                return line
        return None

    @property
    def items(self):
        return list(self.lines)

    @property
    def is_empty(self):
        return not self.lines

    @property
    def total_quantity(self):
        return sum(line.quantity for line in self.lines)

    @property
    def subtotal(self):
        return sum((line.line_total for line in self.lines), Decimal('0.00'))

    @property
    def show_success(self):
        if self._success_until is None:
            return False
        if self.clock() >= self._success_until:
            self._success_until = None
            return False
        return True
