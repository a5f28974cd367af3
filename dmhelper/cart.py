# dmhelper/cart.py
import logging
from typing import Iterator, List, Optional, Tuple

from .models import CartLine, CartSummary, ProductRecord

logger = logging.getLogger(__name__)


class Cart:
    """Insertion-ordered cart with at most one line per product identifier."""

    def __init__(self) -> None:
        self._lines: List[CartLine] = []

    def _index(self, identifier: str) -> Optional[int]:
        for i, line in enumerate(self._lines):
            if line.identifier == identifier:
                return i
        return None

    def add_or_merge(self, record: ProductRecord, quantity: int) -> Optional[CartLine]:
        """Add quantity of record, merging into an existing line for the same product.

        A merged line keeps the name and price it was first added with.
        Adding zero is a no-op and returns None.
        """
        if quantity < 0:
            raise ValueError("quantity must be >= 0")
        if quantity == 0:
            return None

        idx = self._index(record.identifier)
        if idx is not None:
            line = self._lines[idx]
            line.quantity += quantity
            logger.debug("Merged %d x %s, now %d", quantity, record.identifier, line.quantity)
            return line

        line = CartLine(record=record, quantity=quantity)
        self._lines.append(line)
        logger.debug("Added %d x %s", quantity, record.identifier)
        return line

    def remove(self, identifier: str, quantity: Optional[int] = None) -> bool:
        """Remove a whole line, or only `quantity` units of it."""
        if quantity is not None and quantity <= 0:
            raise ValueError("quantity must be > 0")

        idx = self._index(identifier)
        if idx is None:
            return False

        line = self._lines[idx]
        if quantity is None or quantity >= line.quantity:
            del self._lines[idx]
        else:
            line.quantity -= quantity
        return True

    def get(self, identifier: str) -> Optional[CartLine]:
        idx = self._index(identifier)
        return None if idx is None else self._lines[idx]

    def total(self, exchange_rate: float = 1.0) -> float:
        return sum(line.line_total for line in self._lines) * exchange_rate

    def summary(self, exchange_rate: float = 1.0) -> CartSummary:
        total = self.total()
        return CartSummary(
            lines=[line.model_copy() for line in self._lines],
            item_count=self.item_count,
            total=total,
            exchange_rate=exchange_rate,
            converted_total=total * exchange_rate,
        )

    @property
    def lines(self) -> Tuple[CartLine, ...]:
        return tuple(self._lines)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    def clear(self) -> None:
        self._lines.clear()

    def __iter__(self) -> Iterator[CartLine]:
        return iter(tuple(self._lines))

    def __len__(self) -> int:
        return len(self._lines)
