"""
Line Item Store

In-memory authoritative set of line items for the active cart.
Internal state is private; callers only ever see immutable CartSnapshotDTO copies.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable

from pydantic import ValidationError

from exceptions.cart import (
    InsufficientStockException,
    InvalidProductSnapshotException,
    InvalidQuantityException,
    CartItemNotFoundException
)
from models.cart import CartSnapshotDTO
from models.line_item import LineItemDTO
from models.product import ProductSnapshotDTO

logger = logging.getLogger(__name__)

SnapshotObserver = Callable[[CartSnapshotDTO], Any]


class LineItemStore:
    """
    Holds (product, quantity) pairs keyed by product_id in insertion order.

    Invariants:
    - product_id is unique: adding an existing product increments its quantity
    - quantity >= 1: setting quantity <= 0 removes the item instead
    - quantity <= available_stock captured in the snapshot

    Every operation either fully applies or leaves the store unchanged.
    """

    def __init__(self):
        self._items: dict[str, LineItemDTO] = {}
        self._observers: list[SnapshotObserver] = []

    def subscribe(self, observer: SnapshotObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unsubscribe(self, observer: SnapshotObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    @staticmethod
    def validate_product(product: ProductSnapshotDTO | dict) -> ProductSnapshotDTO:
        """
        Validate a catalog product at the store boundary.

        Args:
            product: ProductSnapshotDTO or raw mapping from the catalog

        Returns:
            ProductSnapshotDTO

        Raises:
            InvalidProductSnapshotException: If required fields are missing or invalid
        """
        if isinstance(product, ProductSnapshotDTO):
            return product
        if not isinstance(product, dict):
            raise InvalidProductSnapshotException(
                f"expected a mapping, got {type(product).__name__}"
            )
        try:
            return ProductSnapshotDTO.model_validate(product)
        except ValidationError as e:
            fields = ", ".join(
                ".".join(str(part) for part in error["loc"]) or "snapshot"
                for error in e.errors()
            )
            raise InvalidProductSnapshotException(
                f"invalid fields: {fields}",
                product_id=product.get("product_id") if isinstance(product.get("product_id"), str) else None
            ) from e

    def upsert(self, product: ProductSnapshotDTO | dict, quantity_delta: int = 1) -> CartSnapshotDTO:
        """
        Add a product or increase its quantity.

        The stored display/pricing snapshot is refreshed from the newest
        product snapshot, so the stock bound is always the latest known one.

        A negative delta that takes an existing line to 0 or below removes it.

        Raises:
            InvalidProductSnapshotException: Malformed product snapshot
            InvalidQuantityException: quantity_delta is not an integer, or a new
                item would have quantity < 1
            InsufficientStockException: Resulting quantity exceeds available stock
        """
        product = self.validate_product(product)
        self._require_int(product.product_id, quantity_delta)
        existing = self._items.get(product.product_id)
        current_quantity = existing.quantity if existing else 0
        new_quantity = current_quantity + quantity_delta

        if new_quantity < 1:
            if existing is None:
                raise InvalidQuantityException(product.product_id, new_quantity)
            return self.remove(product.product_id)
        if new_quantity > product.available_stock:
            raise InsufficientStockException(
                product_id=product.product_id,
                requested=new_quantity,
                available=product.available_stock
            )

        # Re-assigning an existing key keeps its insertion position
        self._items[product.product_id] = LineItemDTO.from_product(product, new_quantity)
        logger.debug(f"[LineItemStore] upsert {product.product_id}: {current_quantity} -> {new_quantity}")
        return self._notify()

    def set_quantity(self, product_id: str, quantity: int) -> CartSnapshotDTO:
        """
        Set an absolute quantity for a product already in the cart.

        quantity <= 0 is equivalent to remove(). Requests above the captured
        stock fail; they are never silently clamped.

        Raises:
            InvalidQuantityException: quantity is not an integer
            CartItemNotFoundException: Product is not in the cart
            InsufficientStockException: quantity exceeds available stock
        """
        self._require_int(product_id, quantity)
        if quantity <= 0:
            return self.remove(product_id)

        existing = self._items.get(product_id)
        if existing is None:
            raise CartItemNotFoundException(product_id)
        if quantity > existing.available_stock:
            raise InsufficientStockException(
                product_id=product_id,
                requested=quantity,
                available=existing.available_stock
            )

        self._items[product_id] = existing.model_copy(update={"quantity": quantity})
        logger.debug(f"[LineItemStore] set_quantity {product_id}: {existing.quantity} -> {quantity}")
        return self._notify()

    def remove(self, product_id: str) -> CartSnapshotDTO:
        """Remove a product; removing an absent product is a no-op."""
        removed = self._items.pop(product_id, None)
        if removed is None:
            logger.debug(f"[LineItemStore] remove {product_id}: not in cart")
        return self._notify()

    def clear(self) -> CartSnapshotDTO:
        self._items.clear()
        return self._notify()

    def subtract(self, line_items: tuple[LineItemDTO, ...]) -> CartSnapshotDTO:
        """
        Take ordered quantities out of the cart.

        Only the given lines are reduced, by the given quantities; lines that
        reach 0 are removed. Anything added after the order was taken stays.
        """
        for ordered in line_items:
            existing = self._items.get(ordered.product_id)
            if existing is None:
                continue
            remaining = existing.quantity - ordered.quantity
            if remaining < 1:
                del self._items[ordered.product_id]
            else:
                self._items[ordered.product_id] = existing.model_copy(update={"quantity": remaining})
            logger.debug(f"[LineItemStore] subtract {ordered.product_id}: {existing.quantity} -> {max(remaining, 0)}")
        return self._notify()

    def replace(self, snapshot: CartSnapshotDTO) -> CartSnapshotDTO:
        """
        Replace the whole contents with a previously taken snapshot.

        Used when restoring from durable storage. Duplicate product IDs in the
        snapshot are merged into the first occurrence.
        """
        items: dict[str, LineItemDTO] = {}
        for item in snapshot.items:
            if item.product_id in items:
                merged = items[item.product_id]
                items[item.product_id] = merged.model_copy(
                    update={"quantity": merged.quantity + item.quantity}
                )
                logger.warning(f"[LineItemStore] merged duplicate entry for {item.product_id} while restoring")
            else:
                items[item.product_id] = item
        self._items = items
        return self._notify()

    def snapshot(self) -> CartSnapshotDTO:
        return CartSnapshotDTO(
            items=tuple(self._items.values()),
            taken_at=datetime.now(timezone.utc)
        )

    def contains(self, product_id: str) -> bool:
        return product_id in self._items

    def quantity_of(self, product_id: str) -> int:
        item = self._items.get(product_id)
        return item.quantity if item else 0

    @staticmethod
    def _require_int(product_id: str, quantity) -> None:
        # bool is an int subclass, but True is not a quantity
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidQuantityException(product_id, quantity)

    def _notify(self) -> CartSnapshotDTO:
        snapshot = self.snapshot()
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception as e:
                logger.error(f"[LineItemStore] observer {observer!r} failed: {e}", exc_info=True)
        return snapshot
