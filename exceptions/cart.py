"""
Cart-related exceptions.
"""

from .base import CartEngineException


class CartException(CartEngineException):
    """Base exception for cart-related errors."""
    pass


class InsufficientStockException(CartException):
    """Raised when a requested quantity exceeds the known available stock."""

    def __init__(self, product_id: str, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for product {product_id}: requested {requested}, available {available}",
            details={'product_id': product_id, 'requested': requested, 'available': available}
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class InvalidProductSnapshotException(CartException):
    """Raised when a product snapshot is missing fields or carries invalid values."""

    def __init__(self, reason: str, product_id: str | None = None):
        if product_id:
            message = f"Invalid product snapshot for {product_id}: {reason}"
        else:
            message = f"Invalid product snapshot: {reason}"
        super().__init__(message, details={'product_id': product_id, 'reason': reason})
        self.product_id = product_id
        self.reason = reason


class InvalidQuantityException(CartException):
    """Raised when a quantity is not an integer or a new line item would start at 0 or below."""

    def __init__(self, product_id: str, quantity):
        super().__init__(
            f"Invalid quantity {quantity} for product {product_id}",
            details={'product_id': product_id, 'quantity': quantity}
        )
        self.product_id = product_id
        self.quantity = quantity


class CartItemNotFoundException(CartException):
    """Raised when cart item not found."""

    def __init__(self, product_id: str):
        super().__init__(
            f"Product {product_id} is not in the cart",
            details={'product_id': product_id}
        )
        self.product_id = product_id


class EmptyCartException(CartException):
    """Raised when trying to checkout with empty cart."""

    def __init__(self, cart_id: str):
        super().__init__(
            f"Cart {cart_id} is empty",
            details={'cart_id': cart_id}
        )
        self.cart_id = cart_id
