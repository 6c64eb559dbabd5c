"""
Order-related exceptions.
"""

from .base import CartEngineException


class OrderException(CartEngineException):
    """Base exception for order-related errors."""
    pass


class OrderSubmissionFailedException(OrderException):
    """
    Raised when the order submission collaborator rejects or fails an order.

    The reason is passed through opaquely; payment-specific failure reasons
    are not interpreted here.
    """

    def __init__(self, cart_id: str, reason: str):
        super().__init__(
            f"Order submission failed for cart {cart_id}: {reason}",
            details={'cart_id': cart_id, 'reason': reason}
        )
        self.cart_id = cart_id
        self.reason = reason
