"""
Root of the cart engine's exception hierarchy.
"""


class CartEngineException(Exception):
    """
    Common parent of every error the engine raises or reports.

    Cart mutations hand these back in CartMutationResultDTO.error/warning
    instead of raising, so besides the message each exception carries the
    identifiers a caller needs to react (product_id, tier_id, storage key, ...)
    in `details`, and `to_dict()` gives a flat form for logs and API payloads.
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details) if details else {}

    def to_dict(self) -> dict:
        """
        Example:
            >>> InsufficientStockException("p-1", requested=5, available=3).to_dict()
            {'error': 'InsufficientStockException', 'message': '...', 'product_id': 'p-1', 'requested': 5, 'available': 3}
        """
        return {'error': type(self).__name__, 'message': self.message, **self.details}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        context = ''.join(f", {key}={value}" for key, value in self.details.items())
        return f"{type(self).__name__}('{self.message}'{context})"
