"""
Shipping-related exceptions.
"""

from .base import CartEngineException


class ShippingException(CartEngineException):
    """Base exception for shipping-related errors."""
    pass


class UnknownShippingTierException(ShippingException):
    """Raised when a quote is requested for a tier that is not configured."""

    def __init__(self, tier_id: str, configured: list[str] | None = None):
        super().__init__(
            f"Unknown shipping tier '{tier_id}'",
            details={'tier_id': tier_id, 'configured': configured or []}
        )
        self.tier_id = tier_id
        self.configured = configured or []


class ShippingConfigurationException(ShippingException):
    """Raised when shipping rules are missing or inconsistent."""

    def __init__(self, reason: str):
        super().__init__(
            f"Invalid shipping configuration: {reason}",
            details={'reason': reason}
        )
        self.reason = reason
