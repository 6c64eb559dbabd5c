"""
Pricing-related exceptions.
"""

from decimal import Decimal

from .base import CartEngineException


class PricingException(CartEngineException):
    """Base exception for pricing-related errors."""
    pass


class InvalidDiscountCodeException(PricingException):
    """Raised when a discount code does not resolve against the discount table."""

    def __init__(self, code: str):
        super().__init__(
            f"Invalid discount code '{code}'",
            details={'code': code}
        )
        self.code = code


class InvalidTaxRateException(PricingException):
    """Raised when a tax rate is negative or not a number."""

    def __init__(self, tax_rate: Decimal | float | str):
        super().__init__(
            f"Invalid tax rate: {tax_rate}",
            details={'tax_rate': tax_rate}
        )
        self.tax_rate = tax_rate


class UnknownTaxRegionException(PricingException):
    """Raised when no tax rate (and no default) is configured for a region."""

    def __init__(self, region: str):
        super().__init__(
            f"No tax rate configured for region '{region}'",
            details={'region': region}
        )
        self.region = region
