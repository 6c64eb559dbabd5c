"""
Custom exceptions for the cart engine.

This module provides a hierarchy of custom exceptions for consistent error handling
throughout the engine.

Exception Hierarchy:
--------------------
CartEngineException (base)
├── CartException
│   ├── InsufficientStockException
│   ├── InvalidProductSnapshotException
│   ├── InvalidQuantityException
│   ├── CartItemNotFoundException
│   └── EmptyCartException
├── PricingException
│   ├── InvalidDiscountCodeException
│   ├── InvalidTaxRateException
│   └── UnknownTaxRegionException
├── ShippingException
│   ├── UnknownShippingTierException
│   └── ShippingConfigurationException
├── StorageException
│   └── PersistenceFailedException
└── OrderException
    └── OrderSubmissionFailedException

Usage:
------
Services raise specific exceptions:
    raise InsufficientStockException(product_id="p-1", requested=5, available=3)

The cart controller reports expected cart failures in its mutation result
instead of re-raising them:
    result = await controller.add_to_cart(product, 5)
    if isinstance(result.error, InsufficientStockException):
        ...
"""

from .base import CartEngineException
from .cart import (
    CartException,
    InsufficientStockException,
    InvalidProductSnapshotException,
    InvalidQuantityException,
    CartItemNotFoundException,
    EmptyCartException
)
from .pricing import (
    PricingException,
    InvalidDiscountCodeException,
    InvalidTaxRateException,
    UnknownTaxRegionException
)
from .shipping import ShippingException, UnknownShippingTierException, ShippingConfigurationException
from .storage import StorageException, PersistenceFailedException
from .order import OrderException, OrderSubmissionFailedException

__all__ = [
    # Base
    'CartEngineException',

    # Cart
    'CartException',
    'InsufficientStockException',
    'InvalidProductSnapshotException',
    'InvalidQuantityException',
    'CartItemNotFoundException',
    'EmptyCartException',

    # Pricing
    'PricingException',
    'InvalidDiscountCodeException',
    'InvalidTaxRateException',
    'UnknownTaxRegionException',

    # Shipping
    'ShippingException',
    'UnknownShippingTierException',
    'ShippingConfigurationException',

    # Storage
    'StorageException',
    'PersistenceFailedException',

    # Order
    'OrderException',
    'OrderSubmissionFailedException',
]
