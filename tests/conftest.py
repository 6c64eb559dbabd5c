"""
Pytest configuration and fixtures for tests.

This file is automatically loaded by pytest and provides shared fixtures
and configuration for all tests.
"""

import asyncio
import os
import sys
from decimal import Decimal

import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis

# Add parent directory to Python path so tests can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Deterministic configuration before any module imports config
os.environ.setdefault("CART_STORAGE_BACKEND", "redis")
os.environ.setdefault("SHIPPING_COUNTRY", "us")
os.environ.setdefault("PERSISTENCE_TIMEOUT_SECONDS", "0.5")
os.environ.setdefault("LOG_MASK_SECRETS", "true")

from enums.discount_kind import DiscountKind
from models.cart import CartSnapshotDTO
from models.discount import DiscountCodeDTO
from models.line_item import LineItemDTO
from models.product import ProductSnapshotDTO
from models.shipping import ShippingRulesDTO
from repositories.cart_storage import CartStorage, RedisCartStorage
from services.cart import CartController
from services.discount import StaticDiscountTable
from services.shipping import ThresholdShippingResolver


# ============================================================================
# Factories
# ============================================================================

def make_product(product_id: str = "p-1", unit_price="49.99", available_stock: int = 10,
                 name: str | None = None) -> ProductSnapshotDTO:
    return ProductSnapshotDTO(
        product_id=product_id,
        name=name or f"Product {product_id}",
        unit_price=unit_price,
        image_ref=f"/images/{product_id}.jpg",
        available_stock=available_stock
    )


def make_snapshot(*lines: tuple[str, str, int]) -> CartSnapshotDTO:
    """make_snapshot(("p-1", "49.99", 2), ...) -> CartSnapshotDTO"""
    return CartSnapshotDTO(items=tuple(
        LineItemDTO(
            product_id=product_id,
            name=f"Product {product_id}",
            unit_price=Decimal(unit_price),
            available_stock=max(quantity, 99),
            quantity=quantity
        )
        for product_id, unit_price, quantity in lines
    ))


def make_rules(threshold: str | None = "75.00") -> ShippingRulesDTO:
    return ShippingRulesDTO.model_validate({
        "free_shipping_threshold": threshold,
        "default_tier": "standard",
        "tiers": {
            "standard": {
                "label": "Standard Shipping",
                "free_label": "Free Shipping",
                "price": "5.99",
                "estimated_window": "5-7 business days"
            },
            "expedited": {
                "label": "Expedited Shipping",
                "price": "12.99",
                "estimated_window": "2-3 business days"
            }
        }
    })


# ============================================================================
# Storage doubles
# ============================================================================

class MemoryCartStorage(CartStorage):
    """Dict-backed storage that records every call and can fail or stall on demand."""

    def __init__(self, delay: float = 0.0):
        self.data: dict[str, str] = {}
        self.calls: list[tuple[str, str]] = []
        self.delay = delay
        self.fail_save = False
        self.fail_load = False
        self.fail_clear = False

    async def save(self, key: str, value: str) -> None:
        self.calls.append(("save", key))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_save:
            raise ConnectionError("storage unavailable")
        self.data[key] = value

    async def load(self, key: str) -> str | None:
        self.calls.append(("load", key))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_load:
            raise ConnectionError("storage unavailable")
        return self.data.get(key)

    async def clear(self, key: str) -> None:
        self.calls.append(("clear", key))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_clear:
            raise ConnectionError("storage unavailable")
        self.data.pop(key, None)


# ============================================================================
# Pricing Fixtures
# ============================================================================

@pytest.fixture
def shipping_resolver():
    """US rules: free standard shipping from 75.00, standard 5.99, expedited 12.99."""
    return ThresholdShippingResolver(make_rules("75.00"))


@pytest.fixture
def discount_table():
    return StaticDiscountTable([
        DiscountCodeDTO(code="SAVE10", kind=DiscountKind.PERCENTAGE, value=Decimal("10")),
        DiscountCodeDTO(code="NEWUSER", kind=DiscountKind.FIXED, value=Decimal("5.00")),
        DiscountCodeDTO(code="BIG50", kind=DiscountKind.FIXED, value=Decimal("50.00")),
    ])


# ============================================================================
# Storage Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def redis_client():
    """Create fake Redis client for testing (no real Redis server needed)."""
    client = FakeAsyncRedis(decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
def memory_storage():
    return MemoryCartStorage()


# ============================================================================
# Controller Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def cart(memory_storage, shipping_resolver, discount_table):
    controller = CartController(
        cart_id="session-1",
        storage=memory_storage,
        shipping_resolver=shipping_resolver,
        discount_table=discount_table,
        persistence_timeout=0.5
    )
    yield controller
    await controller.close()


@pytest.fixture
def redis_storage(redis_client):
    return RedisCartStorage(redis_client, prefix="test:")
