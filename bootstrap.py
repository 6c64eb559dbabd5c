"""
Wiring of cart controllers from configuration.

Usage:
    resources = await create_resources()
    cart = await build_cart_controller("session-123", resources)
    await cart.add_to_cart(product, 2)
    quote = cart.get_quote("standard", tax_rate=resources.tax_service.get_rate("CA"))
"""

import logging
from dataclasses import dataclass

from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncEngine

import config
from db import create_db_and_tables, create_engine_and_session_maker
from repositories.cart_storage import CartStorage, RedisCartStorage, SqlCartStorage
from services.cart import CartController
from services.discount import StaticDiscountTable
from services.shipping import ThresholdShippingResolver
from services.tax import TaxService
from utils.pricing_tables_loader import load_discount_codes, load_tax_rates
from utils.shipping_types_loader import load_shipping_rules

logger = logging.getLogger(__name__)


@dataclass
class EngineResources:
    storage: CartStorage
    shipping_resolver: ThresholdShippingResolver
    discount_table: StaticDiscountTable
    tax_service: TaxService
    redis: Redis | None = None
    engine: AsyncEngine | None = None

    async def close(self) -> None:
        if self.redis is not None:
            await self.redis.aclose()
        if self.engine is not None:
            await self.engine.dispose()


async def create_storage() -> tuple[CartStorage, Redis | None, AsyncEngine | None]:
    if config.CART_STORAGE_BACKEND == "sql":
        engine, session_maker = create_engine_and_session_maker(config.DB_URL)
        await create_db_and_tables(engine)
        return SqlCartStorage(session_maker), None, engine

    redis = Redis(
        host=config.REDIS_HOST,
        port=config.REDIS_PORT,
        db=config.REDIS_DB,
        password=config.REDIS_PASSWORD,
        decode_responses=True
    )
    storage = RedisCartStorage(redis, prefix=config.CART_KEY_PREFIX, ttl_seconds=config.CART_TTL_SECONDS)
    return storage, redis, None


async def create_resources() -> EngineResources:
    """Load pricing tables and open the configured storage backend."""
    storage, redis, engine = await create_storage()
    resources = EngineResources(
        storage=storage,
        shipping_resolver=ThresholdShippingResolver(load_shipping_rules(config.SHIPPING_COUNTRY)),
        discount_table=StaticDiscountTable(load_discount_codes(config.DISCOUNT_TABLE)),
        tax_service=TaxService(load_tax_rates(config.SHIPPING_COUNTRY)),
        redis=redis,
        engine=engine
    )
    logger.info(
        f"[Bootstrap] Cart engine ready: storage={config.CART_STORAGE_BACKEND}, "
        f"country={config.SHIPPING_COUNTRY}, discount_codes={len(resources.discount_table)}"
    )
    return resources


async def build_cart_controller(cart_id: str, resources: EngineResources, restore: bool = True) -> CartController:
    """Create a controller for one client session, restoring its persisted cart."""
    controller = CartController(
        cart_id=cart_id,
        storage=resources.storage,
        shipping_resolver=resources.shipping_resolver,
        discount_table=resources.discount_table,
        persistence_timeout=config.PERSISTENCE_TIMEOUT_SECONDS
    )
    if restore:
        await controller.restore()
    return controller
