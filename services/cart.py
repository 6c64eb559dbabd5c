"""
Cart Controller

The externally-facing cart object. Orchestrates line item mutations through a
single-writer queue, persists snapshots to durable storage and notifies
subscribers. Quotes are computed read-only against the latest committed state.
"""

import asyncio
import inspect
import logging
from decimal import Decimal
from typing import Any, Awaitable, Callable

from pydantic import ValidationError

from enums.cart_mutation import CartMutation
from exceptions.cart import CartException
from exceptions.storage import PersistenceFailedException
from models.cart import CartSnapshotDTO
from models.events import CartChangedEventDTO, CartMutationResultDTO
from models.line_item import LineItemDTO
from models.product import ProductSnapshotDTO
from models.quote import OrderQuoteDTO
from models.shipping import ShippingOptionDTO
from repositories.cart_storage import CartStorage
from services.discount import DiscountTable, StaticDiscountTable
from services.line_item_store import LineItemStore
from services.pricing import PricingService
from services.shipping import ShippingRuleResolver
from utils.money import ZERO, round_money
from utils.mutation_queue import MutationQueue

logger = logging.getLogger(__name__)

CartListener = Callable[[CartChangedEventDTO], Any | Awaitable[Any]]


class CartController:
    DEFAULT_PERSISTENCE_TIMEOUT = 2.0

    def __init__(
        self,
        cart_id: str,
        storage: CartStorage,
        shipping_resolver: ShippingRuleResolver,
        discount_table: DiscountTable | None = None,
        persistence_timeout: float = DEFAULT_PERSISTENCE_TIMEOUT
    ):
        """
        Args:
            cart_id: Session-scoped cart identifier, also the storage key suffix
            storage: Durable storage collaborator
            shipping_resolver: Shipping rule resolver used for quotes
            discount_table: Discount code lookup (empty table if omitted)
            persistence_timeout: Seconds a storage call may take before it counts as failed
        """
        self.cart_id = cart_id
        self.storage = storage
        self.shipping_resolver = shipping_resolver
        self.discount_table = discount_table or StaticDiscountTable()
        self.persistence_timeout = persistence_timeout
        self._store = LineItemStore()
        self._queue = MutationQueue(name=cart_id)
        self._listeners: list[CartListener] = []

    @property
    def storage_key(self) -> str:
        return f"cart:{self.cart_id}"

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, listener: CartListener) -> None:
        """Register a listener for CartChangedEventDTO (sync or async callable)."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: CartListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Mutations (serialized)
    # ------------------------------------------------------------------

    async def add_to_cart(self, product: ProductSnapshotDTO | dict, quantity: int = 1) -> CartMutationResultDTO:
        """
        Add a product or increase its quantity.

        Returns:
            CartMutationResultDTO: error is set (and the cart unchanged) on
            InsufficientStockException / InvalidProductSnapshotException /
            InvalidQuantityException (non-integer quantity)
        """
        return await self._submit(
            CartMutation.ADD,
            lambda: self._store.upsert(product, quantity)
        )

    async def remove_from_cart(self, product_id: str) -> CartMutationResultDTO:
        """Remove a product; removing a product that is not in the cart succeeds."""
        return await self._submit(
            CartMutation.REMOVE,
            lambda: self._store.remove(product_id)
        )

    async def update_quantity(self, product_id: str, quantity: int) -> CartMutationResultDTO:
        """
        Set an absolute quantity; quantity <= 0 removes the product.

        Returns:
            CartMutationResultDTO: error is set on InsufficientStockException
            (never clamped), CartItemNotFoundException or InvalidQuantityException
        """
        return await self._submit(
            CartMutation.UPDATE_QUANTITY,
            lambda: self._store.set_quantity(product_id, quantity)
        )

    async def clear_cart(self) -> CartMutationResultDTO:
        return await self._submit(CartMutation.CLEAR, self._store.clear)

    async def remove_ordered(self, line_items: tuple[LineItemDTO, ...]) -> CartMutationResultDTO:
        """
        Take the lines of a submitted order out of the cart.

        Queued like any other mutation, so items added while the order was
        being submitted are kept.
        """
        return await self._submit(
            CartMutation.CHECKOUT,
            lambda: self._store.subtract(line_items)
        )

    async def restore(self) -> CartMutationResultDTO:
        """
        Load the persisted snapshot (session start).

        Storage errors, timeouts and corrupt payloads never leave the cart in
        an undefined state: the cart falls back to empty and the failure is
        returned as a warning.
        """
        return await self._queue.submit(self._restore_from_storage)

    async def resync(self) -> CartMutationResultDTO:
        """Re-read durable storage after any in-flight mutations have finished."""
        logger.info(f"[Cart:{self.cart_id}] Resync requested")
        return await self.restore()

    async def close(self) -> None:
        """Let admitted mutations finish and stop the queue worker."""
        await self._queue.close()

    # ------------------------------------------------------------------
    # Reads (never queued, never mutate)
    # ------------------------------------------------------------------

    def snapshot(self) -> CartSnapshotDTO:
        return self._store.snapshot()

    @property
    def item_count(self) -> int:
        return self._store.snapshot().item_count

    def is_in_cart(self, product_id: str) -> bool:
        return self._store.contains(product_id)

    def get_item_quantity(self, product_id: str) -> int:
        return self._store.quantity_of(product_id)

    def get_quote(
        self,
        shipping_tier: str,
        discount_code: str | None = None,
        tax_rate: Decimal | float | str = ZERO
    ) -> OrderQuoteDTO:
        """
        Compute a quote for the current cart. Read-only and idempotent.

        Raises:
            UnknownShippingTierException: Tier not configured (caller/config bug)
            InvalidDiscountCodeException: Code does not resolve
            InvalidTaxRateException: Negative or non-numeric tax rate
        """
        return PricingService.calculate_quote(
            snapshot=self._store.snapshot(),
            shipping_tier=shipping_tier,
            shipping_resolver=self.shipping_resolver,
            discount_code=discount_code,
            discount_table=self.discount_table,
            tax_rate=tax_rate
        )

    def shipping_options(self) -> list[ShippingOptionDTO]:
        """All configured shipping options priced for the current subtotal."""
        subtotal = round_money(self._store.snapshot().subtotal)
        return self.shipping_resolver.available_options(subtotal)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _submit(
        self,
        mutation: CartMutation,
        apply: Callable[[], CartSnapshotDTO]
    ) -> CartMutationResultDTO:
        async def operation() -> CartMutationResultDTO:
            try:
                snapshot = apply()
            except CartException as e:
                logger.info(f"[Cart:{self.cart_id}] {mutation.value} rejected: {e.to_dict()}")
                return CartMutationResultDTO(
                    success=False,
                    mutation=mutation,
                    snapshot=self._store.snapshot(),
                    error=e
                )
            return await self._commit(mutation, snapshot)

        return await self._queue.submit(operation)

    async def _commit(self, mutation: CartMutation, snapshot: CartSnapshotDTO) -> CartMutationResultDTO:
        warning = None
        try:
            if snapshot.is_empty and mutation in (CartMutation.CLEAR, CartMutation.CHECKOUT):
                await self._with_timeout("clear", self.storage.clear(self.storage_key))
            else:
                await self._with_timeout("save", self.storage.save(self.storage_key, snapshot.model_dump_json()))
        except PersistenceFailedException as e:
            # In-memory state is kept, the user's intent is not rolled back
            logger.warning(f"[Cart:{self.cart_id}] {mutation.value} kept in memory only: {e}")
            warning = e

        await self._emit(CartChangedEventDTO(
            cart_id=self.cart_id,
            mutation=mutation,
            item_count=snapshot.item_count,
            snapshot=snapshot,
            persisted=warning is None
        ))
        return CartMutationResultDTO(
            success=True,
            mutation=mutation,
            snapshot=snapshot,
            warning=warning
        )

    async def _restore_from_storage(self) -> CartMutationResultDTO:
        warning = None
        restored = CartSnapshotDTO()
        try:
            payload = await self._with_timeout("load", self.storage.load(self.storage_key))
            if payload:
                restored = CartSnapshotDTO.model_validate_json(payload)
        except PersistenceFailedException as e:
            logger.error(f"[Cart:{self.cart_id}] Restore failed, starting with an empty cart: {e}")
            warning = e
        except ValidationError as e:
            logger.error(f"[Cart:{self.cart_id}] Stored cart is corrupt, starting with an empty cart: {e}")
            warning = PersistenceFailedException("load", self.storage_key, "corrupt cart snapshot")

        snapshot = self._store.replace(restored)
        logger.info(f"[Cart:{self.cart_id}] Restored {len(snapshot.items)} line items ({snapshot.item_count} units)")
        await self._emit(CartChangedEventDTO(
            cart_id=self.cart_id,
            mutation=CartMutation.RESTORE,
            item_count=snapshot.item_count,
            snapshot=snapshot,
            persisted=warning is None
        ))
        return CartMutationResultDTO(
            success=warning is None,
            mutation=CartMutation.RESTORE,
            snapshot=snapshot,
            warning=warning
        )

    async def _with_timeout(self, operation: str, awaitable: Awaitable[Any]) -> Any:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.persistence_timeout)
        except asyncio.TimeoutError:
            raise PersistenceFailedException(
                operation, self.storage_key, f"timed out after {self.persistence_timeout}s"
            )
        except Exception as e:
            raise PersistenceFailedException(operation, self.storage_key, str(e) or type(e).__name__) from e

    async def _emit(self, event: CartChangedEventDTO) -> None:
        for listener in list(self._listeners):
            try:
                result = listener(event)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"[Cart:{self.cart_id}] Listener {listener!r} failed: {e}", exc_info=True)
