"""
Checkout Service

Produces the finalized order bundle from the cart, hands it to the order
submission collaborator and takes the ordered lines out of the cart only
after the submission succeeded. Payment capture is the submitter's concern.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from decimal import Decimal

from exceptions.cart import EmptyCartException
from exceptions.order import OrderSubmissionFailedException
from models.order import OrderConfirmationDTO, OrderSubmissionDTO, ShippingAddressDTO
from services.cart import CartController
from utils.money import ZERO, format_money

logger = logging.getLogger(__name__)


class OrderSubmitter(ABC):

    @abstractmethod
    async def submit(self, order: OrderSubmissionDTO) -> str:
        """
        Create the order and return its identifier.

        Implementations raise on failure; the reason is passed on opaquely.
        """


class CheckoutService:

    def __init__(self, cart: CartController, submitter: OrderSubmitter):
        self.cart = cart
        self.submitter = submitter

    def build_submission(
        self,
        shipping_address: ShippingAddressDTO,
        payment_method: str,
        shipping_tier: str,
        discount_code: str | None = None,
        tax_rate: Decimal | float | str = ZERO,
        notes: str | None = None
    ) -> OrderSubmissionDTO:
        """
        Build the {line_items, quote, shipping_address, payment_method} bundle.

        Raises:
            EmptyCartException: If the cart has no line items
            UnknownShippingTierException: If shipping_tier is not configured
            InvalidDiscountCodeException: If discount_code does not resolve
        """
        snapshot = self.cart.snapshot()
        if snapshot.is_empty:
            raise EmptyCartException(self.cart.cart_id)

        quote = self.cart.get_quote(shipping_tier, discount_code=discount_code, tax_rate=tax_rate)
        return OrderSubmissionDTO(
            cart_id=self.cart.cart_id,
            line_items=snapshot.items,
            quote=quote,
            shipping_address=shipping_address,
            payment_method=payment_method,
            notes=notes
        )

    async def submit_order(
        self,
        shipping_address: ShippingAddressDTO,
        payment_method: str,
        shipping_tier: str,
        discount_code: str | None = None,
        tax_rate: Decimal | float | str = ZERO,
        notes: str | None = None
    ) -> OrderConfirmationDTO:
        """
        Submit the current cart as an order.

        Business logic:
        - Quote is recomputed from the current cart right before hand-off
        - Cart is NOT cleared if the submission fails
        - The submitted lines are taken out of the cart after a successful
          submission; a storage failure at that point does not undo the order

        Returns:
            OrderConfirmationDTO

        Raises:
            EmptyCartException: If the cart has no line items
            UnknownShippingTierException / InvalidDiscountCodeException: Quote inputs invalid
            OrderSubmissionFailedException: If the submitter failed
        """
        submission = self.build_submission(
            shipping_address=shipping_address,
            payment_method=payment_method,
            shipping_tier=shipping_tier,
            discount_code=discount_code,
            tax_rate=tax_rate,
            notes=notes
        )

        logger.info(
            f"[Checkout] Submitting cart {submission.cart_id}: {submission.quote.item_count} items, "
            f"total {format_money(submission.quote.total)}, payment_method={payment_method}"
        )
        try:
            order_id = await self.submitter.submit(submission)
        except OrderSubmissionFailedException:
            logger.error(f"[Checkout] Order submission rejected for cart {submission.cart_id}")
            raise
        except Exception as e:
            logger.error(f"[Checkout] Order submission failed for cart {submission.cart_id}: {e}")
            raise OrderSubmissionFailedException(submission.cart_id, str(e) or type(e).__name__) from e

        # Only the submitted lines leave the cart; additions made while the
        # submitter was running are kept for the next order
        clear_result = await self.cart.remove_ordered(submission.line_items)
        if clear_result.warning is not None:
            logger.warning(
                f"[Checkout] Order {order_id} created but updated cart was not persisted: {clear_result.warning}"
            )

        logger.info(f"[Checkout] Order {order_id} created for cart {submission.cart_id}")
        return OrderConfirmationDTO(
            order_id=order_id,
            quote=submission.quote,
            line_items=submission.line_items,
            submitted_at=datetime.now(timezone.utc),
            cart_cleared=clear_result.warning is None
        )
