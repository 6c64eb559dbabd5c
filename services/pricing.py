import logging
from decimal import Decimal, InvalidOperation

from exceptions.pricing import InvalidDiscountCodeException, InvalidTaxRateException
from models.cart import CartSnapshotDTO
from models.quote import OrderQuoteDTO
from services.discount import DiscountService, DiscountTable
from services.shipping import ShippingRuleResolver
from utils.money import ZERO, round_money, to_decimal

logger = logging.getLogger(__name__)


class PricingService:
    """Pure quote calculation for a cart snapshot."""

    @staticmethod
    def calculate_quote(
        snapshot: CartSnapshotDTO,
        shipping_tier: str,
        shipping_resolver: ShippingRuleResolver,
        discount_code: str | None = None,
        discount_table: DiscountTable | None = None,
        tax_rate: Decimal | float | str = ZERO
    ) -> OrderQuoteDTO:
        """
        Calculate subtotal, shipping, discount, tax and total for a cart.

        Algorithm:
        1. subtotal = sum(unit_price * quantity), summed at full precision and
           rounded half-up to cents once
        2. shipping option resolved for (subtotal, shipping_tier); an empty cart
           still resolves the tier but needs no shipping, so it costs 0
        3. discount resolved from the discount table; percentage applies to the
           subtotal only, fixed is flat; clamped to subtotal + shipping
        4. tax = round((subtotal - discount) * tax_rate, 2); shipping is not taxed
        5. total = subtotal + shipping + tax - discount, never below 0.00

        Example:
            One item at 49.99 x 2, "standard" at 5.99 below its free-shipping
            threshold, tax rate 0.0725:
            subtotal 99.98, shipping 5.99, tax round(7.24855) = 7.25, total 113.22

        Args:
            snapshot: Immutable cart snapshot
            shipping_tier: Tier ID, e.g. "standard" or "expedited"
            shipping_resolver: Rule resolver for shipping options
            discount_code: Optional code, matched case-insensitively
            discount_table: Table used to resolve discount_code
            tax_rate: Jurisdiction rate, e.g. 0.0725 for 7.25%

        Returns:
            OrderQuoteDTO

        Raises:
            UnknownShippingTierException: If shipping_tier is not configured
            InvalidDiscountCodeException: If discount_code does not resolve
            InvalidTaxRateException: If tax_rate is negative or not a number
        """
        rate = PricingService._validate_tax_rate(tax_rate)

        subtotal = round_money(snapshot.subtotal)
        shipping_option = shipping_resolver.resolve(subtotal, shipping_tier)
        if snapshot.is_empty:
            shipping_option = shipping_option.model_copy(update={"price": ZERO})
        shipping_cost = round_money(shipping_option.price)

        discount = ZERO
        applied_code = None
        if discount_code is not None:
            if discount_table is None:
                raise InvalidDiscountCodeException(discount_code)
            resolved = discount_table.resolve(discount_code)
            applied_code = resolved.code
            if not snapshot.is_empty:
                raw_discount = DiscountService.calculate_discount(resolved, snapshot.subtotal)
                discount = min(round_money(raw_discount), subtotal + shipping_cost)

        taxable = max(subtotal - discount, ZERO)
        tax = round_money(taxable * rate)

        total = max(subtotal + shipping_cost + tax - discount, ZERO)

        logger.debug(
            f"[Pricing] quote items={snapshot.item_count} subtotal={subtotal} "
            f"shipping={shipping_cost} ({shipping_option.tier_id}) discount={discount} "
            f"tax={tax} total={total}"
        )

        return OrderQuoteDTO(
            subtotal=subtotal,
            shipping_cost=shipping_cost,
            tax=tax,
            discount=discount,
            total=round_money(total),
            item_count=snapshot.item_count,
            shipping_option=shipping_option,
            discount_code=applied_code,
            tax_rate=rate
        )

    @staticmethod
    def _validate_tax_rate(tax_rate: Decimal | float | str) -> Decimal:
        try:
            rate = to_decimal(tax_rate)
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidTaxRateException(tax_rate)
        if not rate.is_finite() or rate < 0:
            raise InvalidTaxRateException(tax_rate)
        return rate
