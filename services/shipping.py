"""
Shipping Rule Resolver

Maps (subtotal, tier_id) to a ShippingOptionDTO. The pricing service only
depends on the ShippingRuleResolver interface, so weight- or zone-based rules
can replace the threshold rules without touching quote calculation.
"""

import logging
from abc import ABC, abstractmethod
from decimal import Decimal

from exceptions.shipping import UnknownShippingTierException
from models.shipping import ShippingOptionDTO, ShippingRulesDTO

logger = logging.getLogger(__name__)


class ShippingRuleResolver(ABC):

    @abstractmethod
    def resolve(self, subtotal: Decimal, tier_id: str) -> ShippingOptionDTO:
        """
        Resolve the shipping option for a tier.

        Raises:
            UnknownShippingTierException: If tier_id is not configured
        """

    @abstractmethod
    def available_options(self, subtotal: Decimal) -> list[ShippingOptionDTO]:
        """All configured options priced for the given subtotal."""


class ThresholdShippingResolver(ShippingRuleResolver):
    """
    Fixed price per tier, with free shipping on the default tier once the
    subtotal reaches the configured threshold.

    Example with threshold 75.00 and standard at 5.99:
        >>> resolver.resolve(Decimal("75.00"), "standard").price
        Decimal('0')
        >>> resolver.resolve(Decimal("74.99"), "standard").price
        Decimal('5.99')
    """

    def __init__(self, rules: ShippingRulesDTO):
        self.rules = rules

    @property
    def default_tier(self) -> str:
        return self.rules.default_tier

    def resolve(self, subtotal: Decimal, tier_id: str) -> ShippingOptionDTO:
        tier = self.rules.tiers.get(tier_id)
        if tier is None:
            configured = list(self.rules.tiers.keys())
            logger.error(
                f"[Shipping] Unknown shipping tier '{tier_id}' requested "
                f"(configured: {configured})"
            )
            raise UnknownShippingTierException(tier_id, configured)

        if self._qualifies_for_free_shipping(subtotal, tier_id):
            return ShippingOptionDTO(
                tier_id=tier_id,
                price=Decimal("0"),
                label=tier.free_label or tier.label,
                estimated_window=tier.estimated_window
            )

        return ShippingOptionDTO(
            tier_id=tier_id,
            price=tier.price,
            label=tier.label,
            estimated_window=tier.estimated_window
        )

    def available_options(self, subtotal: Decimal) -> list[ShippingOptionDTO]:
        return [self.resolve(subtotal, tier_id) for tier_id in self.rules.tiers]

    def _qualifies_for_free_shipping(self, subtotal: Decimal, tier_id: str) -> bool:
        threshold = self.rules.free_shipping_threshold
        if threshold is None or tier_id != self.rules.default_tier:
            return False
        return subtotal >= threshold
