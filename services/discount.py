"""
Discount Table

Lookup of DiscountCodeDTO records by code string. Remote tables are fetched
by the caller and loaded into a StaticDiscountTable so quote calculation
stays synchronous and pure.
"""

import logging
from abc import ABC, abstractmethod
from decimal import Decimal

from enums.discount_kind import DiscountKind
from exceptions.pricing import InvalidDiscountCodeException
from models.discount import DiscountCodeDTO, normalize_code

logger = logging.getLogger(__name__)


class DiscountTable(ABC):

    @abstractmethod
    def lookup(self, code: str) -> DiscountCodeDTO | None:
        """Case-insensitive lookup, None if the code is unknown."""

    def resolve(self, code: str) -> DiscountCodeDTO:
        """
        Raises:
            InvalidDiscountCodeException: If the code does not resolve
        """
        discount = self.lookup(code)
        if discount is None:
            logger.info(f"[Discount] Rejected discount code '{code}'")
            raise InvalidDiscountCodeException(code)
        return discount


class StaticDiscountTable(DiscountTable):

    def __init__(self, codes: list[DiscountCodeDTO] | None = None):
        self._codes = {discount.code: discount for discount in codes or []}

    def lookup(self, code: str) -> DiscountCodeDTO | None:
        if not code or not code.strip():
            return None
        return self._codes.get(normalize_code(code))

    def __len__(self) -> int:
        return len(self._codes)


class DiscountService:

    @staticmethod
    def calculate_discount(discount: DiscountCodeDTO, subtotal: Decimal) -> Decimal:
        """
        Unclamped discount amount at full precision.

        Percentage discounts apply to the subtotal only (never shipping or tax);
        fixed discounts are a flat deduction.
        """
        if discount.kind == DiscountKind.PERCENTAGE:
            return subtotal * discount.value / Decimal("100")
        return discount.value
