import logging
from decimal import Decimal

from exceptions.pricing import UnknownTaxRegionException

logger = logging.getLogger(__name__)


class TaxService:
    """Jurisdiction to tax rate lookup, with an optional "default" fallback entry."""

    DEFAULT_REGION = "default"

    def __init__(self, rates: dict[str, Decimal]):
        self.rates = dict(rates)

    def get_rate(self, region: str | None) -> Decimal:
        """
        Raises:
            UnknownTaxRegionException: If the region is unknown and no default is configured
        """
        if region:
            rate = self.rates.get(region.strip().upper())
            if rate is not None:
                return rate
        default_rate = self.rates.get(self.DEFAULT_REGION)
        if default_rate is None:
            raise UnknownTaxRegionException(region or "")
        logger.debug(f"[Tax] No rate for region '{region}', using default {default_rate}")
        return default_rate
