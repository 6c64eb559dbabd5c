from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ShippingOptionDTO(BaseModel):
    """Resolved shipping option for a quote (exactly one is selected per quote)."""
    model_config = ConfigDict(frozen=True)

    tier_id: str
    price: Decimal = Field(ge=0)
    label: str
    estimated_window: str = ""


class ShippingTierConfigDTO(BaseModel):
    """One entry of shipping_types/{country}.json."""
    label: str
    price: Decimal = Field(ge=0)
    estimated_window: str = ""
    free_label: str | None = None  # Label used when the free-shipping threshold is reached


class ShippingRulesDTO(BaseModel):
    """
    Rule table for ThresholdShippingResolver.

    Example:
        {
          "free_shipping_threshold": "75.00",
          "default_tier": "standard",
          "tiers": {
            "standard": {"label": "Standard Shipping", "price": "5.99", ...},
            "expedited": {"label": "Expedited Shipping", "price": "12.99", ...}
          }
        }
    """
    free_shipping_threshold: Decimal | None = Field(default=None, ge=0)  # None = never free
    default_tier: str
    tiers: dict[str, ShippingTierConfigDTO]

    @model_validator(mode="after")
    def _default_tier_configured(self):
        if not self.tiers:
            raise ValueError("at least one shipping tier must be configured")
        if self.default_tier not in self.tiers:
            raise ValueError(f"default tier '{self.default_tier}' is not in tiers")
        return self
