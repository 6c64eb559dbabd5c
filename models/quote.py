from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from models.shipping import ShippingOptionDTO


class OrderQuoteDTO(BaseModel):
    """
    Point-in-time price breakdown for a cart.

    total = subtotal + shipping_cost + tax - discount, never negative.
    Immutable: a new quote is computed whenever inputs change.
    """
    model_config = ConfigDict(frozen=True)

    subtotal: Decimal = Field(ge=0)
    shipping_cost: Decimal = Field(ge=0)
    tax: Decimal = Field(ge=0)
    discount: Decimal = Field(ge=0)
    total: Decimal = Field(ge=0)
    item_count: int = Field(ge=0)
    shipping_option: ShippingOptionDTO
    discount_code: str | None = None
    tax_rate: Decimal = Field(ge=0)

    @model_validator(mode="after")
    def _discount_within_bounds(self):
        if self.discount > self.subtotal + self.shipping_cost:
            raise ValueError("discount exceeds subtotal plus shipping")
        return self
