from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from models.line_item import LineItemDTO
from models.quote import OrderQuoteDTO


class ShippingAddressDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    full_name: str = Field(min_length=1)
    street: str = Field(min_length=1)
    city: str = Field(min_length=1)
    postal_code: str = Field(min_length=1)
    country: str = Field(min_length=2)
    region: str | None = None   # State/province, also used as tax jurisdiction
    phone: str | None = None


class OrderSubmissionDTO(BaseModel):
    """Finalized bundle handed to the order submission collaborator."""
    model_config = ConfigDict(frozen=True)

    cart_id: str
    line_items: tuple[LineItemDTO, ...]
    quote: OrderQuoteDTO
    shipping_address: ShippingAddressDTO
    payment_method: str = Field(min_length=1)
    notes: str | None = None


class OrderConfirmationDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_id: str
    quote: OrderQuoteDTO
    line_items: tuple[LineItemDTO, ...]
    submitted_at: datetime
    cart_cleared: bool = True  # False if removing the ordered lines could not be persisted
