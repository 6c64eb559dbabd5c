from decimal import Decimal, InvalidOperation

from pydantic import BaseModel, ConfigDict, Field, field_validator

from utils.money import to_decimal


class ProductSnapshotDTO(BaseModel):
    """
    Product data captured from the catalog at add-to-cart time.

    Prices and stock are not live-linked: the cart keeps what it saw when the
    product was added (stock may become stale).
    """
    model_config = ConfigDict(frozen=True)

    product_id: str = Field(min_length=1)
    name: str
    unit_price: Decimal = Field(ge=0)
    image_ref: str | None = None
    available_stock: int = Field(ge=0, strict=True)

    @field_validator("unit_price", mode="before")
    @classmethod
    def _price_to_decimal(cls, value):
        if isinstance(value, bool):
            raise ValueError("unit_price must be a number")
        if isinstance(value, (int, float, str)):
            try:
                return to_decimal(value)
            except InvalidOperation:
                raise ValueError(f"unit_price is not a number: {value!r}")
        return value
