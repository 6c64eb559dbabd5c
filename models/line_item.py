from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from models.product import ProductSnapshotDTO


class LineItemDTO(BaseModel):
    """One product-and-quantity entry in a cart (immutable, replaced on change)."""
    model_config = ConfigDict(frozen=True)

    product_id: str = Field(min_length=1)
    name: str
    unit_price: Decimal = Field(ge=0)
    image_ref: str | None = None
    available_stock: int = Field(ge=0)
    quantity: int = Field(ge=1)

    @property
    def line_total(self) -> Decimal:
        # Full precision, rounding happens on the quote only
        return self.unit_price * self.quantity

    @classmethod
    def from_product(cls, product: ProductSnapshotDTO, quantity: int) -> "LineItemDTO":
        return cls(
            product_id=product.product_id,
            name=product.name,
            unit_price=product.unit_price,
            image_ref=product.image_ref,
            available_stock=product.available_stock,
            quantity=quantity
        )
