# A cart is an ordered collection of line items belonging to one client session.
# Only the snapshot is persisted; item_count and subtotal are always derived.
#
# note that stock is captured at add-time and is NOT re-checked against the
# catalog here, so availability has to be verified again by order submission
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict
from sqlalchemy import Column, String, Text, DateTime, func

from models.base import Base
from models.line_item import LineItemDTO


class CartSnapshotRecord(Base):
    __tablename__ = "cart_snapshots"

    key = Column(String(255), primary_key=True)
    payload = Column(Text, nullable=False)  # CartSnapshotDTO JSON
    updated_at = Column(DateTime, nullable=False, default=func.now(), onupdate=func.now())


class CartSnapshotDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: tuple[LineItemDTO, ...] = ()
    taken_at: datetime | None = None

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def subtotal(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal("0"))

    @property
    def is_empty(self) -> bool:
        return len(self.items) == 0

    def get(self, product_id: str) -> LineItemDTO | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None
