from pydantic import BaseModel, ConfigDict

from enums.cart_mutation import CartMutation
from exceptions.cart import CartException
from exceptions.storage import PersistenceFailedException
from models.cart import CartSnapshotDTO


class CartChangedEventDTO(BaseModel):
    """Emitted to subscribers after every successful mutation."""
    model_config = ConfigDict(frozen=True)

    cart_id: str
    mutation: CartMutation
    item_count: int
    snapshot: CartSnapshotDTO
    persisted: bool = True  # False when the storage write failed (state kept in memory)


class CartMutationResultDTO(BaseModel):
    """
    Outcome of a cart controller mutation.

    Expected cart failures (e.g. insufficient stock) are reported in `error`
    instead of being raised; the cart is unchanged in that case. A storage
    failure after a successful in-memory change is reported in `warning`.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    success: bool
    mutation: CartMutation
    snapshot: CartSnapshotDTO
    error: CartException | None = None
    warning: PersistenceFailedException | None = None

    @property
    def item_count(self) -> int:
        return self.snapshot.item_count
