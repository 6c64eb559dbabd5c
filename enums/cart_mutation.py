from enum import Enum


class CartMutation(str, Enum):
    ADD = "ADD"
    REMOVE = "REMOVE"
    UPDATE_QUANTITY = "UPDATE_QUANTITY"
    CLEAR = "CLEAR"
    CHECKOUT = "CHECKOUT"  # Ordered quantities taken out after a successful order submission
    RESTORE = "RESTORE"   # Snapshot loaded from durable storage (session start or resync)
