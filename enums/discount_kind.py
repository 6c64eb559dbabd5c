from enum import Enum


class DiscountKind(str, Enum):
    PERCENTAGE = "percentage"  # value is a percent of the subtotal (shipping and tax excluded)
    FIXED = "fixed"            # value is a flat amount deducted from the order
