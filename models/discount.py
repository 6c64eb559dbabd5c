from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from enums.discount_kind import DiscountKind


class DiscountCodeDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str = Field(min_length=1)
    kind: DiscountKind
    value: Decimal = Field(ge=0)  # percent (0-100) for PERCENTAGE, amount for FIXED
    description: str | None = None

    @field_validator("code")
    @classmethod
    def _normalize_code(cls, value: str) -> str:
        return normalize_code(value)

    @model_validator(mode="after")
    def _percentage_in_range(self):
        if self.kind == DiscountKind.PERCENTAGE and self.value > 100:
            raise ValueError(f"percentage discount {self.value} exceeds 100")
        return self


def normalize_code(code: str) -> str:
    """Discount codes match case-insensitively and ignore surrounding whitespace."""
    return code.strip().upper()
