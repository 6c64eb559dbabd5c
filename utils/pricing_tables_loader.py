"""
Pricing Tables Loader

Loads discount code tables (discount_codes/{name}.json) and tax rate tables
(tax_rates/{country}.json). Same layout and conventions as the shipping types
loader.
"""

import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path

from pydantic import ValidationError

from models.discount import DiscountCodeDTO
from utils.money import to_decimal

PROJECT_ROOT = Path(__file__).parent.parent


def _read_json(path: Path):
    if not path.exists():
        raise FileNotFoundError(f"Pricing table not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        logging.error(f"Failed to parse {path}: {e}")
        raise


def load_discount_codes(table_name: str = "default", base_dir: Path | None = None) -> list[DiscountCodeDTO]:
    """
    Load discount codes from discount_codes/{table_name}.json.

    Returns:
        list[DiscountCodeDTO]: Codes normalized to upper case

    Raises:
        FileNotFoundError: If the table file doesn't exist
        ValueError: If an entry is invalid (unknown kind, negative value, ...)
    """
    base_dir = base_dir or PROJECT_ROOT / "discount_codes"
    path = base_dir / f"{table_name}.json"
    raw_codes = _read_json(path)

    codes = []
    for entry in raw_codes:
        try:
            codes.append(DiscountCodeDTO.model_validate(entry))
        except ValidationError as e:
            raise ValueError(f"Invalid discount code entry in {path.name}: {entry!r}") from e

    logging.info(f"Loaded {len(codes)} discount codes from {path.name}")
    return codes


def load_tax_rates(country_code: str = "us", base_dir: Path | None = None) -> dict[str, Decimal]:
    """
    Load jurisdiction tax rates from tax_rates/{country_code}.json.

    Example:
        >>> rates = load_tax_rates("us")
        >>> rates["CA"]
        Decimal('0.0725')
    """
    base_dir = base_dir or PROJECT_ROOT / "tax_rates"
    path = base_dir / f"{country_code.lower()}.json"
    raw_rates = _read_json(path)

    rates = {}
    for region, rate in raw_rates.items():
        try:
            rates[region.upper() if region != "default" else region] = to_decimal(rate)
        except InvalidOperation as e:
            raise ValueError(f"Invalid tax rate for {region} in {path.name}: {rate!r}") from e

    logging.info(f"Loaded {len(rates)} tax rates from {path.name}")
    return rates
