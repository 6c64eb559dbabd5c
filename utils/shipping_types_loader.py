"""
Shipping Types Loader

Loads shipping rule tables from country-specific JSON files.
Similar to localization (l10n), supports different shipping systems per country.

Usage:
    from utils.shipping_types_loader import load_shipping_rules

    rules = load_shipping_rules("us")  # Load US shipping tiers
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from exceptions.shipping import ShippingConfigurationException
from models.shipping import ShippingRulesDTO

PROJECT_ROOT = Path(__file__).parent.parent


def load_shipping_rules(country_code: str = "us", base_dir: Path | None = None) -> ShippingRulesDTO:
    """
    Load shipping rules from shipping_types/{country_code}.json.

    Args:
        country_code: ISO country code (e.g., "us", "de")
        base_dir: Directory holding the JSON files (defaults to <project>/shipping_types)

    Returns:
        ShippingRulesDTO: Validated rule table

    Raises:
        FileNotFoundError: If shipping types file doesn't exist
        json.JSONDecodeError: If JSON is malformed
        ShippingConfigurationException: If the rule table is inconsistent

    Example:
        >>> rules = load_shipping_rules("us")
        >>> rules.tiers["standard"].price
        Decimal('5.99')
    """
    base_dir = base_dir or PROJECT_ROOT / "shipping_types"
    shipping_types_path = base_dir / f"{country_code.lower()}.json"

    if not shipping_types_path.exists():
        raise FileNotFoundError(
            f"Shipping types file not found: {shipping_types_path}\n"
            f"Please create shipping_types/{country_code.lower()}.json"
        )

    try:
        with open(shipping_types_path, "r", encoding="utf-8") as f:
            raw_rules = json.load(f)
    except json.JSONDecodeError as e:
        logging.error(f"Failed to parse {shipping_types_path}: {e}")
        raise

    try:
        rules = ShippingRulesDTO.model_validate(raw_rules)
    except ValidationError as e:
        raise ShippingConfigurationException(f"{shipping_types_path.name}: {e}") from e

    logging.info(f"Loaded {len(rules.tiers)} shipping tiers from {shipping_types_path.name}")
    return rules
