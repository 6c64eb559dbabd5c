"""
Unit Tests: ThresholdShippingResolver and shipping types loader

Tests for services/shipping.py and utils/shipping_types_loader.py covering:
- Tier resolution and the free-shipping threshold
- Unknown tiers
- Listing all options for a subtotal
- Rule table validation and loading from JSON
"""

import json
import logging
from decimal import Decimal

import pytest
from pydantic import ValidationError

from conftest import make_rules
from exceptions.shipping import UnknownShippingTierException, ShippingConfigurationException
from models.shipping import ShippingRulesDTO
from services.shipping import ShippingRuleResolver, ThresholdShippingResolver
from utils.shipping_types_loader import load_shipping_rules


class TestResolve:

    def test_standard_below_threshold(self, shipping_resolver):
        option = shipping_resolver.resolve(Decimal("74.99"), "standard")

        assert option.tier_id == "standard"
        assert option.price == Decimal("5.99")
        assert option.label == "Standard Shipping"
        assert option.estimated_window == "5-7 business days"

    def test_standard_at_threshold_is_free(self, shipping_resolver):
        option = shipping_resolver.resolve(Decimal("75.00"), "standard")

        assert option.price == Decimal("0")
        assert option.label == "Free Shipping"

    def test_non_default_tier_ignores_threshold(self, shipping_resolver):
        option = shipping_resolver.resolve(Decimal("1000.00"), "expedited")

        assert option.price == Decimal("12.99")

    def test_no_threshold_means_never_free(self):
        resolver = ThresholdShippingResolver(make_rules(None))

        assert resolver.resolve(Decimal("100000"), "standard").price == Decimal("5.99")

    def test_unknown_tier_is_logged_and_raised(self, shipping_resolver, caplog):
        with caplog.at_level(logging.ERROR, logger="services.shipping"):
            with pytest.raises(UnknownShippingTierException) as exc_info:
                shipping_resolver.resolve(Decimal("10"), "overnight-rocket")

        assert exc_info.value.configured == ["standard", "expedited"]
        assert "overnight-rocket" in caplog.text

    def test_resolver_is_swappable(self):
        class FlatRateResolver(ShippingRuleResolver):
            def resolve(self, subtotal, tier_id):
                from models.shipping import ShippingOptionDTO
                return ShippingOptionDTO(tier_id=tier_id, price=Decimal("3.00"), label="Flat")

            def available_options(self, subtotal):
                return [self.resolve(subtotal, "flat")]

        from conftest import make_snapshot
        from services.pricing import PricingService

        quote = PricingService.calculate_quote(make_snapshot(("p-1", "10.00", 1)), "flat", FlatRateResolver())

        assert quote.shipping_cost == Decimal("3.00")
        assert quote.total == Decimal("13.00")


class TestAvailableOptions:

    def test_lists_every_tier_priced_for_subtotal(self, shipping_resolver):
        options = shipping_resolver.available_options(Decimal("80.00"))

        assert [(o.tier_id, o.price) for o in options] == [
            ("standard", Decimal("0")),
            ("expedited", Decimal("12.99")),
        ]


class TestShippingRules:

    def test_default_tier_must_be_configured(self):
        with pytest.raises(ValidationError):
            ShippingRulesDTO.model_validate({
                "free_shipping_threshold": "75",
                "default_tier": "ground",
                "tiers": {"standard": {"label": "Standard", "price": "5.99"}}
            })

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            ShippingRulesDTO.model_validate({
                "default_tier": "standard",
                "tiers": {"standard": {"label": "Standard", "price": "-1"}}
            })

    def test_load_bundled_us_rules(self):
        rules = load_shipping_rules("us")

        assert rules.free_shipping_threshold == Decimal("75.00")
        assert rules.default_tier == "standard"
        assert rules.tiers["standard"].price == Decimal("5.99")
        assert rules.tiers["expedited"].price == Decimal("12.99")

    def test_load_from_custom_directory(self, tmp_path):
        (tmp_path / "de.json").write_text(json.dumps({
            "free_shipping_threshold": "50",
            "default_tier": "paeckchen",
            "tiers": {"paeckchen": {"label": "Päckchen", "price": "4.50", "estimated_window": "2-4 Werktage"}}
        }), encoding="utf-8")

        rules = load_shipping_rules("DE", base_dir=tmp_path)

        assert rules.tiers["paeckchen"].price == Decimal("4.50")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_shipping_rules("xx", base_dir=tmp_path)

    def test_malformed_json(self, tmp_path):
        (tmp_path / "us.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(json.JSONDecodeError):
            load_shipping_rules("us", base_dir=tmp_path)

    def test_inconsistent_rules(self, tmp_path):
        (tmp_path / "us.json").write_text(json.dumps({"default_tier": "standard", "tiers": {}}), encoding="utf-8")

        with pytest.raises(ShippingConfigurationException):
            load_shipping_rules("us", base_dir=tmp_path)
