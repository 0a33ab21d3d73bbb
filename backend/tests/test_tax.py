"""Tests for VAT, consumption tax and service charge computation."""

from decimal import Decimal

from frontdesk.services.tax import TaxConfig, compute_service_charge, compute_tax, round2


class TestComputeTax:

    def test_standard_rates(self):
        """Test 7.5% VAT and 5% consumption tax on a round subtotal."""
        breakdown = compute_tax(100000)
        assert breakdown.subtotal == Decimal("100000.00")
        assert breakdown.vat == Decimal("7500.00")
        assert breakdown.consumption_tax == Decimal("5000.00")
        assert breakdown.total_with_tax == Decimal("112500.00")

    def test_zero_subtotal(self):
        """Test a zero subtotal carries no tax."""
        breakdown = compute_tax(0)
        assert breakdown.vat == Decimal("0.00")
        assert breakdown.total_with_tax == Decimal("0.00")

    def test_total_rounded_from_unrounded_components(self):
        """Test the total is computed before the parts are rounded."""
        breakdown = compute_tax(Decimal("0.10"))
        # 0.0075 and 0.005 round up individually, the exact total 0.1125 rounds down
        assert breakdown.vat == Decimal("0.01")
        assert breakdown.consumption_tax == Decimal("0.01")
        assert breakdown.total_with_tax == Decimal("0.11")

    def test_custom_rates(self):
        """Test rates come from the supplied config."""
        config = TaxConfig(vat_rate=Decimal("0.10"), consumption_tax_rate=Decimal("0"))
        breakdown = compute_tax(200, config)
        assert breakdown.vat == Decimal("20.00")
        assert breakdown.consumption_tax == Decimal("0.00")
        assert breakdown.total_with_tax == Decimal("220.00")

    def test_float_input_has_no_binary_artefacts(self):
        """Test float amounts are converted through their string form."""
        assert compute_tax(0.1 + 0.2).subtotal == Decimal("0.30")


class TestServiceCharge:

    def test_ten_percent(self):
        """Test the default 10% service charge."""
        assert compute_service_charge(45000) == Decimal("4500.00")

    def test_half_up_rounding(self):
        """Test half-cent values round away from zero."""
        assert round2(Decimal("2.345")) == Decimal("2.35")
        assert compute_service_charge(Decimal("0.05")) == Decimal("0.01")
