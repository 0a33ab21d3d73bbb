"""Tax and service-charge computation.

All amounts are Decimal and rounded to currency precision (two places,
half-up), matching how the amounts are printed on receipts and invoices.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from frontdesk.core.config import settings

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")


def to_decimal(value: Optional[Number]) -> Decimal:
    """Convert a stored/JSON amount to Decimal without float artefacts."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round2(value: Number) -> Decimal:
    """Round to two decimal places, half away from zero."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class TaxConfig:
    """Fixed tax rates applied to tax-inclusive documents."""

    vat_rate: Decimal = Decimal("0.075")
    consumption_tax_rate: Decimal = Decimal("0.05")
    vat_number: str = "VIVI4002500868"
    service_charge_rate: Decimal = Decimal("0.10")

    @property
    def total_tax_rate(self) -> Decimal:
        return self.vat_rate + self.consumption_tax_rate

    @classmethod
    def from_settings(cls) -> "TaxConfig":
        return cls(
            vat_rate=settings.vat_rate,
            consumption_tax_rate=settings.consumption_tax_rate,
            vat_number=settings.vat_number,
            service_charge_rate=settings.service_charge_rate,
        )


@dataclass(frozen=True)
class TaxBreakdown:
    subtotal: Decimal
    vat: Decimal
    consumption_tax: Decimal
    total_with_tax: Decimal


def compute_tax(subtotal: Number, config: Optional[TaxConfig] = None) -> TaxBreakdown:
    """Compute VAT and consumption tax for a pre-tax subtotal.

    The total is rounded from the unrounded components, so it can differ by
    a cent from ``vat + consumption_tax + subtotal`` on fractional inputs.
    """
    config = config or TaxConfig()
    base = to_decimal(subtotal)
    vat = base * config.vat_rate
    consumption = base * config.consumption_tax_rate
    return TaxBreakdown(
        subtotal=round2(base),
        vat=round2(vat),
        consumption_tax=round2(consumption),
        total_with_tax=round2(base + vat + consumption),
    )


def compute_service_charge(subtotal: Number, config: Optional[TaxConfig] = None) -> Decimal:
    config = config or TaxConfig()
    return round2(to_decimal(subtotal) * config.service_charge_rate)
