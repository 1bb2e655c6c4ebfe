"""Dollar value of health gains at a reference value per QALY.

Australia's reference ICER (opportunity-cost estimate) is about A$28k per
QALY, 95% CI A$20.8k-A$37.7k. The range is for display only. One DALY
averted is valued as one QALY gained.
"""

from __future__ import annotations

from disport.domains.impact.domain_logic.impact_models import ImpactTotals, MonetisedBenefit

QALY_VALUE_AUD = 28_000.0
QALY_VALUE_AUD_RANGE = (20_800.0, 37_700.0)


def monetised_benefit_from_qalys(qalys: float, value_per_qaly: float = QALY_VALUE_AUD) -> float:
    return qalys * value_per_qaly


def monetise(
    totals: ImpactTotals,
    value_per_qaly: float = QALY_VALUE_AUD,
    value_range: tuple[float, float] = QALY_VALUE_AUD_RANGE,
) -> MonetisedBenefit:
    """Convert QALY and DALY totals to dollars."""
    low, high = value_range
    return MonetisedBenefit(
        value_per_qaly=value_per_qaly,
        value_range=(low, high),
        dollars_from_qalys=monetised_benefit_from_qalys(totals.qalys_gained, value_per_qaly),
        dollars_from_dalys=monetised_benefit_from_qalys(totals.dalys_avoided, value_per_qaly),
        dollars_from_qalys_range=(
            monetised_benefit_from_qalys(totals.qalys_gained, low),
            monetised_benefit_from_qalys(totals.qalys_gained, high),
        ),
        dollars_from_dalys_range=(
            monetised_benefit_from_qalys(totals.dalys_avoided, low),
            monetised_benefit_from_qalys(totals.dalys_avoided, high),
        ),
    )
