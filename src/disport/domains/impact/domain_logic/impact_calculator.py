"""Per-disease impact estimates: NNT, cases prevented, QALYs, DALYs.

All formulas are deterministic and annual. Diseases are treated as
independent; no cross-disease double-counting correction is applied.

    cases_prevented = active x p0 x rrr x adherence
    clinical_nnt    = 1 / (p0 x rrr)
    program_nnt     = enrolled / cases_prevented
    qaly_per_case   = dw x duration + case_fatality x life_years_lost x utility
    daly_per_case   = dw x duration + case_fatality x life_years_lost
    baseline_cases  = enrolled x p0

A disease without usable ``p0``/``rrr`` yields ``None`` (not zero) for every
derived figure so the dashboard can show it as not available.
"""

from __future__ import annotations

import logging
from typing import Iterable

from disport.domains.impact.domain_logic.disease_table import all_diseases
from disport.domains.impact.domain_logic.impact_models import (
    AggregateResult,
    DiseaseParameter,
    DiseaseResult,
    ImpactResult,
    ImpactTotals,
)

logger = logging.getLogger(__name__)


def _positive(value: float | None) -> bool:
    return value is not None and value > 0


def clinical_nnt(p0: float | None, rrr: float | None) -> float | None:
    """Textbook number needed to treat for one year; ``None`` if not computable."""
    if not (_positive(p0) and _positive(rrr)):
        return None
    return 1 / (p0 * rrr)


def cases_prevented_per_year(
    participants_active: float | None,
    p0: float | None,
    rrr: float | None,
    adherence: float = 1.0,
) -> float:
    """Cases prevented a year; 0 when any input is absent or non-positive."""
    if not (_positive(participants_active) and _positive(p0) and _positive(rrr)):
        return 0.0
    return participants_active * p0 * rrr * adherence


def qaly_per_case(disease: DiseaseParameter) -> float:
    """QALYs lost per incident case; the fatal term is utility-weighted."""
    if disease.dw is None or disease.duration_years is None:
        return 0.0
    return (
        disease.dw * disease.duration_years
        + disease.case_fatality * disease.life_years_lost_if_death * disease.background_utility
    )


def daly_per_case(disease: DiseaseParameter) -> float:
    """DALYs per incident case: YLD plus unweighted YLL."""
    if disease.dw is None or disease.duration_years is None:
        return 0.0
    return (
        disease.dw * disease.duration_years
        + disease.case_fatality * disease.life_years_lost_if_death
    )


def compute_disease_result(
    disease: DiseaseParameter,
    *,
    active: float,
    enrolled: float,
    adherence: float = 1.0,
) -> DiseaseResult:
    """Annual impact figures for one disease."""
    baseline = enrolled * disease.p0 if _positive(disease.p0) else None

    if not disease.computable:
        return DiseaseResult(
            key=disease.key,
            label=disease.label,
            clinical_nnt=None,
            program_nnt=None,
            cases_prevented=None,
            qalys_gained=None,
            dalys_avoided=None,
            baseline_cases=baseline,
        )

    prevented = cases_prevented_per_year(active, disease.p0, disease.rrr, adherence)
    return DiseaseResult(
        key=disease.key,
        label=disease.label,
        clinical_nnt=clinical_nnt(disease.p0, disease.rrr),
        program_nnt=enrolled / prevented if prevented > 0 else None,
        cases_prevented=prevented,
        qalys_gained=prevented * qaly_per_case(disease),
        dalys_avoided=prevented * daly_per_case(disease),
        baseline_cases=baseline,
    )


def sum_totals(rows: Iterable[DiseaseResult]) -> ImpactTotals:
    """Disease-wise sums; ``None`` figures contribute nothing."""
    totals = ImpactTotals()
    for row in rows:
        totals.cases_prevented += row.cases_prevented or 0.0
        totals.qalys_gained += row.qalys_gained or 0.0
        totals.dalys_avoided += row.dalys_avoided or 0.0
        totals.baseline_cases += row.baseline_cases or 0.0
    return totals


def compute_impact(
    aggregate: AggregateResult,
    diseases: Iterable[DiseaseParameter] | None = None,
    *,
    adherence: float = 1.0,
) -> ImpactResult:
    """Per-disease results and totals for an aggregated program record.

    Raises:
        ValueError: If ``adherence`` is outside [0, 1].
    """
    if not 0.0 <= adherence <= 1.0:
        raise ValueError(f"adherence must be between 0 and 1, got {adherence!r}")

    table = all_diseases() if diseases is None else tuple(diseases)
    rows = [
        compute_disease_result(
            d,
            active=aggregate.active_participants,
            enrolled=aggregate.enrolled_participants,
            adherence=adherence,
        )
        for d in table
    ]
    skipped = [r.key for r in rows if r.cases_prevented is None]
    if skipped:
        logger.info("Impact not computable for: %s", ", ".join(skipped))

    return ImpactResult(rows=rows, totals=sum_totals(rows))
