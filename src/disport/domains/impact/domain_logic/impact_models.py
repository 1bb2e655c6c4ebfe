"""Health-impact domain models and constants."""

from __future__ import annotations

from dataclasses import dataclass, field


# ---------------------------------------------------------------------------
# Domain constants
# ---------------------------------------------------------------------------

# Public-health guideline: >= 150 minutes of moderate activity per week
ACTIVITY_THRESHOLD_MINUTES = 150

DEFAULT_BACKGROUND_UTILITY = 0.88

# Fallback category names for composition breakdowns
UNKNOWN_CATEGORY = "Unknown"
GENERIC_SPORT = "Sport"
GENERIC_PROGRAM = "Program"


# ---------------------------------------------------------------------------
# Parameter table entries
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DiseaseParameter:
    """Epidemiological constants for one disease."""

    key: str
    label: str
    p0: float | None                    # annual baseline incidence per person
    rrr: float | None                   # relative risk reduction at >= 150 min/week
    dw: float | None = None             # disability weight of an incident case
    duration_years: float | None = None
    case_fatality: float = 0.0
    life_years_lost_if_death: float = 0.0
    background_utility: float = DEFAULT_BACKGROUND_UTILITY

    @property
    def computable(self) -> bool:
        """Whether incidence and risk reduction are both usable."""
        return bool(self.p0 and self.rrr and self.p0 > 0 and self.rrr > 0)

    def as_dict(self) -> dict:
        return {
            "key": self.key,
            "label": self.label,
            "p0": self.p0,
            "rrr": self.rrr,
            "dw": self.dw,
            "duration_years": self.duration_years,
            "case_fatality": self.case_fatality,
            "life_years_lost_if_death": self.life_years_lost_if_death,
            "background_utility": self.background_utility,
        }


# ---------------------------------------------------------------------------
# Aggregation results
# ---------------------------------------------------------------------------

@dataclass
class InclusionSummary:
    """Inclusive-program headcount (schools with disability, special needs)."""

    enabled: bool = False
    school: float = 0.0
    special_needs: float = 0.0

    @property
    def total(self) -> float:
        return self.school + self.special_needs


@dataclass
class AggregateResult:
    """Enrolled/active totals and composition derived from a program record."""

    enrolled_participants: float = 0.0
    active_participants: float = 0.0
    sports_by_type: dict[str, float] = field(default_factory=dict)
    sports_by_location: dict[str, float] = field(default_factory=dict)
    pa_by_name: dict[str, float] = field(default_factory=dict)
    pa_by_location: dict[str, float] = field(default_factory=dict)
    inclusion: InclusionSummary = field(default_factory=InclusionSummary)
    used_legacy_fallback: bool = False
    warnings: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Impact results
# ---------------------------------------------------------------------------

@dataclass
class DiseaseResult:
    """Annual impact for one disease. ``None`` means not computable."""

    key: str
    label: str
    clinical_nnt: float | None
    program_nnt: float | None
    cases_prevented: float | None
    qalys_gained: float | None
    dalys_avoided: float | None
    baseline_cases: float | None

    def as_dict(self) -> dict:
        return {
            "key": self.key,
            "label": self.label,
            "clinical_nnt": self.clinical_nnt,
            "program_nnt": self.program_nnt,
            "cases_prevented": self.cases_prevented,
            "qalys_gained": self.qalys_gained,
            "dalys_avoided": self.dalys_avoided,
            "baseline_cases": self.baseline_cases,
        }


@dataclass
class ImpactTotals:
    """Disease-wise sums; non-computable rows count as zero."""

    cases_prevented: float = 0.0
    qalys_gained: float = 0.0
    dalys_avoided: float = 0.0
    baseline_cases: float = 0.0


@dataclass
class ImpactResult:
    rows: list[DiseaseResult] = field(default_factory=list)
    totals: ImpactTotals = field(default_factory=ImpactTotals)


@dataclass
class MonetisedBenefit:
    """Dollar value of QALY/DALY totals at a reference value per QALY."""

    value_per_qaly: float
    value_range: tuple[float, float]
    dollars_from_qalys: float
    dollars_from_dalys: float
    dollars_from_qalys_range: tuple[float, float]
    dollars_from_dalys_range: tuple[float, float]
