"""MCP Resources for impact reference data."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from fastmcp import FastMCP

from disport.domains.impact.domain_logic.impact_models import ACTIVITY_THRESHOLD_MINUTES
from disport.domains.impact.domain_logic.monetisation import QALY_VALUE_AUD_RANGE

if TYPE_CHECKING:
    from disport.domains.impact.domain_logic.impact_models import DiseaseParameter


def register_impact_resources(
    mcp: FastMCP,
    diseases: tuple[DiseaseParameter, ...],
    value_per_qaly: float,
) -> None:
    """Register reference-data resources on the MCP server."""

    @mcp.resource("impact://diseases/parameters")
    def disease_parameter_resource() -> str:
        """Disease parameter table used for the impact estimates."""
        return json.dumps(
            {
                "activity_threshold_minutes_per_week": ACTIVITY_THRESHOLD_MINUTES,
                "disease_count": len(diseases),
                "diseases": [d.as_dict() for d in diseases],
            },
            indent=2,
        )

    @mcp.resource("impact://monetisation/reference-value")
    def reference_value_resource() -> str:
        """Reference value per QALY and its uncertainty range (AUD)."""
        low, high = QALY_VALUE_AUD_RANGE
        return json.dumps(
            {
                "currency": "AUD",
                "value_per_qaly": value_per_qaly,
                "range": {"low": low, "high": high},
                "daly_equivalence": "One DALY avoided is valued as one QALY gained.",
            },
            indent=2,
        )
