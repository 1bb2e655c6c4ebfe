"""MCP tools for participation aggregation and health-impact estimation.

A program record can be passed inline, or read from the session store by
key (by default the first of the form's save keys that holds a record).
"""

from __future__ import annotations

import json
import logging
import time
from typing import TYPE_CHECKING, Any

from fastmcp import Context, FastMCP

from disport.core.session.store import DEFAULT_RECORD_KEYS
from disport.domains.impact.domain_logic.aggregator import aggregate
from disport.domains.impact.domain_logic.monetisation import QALY_VALUE_AUD_RANGE
from disport.domains.impact.domain_logic.report import (
    as_count,
    build_impact_report,
    count_groups,
    summary_lines,
)

if TYPE_CHECKING:
    from disport.core.audit.ledger import RunLedger
    from disport.core.session.store import RecordStore
    from disport.domains.impact.domain_logic.impact_models import DiseaseParameter

logger = logging.getLogger(__name__)


def resolve_record(
    store: RecordStore,
    record: dict[str, Any] | None,
    record_key: str | None,
) -> tuple[str | None, dict[str, Any] | None]:
    """Inline record first, then the named key, then the default save keys."""
    if record is not None:
        return None, record
    if record_key:
        return record_key, store.get(record_key)
    return store.read_first(DEFAULT_RECORD_KEYS)


def _no_record(record_key: str | None) -> str:
    return json.dumps({
        "status": "no_record",
        "record_key": record_key,
        "message": (
            "No program record found. Pass one inline or save it with "
            "save_program_record first."
        ),
    })


def _elapsed_ms(start_time: float) -> float:
    return (time.monotonic() - start_time) * 1000


def register_impact_tools(
    mcp: FastMCP,
    store: RecordStore,
    diseases: tuple[DiseaseParameter, ...],
    *,
    value_per_qaly: float,
    default_adherence: float = 1.0,
    ledger: RunLedger | None = None,
) -> None:
    """Register impact estimation tools on the MCP server."""

    @mcp.tool
    async def participation_summary(
        ctx: Context,
        record: dict[str, Any] | None = None,
        record_key: str | None = None,
    ) -> str:
        """Count enrolled and active (>= 150 min/week) participants.

        Also returns the composition of sports programs (by sport and
        location), PA programs (by program name and location) and the
        inclusive-program headcount.

        Args:
            record: Program record as saved by the collection form.
            record_key: Session key to read instead of an inline record.
        """
        start_time = time.monotonic()
        key, program = resolve_record(store, record, record_key)
        if program is None:
            if ledger is not None:
                ledger.log_run("participation_summary", record_key=record_key, outcome="no_record")
            return _no_record(record_key)

        agg = aggregate(program)
        enrolled = as_count(agg.enrolled_participants)
        active = as_count(agg.active_participants)
        payload = {
            "status": "ok",
            "record_key": key,
            "enrolled_participants": enrolled,
            "active_participants": active,
            "used_legacy_fallback": agg.used_legacy_fallback,
            "sports_by_type": count_groups(agg.sports_by_type),
            "sports_by_location": count_groups(agg.sports_by_location),
            "pa_by_name": count_groups(agg.pa_by_name),
            "pa_by_location": count_groups(agg.pa_by_location),
            "inclusion": {
                "enabled": agg.inclusion.enabled,
                "school": as_count(agg.inclusion.school),
                "special_needs": as_count(agg.inclusion.special_needs),
                "total": as_count(agg.inclusion.total),
            },
            "warnings": agg.warnings,
        }

        if ledger is not None:
            ledger.log_run(
                "participation_summary",
                record=program,
                record_key=key,
                enrolled=enrolled,
                active=active,
                duration_ms=_elapsed_ms(start_time),
            )
        return json.dumps(payload, indent=2)

    @mcp.tool
    async def health_impact_estimate(
        ctx: Context,
        record: dict[str, Any] | None = None,
        record_key: str | None = None,
        adherence: float | None = None,
    ) -> str:
        """Estimate annual chronic disease cases prevented, QALYs, DALYs and dollars.

        Figures that cannot be computed for a disease are returned as null.

        Args:
            record: Program record as saved by the collection form.
            record_key: Session key to read instead of an inline record.
            adherence: Share of active participants who keep it up (0-1).
        """
        start_time = time.monotonic()
        key, program = resolve_record(store, record, record_key)
        if program is None:
            if ledger is not None:
                ledger.log_run("health_impact_estimate", record_key=record_key, outcome="no_record")
            return _no_record(record_key)

        effective_adherence = default_adherence if adherence is None else adherence
        try:
            report = build_impact_report(
                program,
                diseases=diseases,
                adherence=effective_adherence,
                value_per_qaly=value_per_qaly,
                value_range=QALY_VALUE_AUD_RANGE,
            )
        except ValueError as exc:
            if ledger is not None:
                ledger.log_run(
                    "health_impact_estimate",
                    record=program,
                    record_key=key,
                    outcome="error",
                    error_message=str(exc),
                    duration_ms=_elapsed_ms(start_time),
                )
            return json.dumps({"status": "error", "message": str(exc)})

        report["status"] = "ok"
        report["record_key"] = key
        report["summary"] = summary_lines(report)

        if ledger is not None:
            ledger.log_run(
                "health_impact_estimate",
                record=program,
                record_key=key,
                adherence=effective_adherence,
                enrolled=report["participants"]["enrolled"],
                active=report["participants"]["active"],
                qalys_gained=report["totals"]["qalys_gained"],
                duration_ms=_elapsed_ms(start_time),
            )
        logger.info(
            "Impact estimate: enrolled=%s active=%s qalys=%s",
            report["participants"]["enrolled"],
            report["participants"]["active"],
            report["totals"]["qalys_gained"],
        )
        return json.dumps(report, indent=2)

    @mcp.tool
    async def disease_parameters(ctx: Context) -> str:
        """List the epidemiological constants used for every disease."""
        return json.dumps({
            "status": "ok",
            "disease_count": len(diseases),
            "diseases": [d.as_dict() for d in diseases],
        }, indent=2)
