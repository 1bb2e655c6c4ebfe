"""MCP tools for the session's saved program records.

Records live in memory for the life of the server process only.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from fastmcp import Context, FastMCP

if TYPE_CHECKING:
    from disport.core.audit.ledger import RunLedger
    from disport.core.session.store import RecordStore

logger = logging.getLogger(__name__)


def register_record_tools(
    mcp: FastMCP,
    store: RecordStore,
    ledger: RunLedger | None = None,
) -> None:
    """Register program record session tools on the MCP server."""

    @mcp.tool
    async def save_program_record(
        ctx: Context,
        record: dict[str, Any],
        record_key: str = "programsPage",
    ) -> str:
        """Save the collection form's program record for this session.

        Args:
            record: Program record (sports, PA programs, inclusive programs).
            record_key: Key to save under (default: 'programsPage').
        """
        store.save(record_key, record)
        if ledger is not None:
            ledger.log_change("saved", record_key=record_key)
        logger.info("Program record saved under %r", record_key)
        return json.dumps({"status": "saved", "record_key": record_key})

    @mcp.tool
    async def clear_program_section(
        ctx: Context,
        section: str,
        record_key: str = "programsPage",
    ) -> str:
        """Clear one section of a saved record, as the form's clear button does.

        Args:
            section: 'sports', 'pa' or 'inclusive'.
            record_key: Key of the saved record (default: 'programsPage').
        """
        try:
            record = store.clear_section(record_key, section)
        except KeyError:
            return json.dumps({
                "status": "no_record",
                "record_key": record_key,
                "message": f"No program record saved under {record_key!r}.",
            })
        except ValueError as exc:
            return json.dumps({"status": "error", "message": str(exc)})

        if ledger is not None:
            ledger.log_change("section_cleared", record_key=record_key, section=section)
        return json.dumps({
            "status": "cleared",
            "record_key": record_key,
            "section": section,
            "record": record,
        }, indent=2)

    @mcp.tool
    async def clear_session(ctx: Context) -> str:
        """Forget every program record saved in this session."""
        count = store.clear()
        if ledger is not None:
            ledger.log_change("session_cleared", records_removed=count)
        return json.dumps({"status": "cleared", "records_removed": count})
