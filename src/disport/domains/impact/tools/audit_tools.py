"""MCP tool for reviewing the run ledger.

The ledger holds no program content: record keys, record fingerprints,
adherence and the headline figures each estimate returned.
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from fastmcp import Context, FastMCP

if TYPE_CHECKING:
    from disport.core.audit.ledger import RunLedger


def register_audit_tools(mcp: FastMCP, ledger: RunLedger) -> None:
    """Register the run ledger tool on the MCP server."""

    @mcp.tool
    async def audit_summary(ctx: Context, days: int = 30) -> str:
        """Show how many estimates were run, how many failed, and the latest runs.

        Args:
            days: Number of days to look back (default: 30).
        """
        since = (datetime.now(timezone.utc) - timedelta(days=days)).isoformat(
            timespec="microseconds"
        )
        return json.dumps({
            "status": "ok",
            "period_days": days,
            **ledger.summary(since),
            "recent_runs": ledger.recent_runs(since),
        }, indent=2)
