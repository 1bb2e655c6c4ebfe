"""disport health-impact MCP server — application factory.

This module provides:
- create_app() for testability (integration tests create fresh server instances)
- Module-level `mcp` variable for FastMCP discovery
"""

from __future__ import annotations

import logging

from fastmcp import FastMCP

from disport.core.audit.ledger import RunLedger
from disport.core.config.settings import get_settings
from disport.core.session.store import RecordStore
from disport.core.storage.database import LedgerDatabase
from disport.domains.impact.domain_logic.disease_table import all_diseases, load_disease_table
from disport.domains.impact.prompts.impact_prompts import register_impact_prompts
from disport.domains.impact.resources.reference_data import register_impact_resources
from disport.domains.impact.tools.impact_tools import register_impact_tools
from disport.domains.impact.tools.record_tools import register_record_tools

logger = logging.getLogger(__name__)

SERVER_NAME = "disport Health Impact"
SERVER_VERSION = "0.1.0"


def create_app(
    *,
    record_store_override: RecordStore | None = None,
    ledger_database_override: LedgerDatabase | None = None,
) -> FastMCP:
    """Create and configure the health-impact MCP server.

    This is the main application factory. It:
    1. Creates the FastMCP server instance
    2. Resolves the disease parameter table (bundled or configured file)
    3. Creates the session record store
    4. Opens the run ledger (if enabled)
    5. Registers all tools, resources, and prompts
    """
    settings = get_settings()

    # --- Server instance ---
    server = FastMCP(
        SERVER_NAME,
        instructions=(
            "Estimates the annual health and economic impact of sport and "
            "physical-activity programs: chronic disease cases prevented, "
            "QALYs gained, DALYs avoided and their dollar value."
        ),
    )

    # --- Disease parameter table ---
    if settings.disease_table_path:
        diseases = load_disease_table(settings.disease_table_path)
        logger.info("Using disease table from %s", settings.disease_table_path)
    else:
        diseases = all_diseases()

    # --- Session record store ---
    store = record_store_override if record_store_override is not None else RecordStore()

    # --- Run ledger ---
    ledger: RunLedger | None = None
    if ledger_database_override is not None:
        ledger = RunLedger(ledger_database_override.open())
    elif settings.audit_enabled:
        ledger = RunLedger(LedgerDatabase(settings.audit_db_path).open())
    else:
        logger.info("AUDIT_ENABLED is false, estimates are not recorded")

    # --- Register tools ---
    @server.tool
    def health_check() -> dict:
        """Check server health and return basic status information."""
        return {
            "status": "ok",
            "server": SERVER_NAME,
            "version": SERVER_VERSION,
            "diseases_loaded": len(diseases),
            "value_per_qaly_aud": settings.qaly_value_aud,
            "audit_enabled": ledger is not None,
            "records_in_session": len(store.keys()),
        }

    register_record_tools(server, store, ledger)
    register_impact_tools(
        server,
        store,
        diseases,
        value_per_qaly=settings.qaly_value_aud,
        default_adherence=settings.default_adherence,
        ledger=ledger,
    )
    logger.info("Impact estimation tools registered (%d diseases)", len(diseases))

    if ledger is not None:
        from disport.domains.impact.tools.audit_tools import register_audit_tools

        register_audit_tools(server, ledger)

    # --- Register resources ---
    register_impact_resources(server, diseases, settings.qaly_value_aud)

    # --- Register prompts ---
    register_impact_prompts(server)

    return server


# Module-level instance for FastMCP discovery.
# Lazy: only created when accessed (not when tests import create_app).
def __getattr__(name: str):
    if name == "mcp":
        global mcp  # noqa: PLW0603
        mcp = create_app()
        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
