"""Integration tests for the disport health-impact MCP server."""

from __future__ import annotations

import asyncio
import json

import pytest
from fastmcp import Client

from disport.core.server.app import SERVER_NAME, create_app
from disport.core.session.store import RecordStore
from disport.core.storage.database import LedgerDatabase


def _run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio required)."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


ALL_EXPECTED_TOOLS = [
    "health_check",
    "save_program_record",
    "clear_program_section",
    "clear_session",
    "participation_summary",
    "health_impact_estimate",
    "disease_parameters",
    "audit_summary",
]


@pytest.fixture
def client():
    """Create an MCP client connected to a fresh server instance."""
    mcp = create_app(
        record_store_override=RecordStore(),
        ledger_database_override=LedgerDatabase(),
    )
    return Client(mcp)


def test_server_starts_and_lists_tools(client):
    """Server should start and expose all registered tools."""
    async def _check():
        async with client:
            tools = await client.list_tools()
            tool_names = [t.name for t in tools]
            for expected in ALL_EXPECTED_TOOLS:
                assert expected in tool_names, f"Missing tool: {expected}"
    _run(_check())


def test_health_check_returns_ok(client):
    """health_check tool should return status ok."""
    async def _check():
        async with client:
            result = await client.call_tool("health_check", {})
            assert "ok" in str(result)
            assert SERVER_NAME in str(result)
    _run(_check())


def test_health_check_reports_disease_count(client):
    """health_check should report how many diseases were loaded."""
    async def _check():
        async with client:
            result = await client.call_tool("health_check", {})
            assert "diseases_loaded" in str(result)
    _run(_check())


def test_audit_tools_absent_when_disabled(monkeypatch):
    """Without an audit trail the audit_summary tool is not registered."""
    monkeypatch.setenv("AUDIT_ENABLED", "false")
    mcp = create_app(record_store_override=RecordStore())

    async def _check():
        async with Client(mcp) as c:
            tool_names = [t.name for t in await c.list_tools()]
            assert "audit_summary" not in tool_names
            assert "health_impact_estimate" in tool_names
    _run(_check())


def test_resources_listed(client):
    """Reference data resources should be exposed."""
    async def _check():
        async with client:
            resources = await client.list_resources()
            uris = {str(r.uri) for r in resources}
            assert "impact://diseases/parameters" in uris
            assert "impact://monetisation/reference-value" in uris
    _run(_check())


def test_reference_value_resource(client):
    """The monetisation resource carries the configured value per QALY."""
    async def _check():
        async with client:
            contents = await client.read_resource("impact://monetisation/reference-value")
            data = json.loads(contents[0].text)
            assert data["value_per_qaly"] == 28_000
            assert data["range"] == {"low": 20_800, "high": 37_700}
    _run(_check())


def test_prompt_listed(client):
    """The report prompt should be exposed."""
    async def _check():
        async with client:
            prompts = await client.list_prompts()
            assert "impact_report_prompt" in [p.name for p in prompts]
    _run(_check())
