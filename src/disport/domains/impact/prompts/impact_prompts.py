"""MCP Prompts — interaction templates for the annual impact report."""

from __future__ import annotations

from fastmcp import FastMCP


def register_impact_prompts(mcp: FastMCP) -> None:
    """Register impact domain MCP prompts."""

    @mcp.prompt()
    def impact_report_prompt(organisation: str = "our organisation") -> str:
        """Prompt template for walking through an annual impact report."""
        return f"""Please prepare the annual health impact report for {organisation}:

1. How many participants are enrolled, and how many meet 150 minutes a week
2. Cases of chronic disease prevented each year, by disease
3. QALYs gained and DALYs avoided
4. The dollar value of those gains and its uncertainty range
5. How inclusive programs (schools, special needs) contribute to reach

Use the health_impact_estimate tool and show unavailable figures as blank."""
