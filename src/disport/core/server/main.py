"""Run the disport server: ``disport-server`` or ``python -m disport.core.server.main``.

``DISPORT_TRANSPORT=stdio`` serves a single desktop MCP client over stdin and
stdout. The default, ``streamable-http``, listens on DISPORT_HOST:DISPORT_PORT
and refuses anything but loopback unless DISPORT_ALLOW_INSECURE_BIND is set,
since the tools have no auth layer.
"""

from __future__ import annotations

import logging
from ipaddress import ip_address

from disport.core.config.settings import Settings, get_settings
from disport.core.server.app import create_app

logger = logging.getLogger(__name__)


class InsecureBindError(RuntimeError):
    """Raised for a non-loopback HTTP bind without an explicit opt-in."""


def is_loopback(host: str) -> bool:
    if host.lower() == "localhost":
        return True
    try:
        return ip_address(host).is_loopback
    except ValueError:
        return False


def check_bind(settings: Settings) -> None:
    """Refuse to expose program records on a public interface by accident."""
    if settings.disport_transport == "stdio":
        return
    if is_loopback(settings.disport_host) or settings.disport_allow_insecure_bind:
        return
    raise InsecureBindError(
        f"Refusing to serve on {settings.disport_host}: the impact tools have no "
        "auth layer. Use a loopback host or set DISPORT_ALLOW_INSECURE_BIND=true."
    )


def run() -> None:
    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.disport_log_level.upper(), logging.INFO))
    check_bind(settings)

    mcp = create_app()
    if settings.disport_transport == "stdio":
        logger.info("Serving disport over stdio")
        mcp.run(transport="stdio")
        return

    logger.info("Serving disport on http://%s:%d", settings.disport_host, settings.disport_port)
    mcp.run(
        transport="streamable-http",
        host=settings.disport_host,
        port=settings.disport_port,
    )


if __name__ == "__main__":
    run()
