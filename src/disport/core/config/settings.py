"""Application settings loaded from environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """disport server configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Server
    # Default to loopback; there is no auth layer in front of the tools.
    disport_host: str = "127.0.0.1"
    disport_port: int = 8001
    disport_log_level: str = "info"
    disport_allow_insecure_bind: bool = False
    disport_transport: Literal["streamable-http", "stdio"] = "streamable-http"

    # Audit trail (":memory:" keeps it to the life of the process)
    audit_enabled: bool = True
    audit_db_path: str = ":memory:"

    # Impact estimation
    qaly_value_aud: float = 28_000.0
    default_adherence: float = 1.0
    # Empty = bundled parameter table
    disease_table_path: str = ""


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
