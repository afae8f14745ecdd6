"""
Configuration Module for the Naming Service

This module defines the configuration system for the naming service, using Pydantic for
settings validation and dependency injection through AppKeys.

The Settings class is loaded from environment variables with defaults suitable for
development environments. Application components access settings and shared resources
(database engine, metrics client, resolver) through typed AppKeys.

Key configuration areas include:
- Service networking and debugging
- Database connection for the NamingSystem registry
- Monitoring and error reporting
- Custom operations advertised in the CapabilityStatement
"""

import asyncio
import logging
from typing import Annotated, Final, List, Optional, Literal

from aiohttp import web
from pydantic import AliasChoices, Field, PostgresDsn, field_validator
from pydantic_settings import BaseSettings, NoDecode
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from social.graze.naming.app.metrics import MetricsClient
from social.graze.naming.model.health import HealthGauge
from social.graze.naming.resolve.preferred_id import PreferredIdResolver

logger = logging.getLogger(__name__)


PREFERRED_ID_OPERATION = "preferred-id"
"""Name of the custom operation resolving NamingSystem identifiers."""

PREFERRED_ID_OPERATION_DEFINITION = (
    "http://hl7.org/fhir/OperationDefinition/NamingSystem-preferred-id"
)
"""Canonical OperationDefinition advertised for the operation."""


class Settings(BaseSettings):
    """
    Application settings for the naming service.

    Environment variables are mapped to settings fields automatically, with aliases
    provided where deployments already use another name. For example, the database
    connection string can be set with either PG_DSN or DATABASE_URL.
    """

    debug: bool = False
    """
    Enable debug logging in the StatsD client.
    Set with DEBUG=true environment variable.
    """

    http_port: int = Field(alias="port", default=5100)
    """
    HTTP port for the service to listen on.
    Set with PORT environment variable.
    """

    pg_dsn: PostgresDsn = Field(
        "postgresql+asyncpg://postgres:password@db/naming",
        validation_alias=AliasChoices("pg_dsn", "database_url"),
    )  # type: ignore
    """
    PostgreSQL connection string for the NamingSystem registry.
    Set with PG_DSN or DATABASE_URL environment variables.
    """

    sentry_dsn: Optional[str] = None
    """
    Sentry DSN for error reporting. Optional, no error reporting if not set.
    Set with SENTRY_DSN environment variable.
    """

    metrics_backend: Literal["telegraf", "none"] = "telegraf"
    """
    Metrics backend, 'telegraf' or 'none'.
    Set with METRICS_BACKEND environment variable.
    """

    statsd_host: str = Field(alias="TELEGRAF_HOST", default="telegraf")
    """
    StatsD/Telegraf host for metrics collection.
    Set with TELEGRAF_HOST environment variable.
    """

    statsd_port: int = Field(alias="TELEGRAF_PORT", default=8125)
    """
    StatsD/Telegraf port for metrics collection.
    Set with TELEGRAF_PORT environment variable.
    """

    supported_custom_operations: Annotated[List[str], NoDecode] = [
        PREFERRED_ID_OPERATION
    ]
    """
    Custom operations enabled on this server.
    Set with SUPPORTED_CUSTOM_OPERATIONS environment variable as comma-separated values.
    An empty value disables $preferred-id.
    """

    software_name: str = "Graze Naming"
    """Software name reported in the CapabilityStatement"""

    @field_validator("supported_custom_operations", mode="before")
    @classmethod
    def decode_supported_custom_operations(cls, v) -> List[str]:
        """
        Accept a list of operation names or a comma-separated string.

        Names are compared without a leading "$" and without case.
        """
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, (list, tuple, set)):
            return [
                str(name).strip().removeprefix("$").lower()
                for name in v
                if str(name).strip()
            ]
        raise ValueError(
            "supported_custom_operations must be a list or a comma-separated string"
        )

    def supports_custom_operation(self, name: str) -> bool:
        return name.removeprefix("$").lower() in self.supported_custom_operations


# Application context keys for dependency injection
SettingsAppKey: Final = web.AppKey("settings", Settings)
"""AppKey for accessing the application settings"""

DatabaseAppKey: Final = web.AppKey("database", AsyncEngine)
"""AppKey for accessing the SQLAlchemy async database engine"""

DatabaseSessionMakerAppKey: Final = web.AppKey(
    "database_session_maker", async_sessionmaker[AsyncSession]
)
"""AppKey for accessing the SQLAlchemy async session factory"""

HealthGaugeAppKey: Final = web.AppKey("health_gauge", HealthGauge)
"""AppKey for accessing the health monitoring gauge"""

MetricsClientAppKey: Final = web.AppKey("metrics_client", MetricsClient)
"""AppKey for the metrics client"""

PreferredIdResolverAppKey: Final = web.AppKey(
    "preferred_id_resolver", PreferredIdResolver
)
"""AppKey for the resolver backing $preferred-id"""

TickHealthTaskAppKey: Final = web.AppKey("tick_health_task", asyncio.Task[None])
"""AppKey for the background task that decays the health gauge"""
