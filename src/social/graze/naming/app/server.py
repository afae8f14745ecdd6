import asyncio
import contextlib
import logging
from time import time
from typing import Optional

import sentry_sdk
from aiohttp import web
from sentry_sdk.integrations.aiohttp import AioHttpIntegration
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from social.graze.naming.app.config import (
    PREFERRED_ID_OPERATION,
    DatabaseAppKey,
    DatabaseSessionMakerAppKey,
    HealthGaugeAppKey,
    MetricsClientAppKey,
    PreferredIdResolverAppKey,
    Settings,
    SettingsAppKey,
    TickHealthTaskAppKey,
)
from social.graze.naming.app.handlers.internal import (
    handle_internal_alive,
    handle_internal_ready,
)
from social.graze.naming.app.handlers.metadata import handle_metadata
from social.graze.naming.app.handlers.preferred_id import (
    handle_get_preferred_id,
    handle_post_preferred_id,
)
from social.graze.naming.app.metrics import create_metrics_client
from social.graze.naming.app.tasks import tick_health_task
from social.graze.naming.model.health import HealthGauge
from social.graze.naming.resolve.preferred_id import PreferredIdResolver
from social.graze.naming.resolve.registry import DatabaseRegistryLookup

logger = logging.getLogger(__name__)

PREFERRED_ID_PATHS = (
    "/administration/NamingSystem/$preferred-id",
    "/administration/{information_model}/NamingSystem/$preferred-id",
)


async def background_tasks(app):
    logger.info("Starting up")
    settings: Settings = app[SettingsAppKey]

    engine = create_async_engine(str(settings.pg_dsn))
    app[DatabaseAppKey] = engine
    database_session = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )
    app[DatabaseSessionMakerAppKey] = database_session

    metrics_client = create_metrics_client(
        settings.metrics_backend,
        host=settings.statsd_host,
        port=settings.statsd_port,
        debug=settings.debug,
    )
    await metrics_client.connect()
    app[MetricsClientAppKey] = metrics_client

    app[PreferredIdResolverAppKey] = PreferredIdResolver(
        DatabaseRegistryLookup(app[DatabaseSessionMakerAppKey]),
        metrics_client=metrics_client,
    )

    logger.info("Startup complete")

    app[TickHealthTaskAppKey] = asyncio.create_task(tick_health_task(app))

    yield

    logger.info("Shutting down background tasks")

    app[TickHealthTaskAppKey].cancel()

    with contextlib.suppress(asyncio.exceptions.CancelledError):
        await app[TickHealthTaskAppKey]

    await app[DatabaseAppKey].dispose()
    await app[MetricsClientAppKey].close()


@web.middleware
async def sentry_middleware(request: web.Request, handler):
    try:
        response = await handler(request)
        return response
    except web.HTTPException:
        raise
    except Exception as e:
        sentry_sdk.capture_exception(e)
        await request.app[HealthGaugeAppKey].record_error()
        raise e


@web.middleware
async def statsd_middleware(request: web.Request, handler):
    metrics_client = request.app.get(MetricsClientAppKey)
    if metrics_client is None:
        return await handler(request)

    request_method: str = request.method
    request_path = (
        request.match_info.route.resource.canonical
        if request.match_info.route.resource is not None
        else request.path
    )

    start_time: float = time()
    response_status_code = 0

    try:
        response = await handler(request)
        response_status_code = response.status
        return response
    except web.HTTPException as e:
        response_status_code = e.status
        raise e
    except Exception as e:
        metrics_client.increment(
            "naming.server.request.exception",
            1,
            tag_dict={
                "exception": type(e).__name__,
                "path": request_path,
                "method": request_method,
            },
        )
        raise e
    finally:
        metrics_client.timer(
            "naming.server.request.time",
            time() - start_time,
            tag_dict={"path": request_path, "method": request_method},
        )
        metrics_client.increment(
            "naming.server.request.count",
            1,
            tag_dict={
                "path": request_path,
                "method": request_method,
                "status": response_status_code,
            },
        )


def add_routes(app: web.Application, settings: Settings) -> None:
    app.add_routes([web.get("/metadata", handle_metadata)])

    if settings.supports_custom_operation(PREFERRED_ID_OPERATION):
        for path in PREFERRED_ID_PATHS:
            app.add_routes(
                [
                    web.get(path, handle_get_preferred_id),
                    web.post(path, handle_post_preferred_id),
                ]
            )
    else:
        logger.info("Custom operation %s is disabled", PREFERRED_ID_OPERATION)

    app.add_routes(
        [
            web.get("/internal/alive", handle_internal_alive),
            web.get("/internal/ready", handle_internal_ready),
        ]
    )


def create_app(settings: Settings) -> web.Application:
    """
    Build the application without any startup resources.

    The resolver, database and metrics client are added by background_tasks, or by the caller when the
    application is used without it (tests, embedding).
    """
    app = web.Application(middlewares=[statsd_middleware, sentry_middleware])

    app[SettingsAppKey] = settings
    app[HealthGaugeAppKey] = HealthGauge()

    add_routes(app, settings)

    return app


async def start_web_server(settings: Optional[Settings] = None):

    if settings is None:
        settings = Settings()  # type: ignore
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            send_default_pii=False,
            integrations=[AioHttpIntegration()],
        )

    app = create_app(settings)
    app.cleanup_ctx.append(background_tasks)

    return app
