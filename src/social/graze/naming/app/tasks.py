import asyncio
import logging
from typing import NoReturn

from aiohttp import web

from social.graze.naming.app.config import HealthGaugeAppKey

logger = logging.getLogger(__name__)

HEALTH_TICK_INTERVAL = 30


async def tick_health_task(
    app: web.Application, interval: float = HEALTH_TICK_INTERVAL
) -> NoReturn:
    """
    Lower the health gauge by one every interval seconds, so past errors stop counting against readiness.
    """

    logger.info("Starting health gauge task")

    health_gauge = app[HealthGaugeAppKey]
    while True:
        await health_gauge.tick()
        await asyncio.sleep(interval)
