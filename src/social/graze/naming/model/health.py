import asyncio


class HealthGauge:
    """
    Error-rate gauge backing the readiness probe.

    Every unexpected error (a registry that cannot be queried, an unhandled exception in a handler) raises the gauge
    by one. A background task lowers it by one per tick. While the gauge stays above the threshold the service reports
    itself as not ready, so a burst of registry failures takes the instance out of rotation until it recovers.
    """

    def __init__(self, value: int = 0, health_threshold: int = 100) -> None:
        self._value = value
        self._health_threshold = health_threshold
        self._lock = asyncio.Lock()

    async def record_error(self, count: int = 1) -> int:
        async with self._lock:
            self._value += int(count)
            return self._value

    async def tick(self) -> None:
        async with self._lock:
            if self._value > 0:
                self._value -= 1

    async def is_healthy(self) -> bool:
        async with self._lock:
            return self._value <= self._health_threshold
