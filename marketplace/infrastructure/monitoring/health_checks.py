"""
Health check implementations for the application.
"""

import asyncio
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional

import redis.asyncio as redis
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.config.logging import get_logger
from marketplace.config.settings import settings

logger = get_logger(__name__)

CRITICAL_SERVICES = ("database",)


@dataclass
class HealthStatus:
    """Result of a set of component checks."""

    is_healthy: bool
    checks: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )


class HealthChecker:
    """Health checker for application components."""

    def __init__(
        self,
        db_session: Optional[AsyncSession] = None,
        redis_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.db_session = db_session
        self.redis_url = redis_url or settings.REDIS_URL
        self.timeout = timeout or settings.HEALTH_CHECK_TIMEOUT
        self.checks: Dict[str, Callable[[], Awaitable[Dict[str, Any]]]] = {
            "database": self._check_database,
            "redis": self._check_redis,
        }

    async def run_health_checks(self) -> Dict[str, Dict[str, Any]]:
        """Run all health checks."""
        results = {}

        for check_name, check_func in self.checks.items():
            try:
                results[check_name] = await asyncio.wait_for(
                    check_func(), timeout=self.timeout
                )
            except asyncio.TimeoutError:
                logger.error("Health check timed out", check_name=check_name)
                results[check_name] = {"status": "error", "error": "timeout"}
            except Exception as e:
                logger.error("Health check failed", check_name=check_name, error=str(e))
                results[check_name] = {"status": "error", "error": str(e)}

        return results

    async def check_readiness(self) -> HealthStatus:
        """Check if the service can take traffic: every critical service healthy."""
        results = await self.run_health_checks()
        critical_healthy = all(
            results.get(service, {}).get("status") == "healthy"
            for service in CRITICAL_SERVICES
        )
        return HealthStatus(is_healthy=critical_healthy, checks=results)

    async def check_all_components(self) -> HealthStatus:
        """Check every component."""
        results = await self.run_health_checks()
        all_healthy = all(result.get("status") == "healthy" for result in results.values())
        return HealthStatus(is_healthy=all_healthy, checks=results)

    async def _check_database(self) -> Dict[str, Any]:
        if self.db_session is None:
            return {"status": "unhealthy", "error": "no database session"}

        started = time.perf_counter()
        await self.db_session.execute(text("SELECT 1"))
        return {
            "status": "healthy",
            "response_time_ms": round((time.perf_counter() - started) * 1000, 2),
        }

    async def _check_redis(self) -> Dict[str, Any]:
        client = redis.from_url(self.redis_url)
        started = time.perf_counter()
        try:
            await client.ping()
        finally:
            await client.aclose()

        return {
            "status": "healthy",
            "response_time_ms": round((time.perf_counter() - started) * 1000, 2),
        }
