"""
Monitoring: Prometheus metrics and health checks.
"""

from .health_checks import HealthChecker, HealthStatus

__all__ = ["HealthChecker", "HealthStatus"]
