"""
Health check for the broker connection.

Example:
    >>> result = check_connection_health(consumer)
    >>> result.status
    <HealthStatus.HEALTHY: 'healthy'>
    >>> result.to_dict()["message"]
    'RabbitMQ connected'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from wuzevents.connection import RabbitMQConnection, sanitize_url
from wuzevents.consumer import EventConsumer


class HealthStatus(Enum):
    """Health status levels."""

    HEALTHY = "healthy"
    """Connected to the broker."""

    UNHEALTHY = "unhealthy"
    """Not connected to the broker."""


@dataclass
class HealthCheckResult:
    """Result of a health check."""

    status: HealthStatus
    message: str = ""
    details: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_healthy(self) -> bool:
        return self.status is HealthStatus.HEALTHY

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "details": self.details,
        }


def check_connection_health(target: RabbitMQConnection | EventConsumer) -> HealthCheckResult:
    """
    Report whether the broker connection is up.

    Args:
        target: A connection manager, or a consumer (whose connection is
            checked, with consumer details added)

    Returns:
        HEALTHY "RabbitMQ connected" or UNHEALTHY "RabbitMQ disconnected"
    """
    if isinstance(target, EventConsumer):
        connection = target.connection
        details: dict[str, Any] = {
            "consumer_state": target.state.value,
            "consumer_tag": target.consumer_tag,
            "in_flight": target.in_flight,
            "queue": target.config.queue_name,
            **target.stats.to_dict(),
        }
    else:
        connection = target
        details = {}

    details["broker_url"] = sanitize_url(connection.config.connection_string)

    if connection.is_connected:
        return HealthCheckResult(HealthStatus.HEALTHY, "RabbitMQ connected", details)
    return HealthCheckResult(HealthStatus.UNHEALTHY, "RabbitMQ disconnected", details)


__all__ = [
    "HealthCheckResult",
    "HealthStatus",
    "check_connection_health",
]
