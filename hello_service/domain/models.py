"""Typed domain models shared across runtime layers."""

from dataclasses import dataclass


@dataclass(frozen=True)
class HealthStatus:
    """Health response contract used by the health-check surface.

    Attributes:
        status: Overall status text, always `up` while the process serves.
        uptime: Formatted elapsed time since application startup.
        environment: Runtime environment label.
    """

    status: str
    uptime: str
    environment: str
