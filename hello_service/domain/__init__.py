"""Domain models used across application layer boundaries."""

from .models import HealthStatus
from .uptime import domain_format_uptime

__all__ = ["HealthStatus", "domain_format_uptime"]
