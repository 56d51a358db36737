"""Human-readable uptime formatting."""

from typing import Final

SECONDS_PER_MINUTE: Final[int] = 60
SECONDS_PER_HOUR: Final[int] = 60 * SECONDS_PER_MINUTE
SECONDS_PER_DAY: Final[int] = 24 * SECONDS_PER_HOUR


def domain_format_uptime(elapsed_seconds: float) -> str:
    """Format elapsed seconds as `1d 2h 3m 4s`.

    Day, hour and minute parts are omitted when zero. The seconds part is
    always present, so a fresh process reports `0s`.

    Args:
        elapsed_seconds: Elapsed wall-clock seconds. Negative values clamp to zero.

    Returns:
        str: Formatted uptime string.
    """

    total_seconds = max(int(elapsed_seconds), 0)
    days, remainder = divmod(total_seconds, SECONDS_PER_DAY)
    hours, remainder = divmod(remainder, SECONDS_PER_HOUR)
    minutes, seconds = divmod(remainder, SECONDS_PER_MINUTE)

    parts: list[str] = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    parts.append(f"{seconds}s")
    return " ".join(parts)
