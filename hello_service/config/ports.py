"""TCP port validation shared by settings loading and server startup."""

import re
from typing import Any, Final

MIN_PORT: Final[int] = 1
MAX_PORT: Final[int] = 65535

_PORT_TEXT_PATTERN: Final[re.Pattern[str]] = re.compile(r"[+-]?[0-9]+")


def config_validate_port(value: Any) -> int | None:
    """Parse and range-check a TCP port value.

    Args:
        value: Raw port value, typically an environment string or an integer.

    Returns:
        int | None: Port number within `MIN_PORT..MAX_PORT`, or None when the
        value is not a plain ASCII base-10 integer or falls outside the range.
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        parsed_port = value
    elif isinstance(value, str):
        port_text = value.strip()
        if not _PORT_TEXT_PATTERN.fullmatch(port_text):
            return None
        parsed_port = int(port_text, 10)
    else:
        return None

    if parsed_port < MIN_PORT or parsed_port > MAX_PORT:
        return None
    return parsed_port
