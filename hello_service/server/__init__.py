"""Server package for listener lifecycle and process shutdown."""

from .lifecycle import ApplicationServer, ServerStartError, ServerState, ServerStopError
from .shutdown import ProcessShutdown

__all__ = ["ApplicationServer", "ProcessShutdown", "ServerStartError", "ServerState", "ServerStopError"]
