"""Hello service: minimal HTTP runtime exposing `/hello` and `/health`."""

__version__ = "1.0.0"
