"""Public shared HTTP server helpers for ccsearch packages."""

from .server import create_app, error_response, run_app

__all__ = ["create_app", "error_response", "run_app"]
