"""HTTP API"""

from .server import create_app, run_api_server

__all__ = ["create_app", "run_api_server"]
