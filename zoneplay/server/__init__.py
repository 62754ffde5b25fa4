"""Static landing-page server."""
from .app import create_app, resolve_port, serve

__all__ = ["create_app", "resolve_port", "serve"]
