"""HTTP API for stream resolution and administration."""

from streamhub.api.app import create_app

__all__ = ["create_app"]
