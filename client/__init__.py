"""Backend-Anbindung (httpx)."""

from client.api import BpsApiClient, build_http_client

__all__ = ["BpsApiClient", "build_http_client"]
