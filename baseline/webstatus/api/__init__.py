"""High-level API facades."""

from .webstatus_api import WebStatusAPI, create_webstatus_api

__all__ = ["WebStatusAPI", "create_webstatus_api"]
