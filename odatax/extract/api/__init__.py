"""High-level service API."""

from .service import ODataService

__all__ = ["ODataService"]
