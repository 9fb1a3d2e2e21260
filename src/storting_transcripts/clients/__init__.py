"""HTTP clients for external services."""
from __future__ import annotations

from .storting import StortingClient

__all__ = ["StortingClient"]
