"""Report sinks: destinations for detail rows and the overview summary."""
from __future__ import annotations

from .memory import MemorySink
from .overview import overview_rows

__all__ = ["MemorySink", "overview_rows"]
