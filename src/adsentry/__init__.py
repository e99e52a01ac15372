"""adsentry - read-only best-practice audit for search advertising accounts."""
from __future__ import annotations

__version__ = "0.4.0"
