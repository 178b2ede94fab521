"""
Adapters layer - External data sources for availability and booked calls.
"""

from .json_repository import JsonCallRepository

__all__ = ["JsonCallRepository"]
