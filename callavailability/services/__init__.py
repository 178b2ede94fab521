"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .call_availability import CallAvailabilityService, CallRepositoryProtocol

__all__ = ["CallAvailabilityService", "CallRepositoryProtocol"]
