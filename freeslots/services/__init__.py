"""
Service layer helpers that orchestrate domain logic behind JSON payloads.
"""

from .scheduler import NO_FREE_SLOTS, SchedulingService, parse_hour

__all__ = ["NO_FREE_SLOTS", "SchedulingService", "parse_hour"]
