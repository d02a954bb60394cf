"""
Domain layer - Pure business logic without external dependencies.
"""

from .answer import AnswerFormatter
from .business_day import BusinessDayAdvancer
from .exceptions import ParseError, SlotError, ValidationError
from .models import TimeInterval, WorkWindow
from .normalizer import normalize_intervals, parse_instant, parse_interval
from .slot_calculator import SlotCalculator

__all__ = [
    "AnswerFormatter",
    "BusinessDayAdvancer",
    "ParseError",
    "SlotError",
    "ValidationError",
    "TimeInterval",
    "WorkWindow",
    "normalize_intervals",
    "parse_instant",
    "parse_interval",
    "SlotCalculator",
]
