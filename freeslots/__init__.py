"""
freeslots - find free time slots in a working day.
"""

__version__ = "0.1.0"
