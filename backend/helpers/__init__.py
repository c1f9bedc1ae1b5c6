"""
Helpers package - shared utility functions for route handlers.
"""

from .formatting import format_duration, rate_limit_info

__all__ = [
    'format_duration',
    'rate_limit_info'
]
