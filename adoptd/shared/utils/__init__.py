"""
Utility helpers: structured logging, input validators and small conversions.
"""

from .helpers import round_half_up, utc_now
from .logging import get_logger, setup_logging

__all__ = ["get_logger", "round_half_up", "setup_logging", "utc_now"]
