# 📄 File: adoptd/shared/utils/helpers.py

# 🧭 Purpose (Layman Explanation):
# Small shared tools: rounding the way people expect (2.5 becomes 3), tidying text,
# and getting the current time in one consistent timezone.

# 🧪 Purpose (Technical Summary):
# General purpose helpers used across modules: half-up rounding, whitespace cleanup
# and the UTC clock.

# 🔗 Dependencies:
# - decimal: Half-up rounding
# - datetime: UTC clock
# - re: Whitespace normalization

# 🔄 Connected Modules / Calls From:
# Used by: time-phrase extractor, weather rules, plant AI parsers, reminder and notification clocks

import re
from datetime import datetime, timezone
from decimal import ROUND_FLOOR, Decimal


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves toward positive infinity.

    ``round()`` uses banker's rounding, so ``round(2.5) == 2``; this returns 3
    and ``-2.5`` gives -2.
    """
    return int((Decimal(str(value)) + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def clean_whitespace(text: str) -> str:
    """Clean excessive whitespace from text."""
    if not text:
        return text

    text = re.sub(r'\s+', ' ', text)
    return text.strip()
