"""Keyword rule table mapping free-text income labels to canonical stream keys"""

import re
from typing import Callable, Optional, Tuple

from vibescore_income.domain.constants import INCOME_STREAM_KEYS

StreamRule = Tuple[Callable[[str], bool], str]

CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def contains_any(*keywords: str) -> Callable[[str], bool]:
    def predicate(hint: str) -> bool:
        return any(keyword in hint for keyword in keywords)

    return predicate


def starts_word(*keywords: str) -> Callable[[str], bool]:
    """Match keywords only at the start of a word, so 'side' skips 'inside'"""
    pattern = re.compile(r"\b(?:" + "|".join(re.escape(keyword) for keyword in keywords) + ")")

    def predicate(hint: str) -> bool:
        return pattern.search(hint) is not None

    return predicate


# Evaluated top to bottom; first match wins
STREAM_RULES: Tuple[StreamRule, ...] = (
    (starts_word("bonus", "equity", "rsu", "stock grant", "incentive"), "bonus"),
    (starts_word("commission", "spiff"), "commission"),
    (starts_word("dividend", "passive", "interest", "royalt", "staking"), "passive"),
    (starts_word("rental", "property", "airbnb", "lease"), "rental"),
    (starts_word("side", "gig", "freelance", "etsy"), "side"),
    (starts_word("salary", "wage", "payroll", "paycheck", "primary", "w2", "w-2"), "primary"),
    (starts_word("additional", "secondary"), "additional"),
    (starts_word("gift", "rebate", "refund", "misc", "other"), "other"),
)


def canonical_stream_key(value: object) -> Optional[str]:
    """Exact canonical key for labels like 'bonus' or 'bonusIncome', else None"""
    text = str(value or "").strip().lower()
    if text.endswith("income"):
        text = text[: -len("income")].rstrip("_- ")
    return text if text in INCOME_STREAM_KEYS else None


def classify_stream_hint(hint: object) -> Optional[str]:
    """Canonical stream key for a free-text hint, or None when no rule matches"""
    text = CAMEL_BOUNDARY.sub(r"\1 \2", str(hint or "")).replace("_", " ").strip().lower()
    if not text:
        return None
    for predicate, key in STREAM_RULES:
        if predicate(text):
            return key
    return None
