"""Unit tests for the stream keyword rule table"""

import pytest

from vibescore_income.domain.streams import canonical_stream_key, classify_stream_hint


@pytest.mark.parametrize(
    "hint,expected",
    [
        ("RSU vest", "bonus"),
        ("Annual bonus", "bonus"),
        ("Quarterly commission", "commission"),
        ("Dividends", "passive"),
        ("Airbnb condo", "rental"),
        ("Etsy shop", "side"),
        ("Freelance design", "side"),
        ("Salary", "primary"),
        ("Secondary job", "additional"),
        ("Birthday gift", "other"),
    ],
)
def test_classify_stream_hint(hint, expected):
    assert classify_stream_hint(hint) == expected


@pytest.mark.parametrize("hint", ["", None, "Mystery", "Day job"])
def test_classify_stream_hint_unmatched(hint):
    assert classify_stream_hint(hint) is None


@pytest.mark.parametrize(
    "hint,expected",
    [
        ("Inside sales salary", "primary"),
        ("Mother's support", None),
        ("Interior design gig", "side"),
        ("stockBonus", "bonus"),
        ("side_hustle", "side"),
        ("Other income", "other"),
    ],
)
def test_classify_stream_hint_matches_word_starts_only(hint, expected):
    assert classify_stream_hint(hint) == expected


def test_bonus_rule_wins_over_later_rules():
    assert classify_stream_hint("side hustle bonus") == "bonus"


def test_canonical_stream_key():
    assert canonical_stream_key("bonusIncome") == "bonus"
    assert canonical_stream_key("Side") == "side"
    assert canonical_stream_key("rental_income") == "rental"
    assert canonical_stream_key("salary") is None
    assert canonical_stream_key(None) is None
