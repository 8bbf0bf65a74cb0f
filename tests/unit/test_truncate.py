"""Tests for the truncate module."""

import pytest

from rg_pager.config import ELLIPSIS
from rg_pager.truncate import truncate_content


def test_short_text_unchanged():
    """Test text within budget is returned as-is, with no ellipsis."""
    assert truncate_content("hello", 5) == "hello"


def test_long_text_gets_ellipsis():
    """Test text over budget keeps exactly budget code points plus ellipsis."""
    assert truncate_content("hello world", 5) == "hello" + ELLIPSIS


@pytest.mark.parametrize(
    "text",
    [
        "Café résumé naïve façade",
        "日本語のテキストを検索する",
        "🎉🚀👍🏽 emoji 🎉🚀",
        "mixed ascii and 𝔘𝔫𝔦𝔠𝔬𝔡𝔢",
    ],
)
@pytest.mark.parametrize("budget", [1, 3, 7, 200])
def test_never_splits_code_points(text, budget):
    """Test the output always re-encodes cleanly with the expected length."""
    result = truncate_content(text, budget)

    encoded = result.encode("utf-8")
    assert encoded.decode("utf-8") == result
    assert "�" not in result
    if len(text) > budget:
        assert result == text[:budget] + ELLIPSIS
        assert len(result) == budget + len(ELLIPSIS)
    else:
        assert result == text


def test_invalid_budget():
    """Test a budget below one is rejected."""
    with pytest.raises(ValueError):
        truncate_content("abc", 0)
