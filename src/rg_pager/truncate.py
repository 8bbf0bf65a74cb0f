"""Bound rendered match text without splitting code points."""

from rg_pager.config import DEFAULT_MATCH_CONTENT_LENGTH, ELLIPSIS


def truncate_content(text: str, budget: int = DEFAULT_MATCH_CONTENT_LENGTH) -> str:
    """Keep the first ``budget`` code points of ``text``.

    A Python ``str`` is indexed by code point, so slicing can never cut a
    multi-byte UTF-8 sequence or a 4-byte character in half. The ellipsis is
    appended only when something was actually dropped.
    """
    if budget < 1:
        raise ValueError(f"budget must be at least 1, got {budget}")
    if len(text) <= budget:
        return text
    return text[:budget] + ELLIPSIS
