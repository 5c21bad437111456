"""Shared utility functions for Shortbox."""

from __future__ import annotations

import re

# Characters that are invalid in file and folder names on common filesystems
ILLEGAL_PATH_CHARACTERS = re.compile(r'[<>:"/\\|?*]')

# Separators that filenames use in place of spaces
SEPARATOR_PATTERN = re.compile(r"[-_.]")

# Bracketed scanner tags, e.g. "(Digital)", "[c2c]", "(2 covers)"
BRACKETED_TAG_PATTERN = re.compile(r"\([^)]*\)|\[[^\]]*\]")


def normalize_key(value: str | None) -> str:
    """Normalize a value for case-insensitive, trimmed comparison.

    Used as the identity key for knowledge base series and volume strings.

    Args:
        value: Value to normalize

    Returns:
        Lowercased, trimmed string ("" for None)
    """
    return (value or "").strip().lower()


def collapse_whitespace(value: str) -> str:
    """Collapse runs of whitespace to single spaces and trim."""
    return re.sub(r"\s+", " ", value).strip()


def clean_separators(value: str) -> str:
    """Replace filename separators with spaces.

    Underscores, hyphens and dots become spaces, then whitespace is collapsed.

    Args:
        value: Raw filename or folder fragment

    Returns:
        Cleaned string suitable for display as a series name
    """
    return collapse_whitespace(SEPARATOR_PATTERN.sub(" ", value))


def strip_bracketed_tags(value: str) -> str:
    """Remove parenthesized and bracketed groups from a string."""
    return BRACKETED_TAG_PATTERN.sub(" ", value)


def simplify_series_name(value: str | None) -> str:
    """Normalize a series name for similarity scoring.

    Lowercases, treats separators as spaces and collapses whitespace, so that
    "The Amazing Spider-Man" and "the amazing spider man" compare equal.

    Args:
        value: Series name to simplify

    Returns:
        Simplified series name ("" for None)
    """
    if not value:
        return ""
    return clean_separators(value.lower())


def normalize_issue_number(value: str | None) -> str | None:
    """Normalize an issue number string.

    Leading zeros are dropped by integer parse ("061" -> "61"); a decimal
    suffix is kept ("012.5" -> "12.5").

    Args:
        value: Issue number string (e.g., "001", "1.5")

    Returns:
        Normalized issue number, or None if the value is not numeric
    """
    if not value:
        return None
    text = value.strip()
    match = re.fullmatch(r"(\d+)(?:\.(\d+))?", text)
    if not match:
        return None
    whole = str(int(match.group(1)))
    if match.group(2) is not None:
        return f"{whole}.{match.group(2)}"
    return whole


def sanitize_path_component(value: str) -> str:
    """Remove characters that are invalid in file and folder names.

    Args:
        value: Value to sanitize

    Returns:
        Sanitized value
    """
    return ILLEGAL_PATH_CHARACTERS.sub("", value)
