"""Filename parser - extracts series, issue, year and volume from a file path."""

from __future__ import annotations

import re

import structlog

from shortbox.core.models import ParsedComicInfo
from shortbox.core.utils import (
    clean_separators,
    normalize_issue_number,
    strip_bracketed_tags,
)

logger = structlog.get_logger("shortbox.parsing.filename")

# Extension: trailing dot plus a token with at least one letter, so "#12.1" keeps its decimal
EXTENSION_PATTERN = re.compile(r"\.[A-Za-z0-9]*[A-Za-z][A-Za-z0-9]*$")

YEAR_PATTERN = re.compile(r"\(((?:19|20)\d{2})\)")

_ISSUE_NUMBER = r"(\d{1,4}(?:\.\d{1,2})?)(?!\d)"

# Most specific first; the first pattern that matches wins
ISSUE_PATTERNS = [
    re.compile(rf"#\s*{_ISSUE_NUMBER}"),  # #001, # 12.5
    re.compile(rf"\bissue[\s_]*#?\s*{_ISSUE_NUMBER}", re.IGNORECASE),  # Issue 12
    re.compile(rf"(?<![A-Za-z0-9]){_ISSUE_NUMBER}"),  # bare 061, not glued to a word
]

VOLUME_PATTERN = re.compile(r"\b(?:volume|vol\.?|v)\s*(\d{1,3})(?!\d)", re.IGNORECASE)

# Folder names that say nothing about the series inside them
GENERIC_FOLDER_PATTERN = re.compile(r"incoming|scans", re.IGNORECASE)

DRIVE_PATTERN = re.compile(r"[A-Za-z]:")


def _remove_span(text: str, match: re.Match[str]) -> str:
    """Remove a matched token from the working string."""
    return f"{text[: match.start()]} {text[match.end() :]}"


def _split_path(path: str) -> tuple[str, str]:
    """Split a POSIX or Windows path into (folder name, filename)."""
    segments = re.split(r"[\\/]", path)
    filename = segments[-1]
    folder = segments[-2] if len(segments) > 1 else ""
    if DRIVE_PATTERN.fullmatch(folder):
        folder = ""
    return folder, filename


def _clean_folder_name(folder: str) -> str:
    """Clean a raw folder name the same way as the filename residual."""
    return clean_separators(strip_bracketed_tags(folder))


def _extract_issue(working: str) -> tuple[str | None, str]:
    for pattern in ISSUE_PATTERNS:
        match = pattern.search(working)
        if match:
            return normalize_issue_number(match.group(1)), _remove_span(working, match)
    return None, working


def parse_filename(path: str) -> ParsedComicInfo:
    """Extract a structured guess of series, issue, year and volume from a path.

    Extraction runs year -> issue -> volume, and every matched token is removed
    from the working string before the next pattern runs. This order is
    deliberate: "Batman Vol 2 #45 (2016)" yields issue 45 and volume 2, while
    "Batman Vol 2 045" binds the bare "2" as the issue because the bare-number
    rule runs before the volume rule.

    The series prefers the parent folder name unless the folder is empty or
    generic ("incoming", "scans"), in which case the cleaned filename residual
    is used.

    Args:
        path: File path with POSIX or Windows separators

    Returns:
        ParsedComicInfo with None for every field that was not found
    """
    folder, filename = _split_path(path)
    working = EXTENSION_PATTERN.sub("", filename)

    year: int | None = None
    year_match = YEAR_PATTERN.search(working)
    if year_match:
        year = int(year_match.group(1))
        working = _remove_span(working, year_match)

    # Scanner tags like "(Digital)" or "(2 covers)" must not feed the issue rule
    working = strip_bracketed_tags(working)

    issue, working = _extract_issue(working)

    volume: str | None = None
    volume_match = VOLUME_PATTERN.search(working)
    if volume_match:
        volume = volume_match.group(1)
        working = _remove_span(working, volume_match)

    filename_series = clean_separators(working)
    folder_series = _clean_folder_name(folder)

    if folder_series and not GENERIC_FOLDER_PATTERN.search(folder_series):
        series = folder_series
    else:
        series = filename_series

    parsed = ParsedComicInfo(
        series=series or None,
        issue=issue,
        year=year,
        volume=volume,
    )
    logger.debug(
        "Parsed filename",
        path=path,
        series=parsed.series,
        issue=parsed.issue,
        year=parsed.year,
        volume=parsed.volume,
        series_from_folder=bool(series) and series == folder_series,
    )
    return parsed


def generate_suggested_filename(parsed: ParsedComicInfo) -> str:
    """Build a canonical "Series #Issue (Year)" filename stem.

    Returns an empty string when series or issue is missing.
    """
    if not parsed.series or not parsed.issue:
        return ""
    suggested = f"{parsed.series} #{parsed.issue}"
    if parsed.year:
        suggested += f" ({parsed.year})"
    return suggested
