"""Filename parsing for comic files."""

from .filename import generate_suggested_filename, parse_filename
from .publishers import DC_COMICS, MARVEL_COMICS, detect_publisher_from_characters

__all__ = [
    "DC_COMICS",
    "MARVEL_COMICS",
    "detect_publisher_from_characters",
    "generate_suggested_filename",
    "parse_filename",
]
