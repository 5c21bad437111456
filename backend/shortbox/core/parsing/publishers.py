"""Publisher hints from well-known character names."""

from __future__ import annotations

import re

from shortbox.core.utils import simplify_series_name

DC_COMICS = "DC Comics"
MARVEL_COMICS = "Marvel Comics"

CHARACTER_PUBLISHERS: dict[str, str] = {
    # DC Comics
    "superman": DC_COMICS,
    "batman": DC_COMICS,
    "wonder woman": DC_COMICS,
    "flash": DC_COMICS,
    "green lantern": DC_COMICS,
    "aquaman": DC_COMICS,
    "cyborg": DC_COMICS,
    "green arrow": DC_COMICS,
    "martian manhunter": DC_COMICS,
    "shazam": DC_COMICS,
    "nightwing": DC_COMICS,
    "robin": DC_COMICS,
    "batgirl": DC_COMICS,
    "supergirl": DC_COMICS,
    "harley quinn": DC_COMICS,
    "joker": DC_COMICS,
    "catwoman": DC_COMICS,
    "poison ivy": DC_COMICS,
    "lex luthor": DC_COMICS,
    "deathstroke": DC_COMICS,
    "teen titans": DC_COMICS,
    "justice league": DC_COMICS,
    "birds of prey": DC_COMICS,
    "suicide squad": DC_COMICS,
    # Marvel Comics
    "spider-man": MARVEL_COMICS,
    "spiderman": MARVEL_COMICS,
    "iron man": MARVEL_COMICS,
    "captain america": MARVEL_COMICS,
    "thor": MARVEL_COMICS,
    "hulk": MARVEL_COMICS,
    "black widow": MARVEL_COMICS,
    "hawkeye": MARVEL_COMICS,
    "ant-man": MARVEL_COMICS,
    "captain marvel": MARVEL_COMICS,
    "ms marvel": MARVEL_COMICS,
    "daredevil": MARVEL_COMICS,
    "punisher": MARVEL_COMICS,
    "deadpool": MARVEL_COMICS,
    "wolverine": MARVEL_COMICS,
    "x-men": MARVEL_COMICS,
    "fantastic four": MARVEL_COMICS,
    "avengers": MARVEL_COMICS,
    "guardians of the galaxy": MARVEL_COMICS,
    "doctor strange": MARVEL_COMICS,
    "scarlet witch": MARVEL_COMICS,
    "winter soldier": MARVEL_COMICS,
    "black panther": MARVEL_COMICS,
    "venom": MARVEL_COMICS,
    "carnage": MARVEL_COMICS,
    "green goblin": MARVEL_COMICS,
    "doctor octopus": MARVEL_COMICS,
    "thanos": MARVEL_COMICS,
    "loki": MARVEL_COMICS,
    "galactus": MARVEL_COMICS,
}

_CHARACTER_PATTERNS = [
    (re.compile(rf"\b{re.escape(simplify_series_name(name))}\b"), publisher)
    for name, publisher in CHARACTER_PUBLISHERS.items()
]


def detect_publisher_from_characters(series: str | None) -> str | None:
    """Guess a publisher from a character name appearing in the series.

    Names match as whole words on the simplified series, so "Spider_Man" and
    "spider-man" both hit, while "Authority" does not hit "thor".

    Args:
        series: Parsed series name

    Returns:
        Publisher name, or None when no known character appears
    """
    simplified = simplify_series_name(series)
    if not simplified:
        return None
    for pattern, publisher in _CHARACTER_PATTERNS:
        if pattern.search(simplified):
            return publisher
    return None
