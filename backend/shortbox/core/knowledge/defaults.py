"""Bundled knowledge base used when no knowledge file exists yet."""

from __future__ import annotations

from typing import Any


def _volumes(*years: int) -> list[dict[str, Any]]:
    return [{"volume": str(year), "year": year} for year in years]


DEFAULT_SERIES: list[dict[str, Any]] = [
    {
        "series": "Action Comics",
        "publisher": "DC Comics",
        "startYear": 1938,
        "volumes": _volumes(1938, 2011, 2016),
    },
    {
        "series": "The Amazing Spider-Man",
        "publisher": "Marvel Comics",
        "startYear": 1963,
        "volumes": _volumes(1963, 1999, 2014, 2018),
    },
    {
        "series": "Batman",
        "publisher": "DC Comics",
        "startYear": 1940,
        "volumes": _volumes(1940, 2011, 2016),
    },
    {
        "series": "Detective Comics",
        "publisher": "DC Comics",
        "startYear": 1937,
        "volumes": _volumes(1937, 2011, 2016),
    },
    {
        "series": "Superman",
        "publisher": "DC Comics",
        "startYear": 1939,
        "volumes": _volumes(1939, 1987, 2006, 2011, 2016),
    },
    {
        "series": "X-Men",
        "publisher": "Marvel Comics",
        "startYear": 1963,
        "volumes": _volumes(1963, 1991, 2004, 2010, 2013),
    },
    {
        "series": "Fantastic Four",
        "publisher": "Marvel Comics",
        "startYear": 1961,
        "volumes": _volumes(1961, 1996, 1998, 2003, 2014, 2018),
    },
    {
        "series": "The Avengers",
        "publisher": "Marvel Comics",
        "startYear": 1963,
        "volumes": _volumes(1963, 1996, 1998, 2010, 2012, 2018),
    },
    {
        "series": "Wonder Woman",
        "publisher": "DC Comics",
        "startYear": 1942,
        "volumes": _volumes(1942, 1987, 2006, 2011, 2016),
    },
    {
        "series": "The Flash",
        "publisher": "DC Comics",
        "startYear": 1940,
        "volumes": _volumes(1940, 1959, 1987, 2010, 2011, 2016),
    },
    {
        "series": "Green Lantern",
        "publisher": "DC Comics",
        "startYear": 1941,
        "volumes": _volumes(1941, 1960, 1990, 2005, 2011),
    },
    {"series": "Saga", "publisher": "Image Comics", "startYear": 2012, "volumes": _volumes(2012)},
    {
        "series": "The Walking Dead",
        "publisher": "Image Comics",
        "startYear": 2003,
        "volumes": _volumes(2003),
    },
    {
        "series": "Invincible",
        "publisher": "Image Comics",
        "startYear": 2003,
        "volumes": _volumes(2003),
    },
    {"series": "Spawn", "publisher": "Image Comics", "startYear": 1992, "volumes": _volumes(1992)},
    {
        "series": "Hellboy",
        "publisher": "Dark Horse Comics",
        "startYear": 1994,
        "volumes": _volumes(1994),
    },
    {
        "series": "Sin City",
        "publisher": "Dark Horse Comics",
        "startYear": 1991,
        "volumes": _volumes(1991),
    },
    {
        "series": "Teenage Mutant Ninja Turtles",
        "publisher": "IDW Publishing",
        "startYear": 2011,
        "volumes": _volumes(2011),
    },
    {
        "series": "Transformers",
        "publisher": "IDW Publishing",
        "startYear": 2005,
        "volumes": _volumes(2005, 2009, 2019),
    },
]
