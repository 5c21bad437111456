"""Remote metadata sources consulted by the scraper fallback."""

from __future__ import annotations

import asyncio
import html
import random
import re
from typing import Any

import httpx
import structlog
from pydantic import BaseModel, Field

from shortbox.core.models import Creator
from shortbox.core.utils import normalize_key

logger = structlog.get_logger("shortbox.scraper.sources")

COMICVINE_BASE_URL = "https://comicvine.gamespot.com/api"
COMICVINE_INVALID_KEY_STATUS = 100

HTML_TAG_PATTERN = re.compile(r"<[^>]+>")


class SourceRecord(BaseModel):
    """Series-level metadata returned by a source."""

    series: str
    publisher: str
    volume: str
    summary: str | None = None
    creators: list[Creator] = Field(default_factory=list)


class MetadataSource:
    """Base class for remote metadata sources."""

    name = "source"

    async def lookup(self, series: str, api_key: str) -> SourceRecord | None:
        """Look up a series by its exact name; None when there is no hit."""
        raise NotImplementedError

    async def check_connection(self, api_key: str) -> tuple[bool, str]:
        """Verify the credential against the source."""
        return True, "Connection successful!"


def _record(
    series: str, publisher: str, volume: str, summary: str, *creators: tuple[str, str]
) -> SourceRecord:
    return SourceRecord(
        series=series,
        publisher=publisher,
        volume=volume,
        summary=summary,
        creators=[Creator(name=name, role=role) for name, role in creators],
    )


MOCK_RECORDS: dict[str, SourceRecord] = {
    record.series: record
    for record in (
        _record(
            "Saga",
            "Image Comics",
            "1",
            "Saga is an epic space opera/fantasy comic book series written by Brian K. "
            "Vaughan and illustrated by Fiona Staples, published monthly by Image Comics.",
            ("Brian K. Vaughan", "Writer"),
            ("Fiona Staples", "Artist"),
        ),
        _record(
            "Batman The Knight",
            "DC Comics",
            "2022",
            "The origin of Batman and his never-ending crusade against crime in Gotham City.",
            ("Chip Zdarsky", "Writer"),
            ("Carmine Di Giandomenico", "Artist"),
        ),
        _record(
            "Ice Cream Man",
            "Image Comics",
            "2018",
            "A genre-defying series that tells a new, strange and horrifying story in each issue.",
            ("W. Maxwell Prince", "Writer"),
            ("Martín Morazzo", "Artist"),
        ),
        _record(
            "The Amazing Spider-Man",
            "Marvel Comics",
            "1963",
            "The classic adventures of Spider-Man from the early days.",
            ("Stan Lee", "Writer"),
            ("Steve Ditko", "Artist"),
        ),
        _record(
            "Action Comics",
            "DC Comics",
            "1938",
            "The comic that introduced Superman to the world.",
            ("Jerry Siegel", "Writer"),
            ("Joe Shuster", "Artist"),
        ),
        _record(
            "Radiant Black",
            "Image Comics",
            "2021",
            "A new superhero for a new generation.",
            ("Kyle Higgins", "Writer"),
        ),
        _record(
            "Invincible",
            "Image Comics",
            "2003",
            "The story of a teenage superhero trying to live up to his father's legacy.",
            ("Robert Kirkman", "Writer"),
            ("Cory Walker", "Artist"),
        ),
        _record(
            "Monstress",
            "Image Comics",
            "2015",
            "A young woman struggles to survive in a world torn apart by war.",
            ("Marjorie Liu", "Writer"),
            ("Sana Takeda", "Artist"),
        ),
        _record(
            "Paper Girls",
            "Image Comics",
            "2015",
            "Four young girls who deliver newspapers in 1988 get caught up in a conflict "
            "between warring factions of time-travelers.",
            ("Brian K. Vaughan", "Writer"),
            ("Cliff Chiang", "Artist"),
        ),
        _record(
            "The Wicked The Divine",
            "Image Comics",
            "2014",
            "Every ninety years, twelve gods incarnate as humans.",
            ("Kieron Gillen", "Writer"),
            ("Jamie McKelvie", "Artist"),
        ),
        _record(
            "East of West",
            "Image Comics",
            "2013",
            "The Four Horsemen of the Apocalypse roam an alternate timeline American West.",
            ("Jonathan Hickman", "Writer"),
            ("Nick Dragotta", "Artist"),
        ),
        _record(
            "Invincible Iron Man",
            "Marvel Comics",
            "2008",
            "Tony Stark is Iron Man. His greatest invention becomes his greatest mistake.",
            ("Matt Fraction", "Writer"),
            ("Salvador Larroca", "Artist"),
        ),
    )
}


class MockMetadataSource(MetadataSource):
    """In-memory source with a fixed set of records, keyed by exact series name."""

    name = "mock"

    def __init__(self, records: dict[str, SourceRecord] | None = None):
        self.records = dict(MOCK_RECORDS if records is None else records)

    async def lookup(self, series: str, api_key: str) -> SourceRecord | None:
        return self.records.get(series)


class ComicVineMetadataSource(MetadataSource):
    """ComicVine ``volumes`` endpoint lookup.

    Only an exact (trimmed, case-insensitive) name hit counts as a match.
    Rate limit responses (HTTP 420, 429) and network errors are retried with
    exponential backoff; anything else is reported as no match.
    """

    name = "comicvine"

    def __init__(
        self,
        base_url: str = COMICVINE_BASE_URL,
        max_retries: int = 3,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.timeout = timeout
        self.transport = transport

    async def _fetch(self, endpoint: str, params: dict[str, Any], api_key: str) -> dict[str, Any]:
        """Call the API with retry on rate limits and network errors.

        Raises:
            httpx.HTTPStatusError: For HTTP errors (after retries)
            httpx.RequestError: For network errors (after retries)
        """
        url = f"{self.base_url}/{endpoint.strip('/')}/"
        request_params = {"format": "json", **params, "api_key": api_key}
        logger.debug("Calling ComicVine API", endpoint=endpoint)

        for attempt in range(self.max_retries + 1):
            try:
                async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                    response = await client.get(
                        url,
                        params=request_params,
                        headers={
                            "User-Agent": "Shortbox/0.1",
                            "Accept": "application/json",
                        },
                    )
                    response.raise_for_status()
                    return response.json()

            except httpx.HTTPStatusError as e:
                if e.response.status_code in (420, 429) and attempt < self.max_retries:
                    base_wait = 2**attempt
                    wait_time = base_wait + random.uniform(0, base_wait * 0.5)
                    logger.warning(
                        "Rate limited by ComicVine, retrying",
                        status_code=e.response.status_code,
                        attempt=attempt + 1,
                        wait_seconds=wait_time,
                    )
                    await asyncio.sleep(wait_time)
                    continue
                raise

            except httpx.RequestError as e:
                if attempt < self.max_retries:
                    wait_time = 2**attempt
                    logger.warning(
                        "Network error, retrying",
                        error=str(e),
                        attempt=attempt + 1,
                        wait_seconds=wait_time,
                    )
                    await asyncio.sleep(wait_time)
                    continue
                raise

        raise RuntimeError("Unexpected error in ComicVine source")

    @staticmethod
    def _summary(result: dict[str, Any]) -> str | None:
        text = result.get("deck") or result.get("description")
        if not text:
            return None
        return html.unescape(HTML_TAG_PATTERN.sub(" ", text)).strip() or None

    async def lookup(self, series: str, api_key: str) -> SourceRecord | None:
        try:
            data = await self._fetch(
                "volumes",
                {
                    "filter": f"name:{series}",
                    "field_list": "name,publisher,start_year,deck,description",
                    "limit": 20,
                },
                api_key,
            )
        except httpx.HTTPError as e:
            logger.warning("ComicVine lookup failed", series=series, error=str(e))
            return None

        if data.get("status_code") == COMICVINE_INVALID_KEY_STATUS:
            logger.warning("ComicVine rejected the API key", series=series)
            return None

        wanted = normalize_key(series)
        for result in data.get("results") or []:
            if normalize_key(result.get("name")) != wanted:
                continue
            publisher = (result.get("publisher") or {}).get("name") or "Unknown Publisher"
            start_year = str(result.get("start_year") or "").strip()
            return SourceRecord(
                series=result["name"].strip(),
                publisher=publisher,
                volume=start_year,
                summary=self._summary(result),
            )

        logger.debug("No exact ComicVine match", series=series)
        return None

    async def check_connection(self, api_key: str) -> tuple[bool, str]:
        try:
            data = await self._fetch("types", {}, api_key)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 401:
                return False, "Invalid API Key provided."
            return False, f"ComicVine returned HTTP {e.response.status_code}."
        except httpx.RequestError as e:
            return False, f"Could not reach ComicVine: {e}"

        if data.get("status_code") == COMICVINE_INVALID_KEY_STATUS:
            return False, "Invalid API Key provided."
        return True, "Connection successful!"


MARVEL_RECORDS: dict[str, SourceRecord] = {
    record.series: record
    for record in (
        _record(
            "The Amazing Spider-Man",
            "Marvel Comics",
            "1963",
            "The classic adventures of Spider-Man from the early days.",
            ("Stan Lee", "Writer"),
            ("Steve Ditko", "Artist"),
            ("John Romita Sr.", "Cover Artist"),
        ),
        _record(
            "Invincible Iron Man",
            "Marvel Comics",
            "2008",
            "Tony Stark is Iron Man. His greatest invention becomes his greatest mistake.",
            ("Matt Fraction", "Writer"),
            ("Salvador Larroca", "Artist"),
        ),
    )
}


class MarvelMetadataSource(MockMetadataSource):
    """Publisher-specific source for Marvel series.

    Authenticates with its own public/private key pair; the generic API key
    passed to ``lookup`` is ignored.
    """

    name = "marvel"

    def __init__(
        self,
        public_key: str | None,
        private_key: str | None,
        records: dict[str, SourceRecord] | None = None,
    ):
        super().__init__(MARVEL_RECORDS if records is None else records)
        self.public_key = public_key
        self.private_key = private_key

    @property
    def has_keys(self) -> bool:
        return bool(self.public_key) and bool(self.private_key)

    async def lookup(self, series: str, api_key: str) -> SourceRecord | None:
        if not self.has_keys:
            logger.debug("Marvel keys missing, skipping lookup", series=series)
            return None
        return self.records.get(series)

    async def check_connection(self, api_key: str) -> tuple[bool, str]:
        if not self.has_keys:
            return False, "Marvel API keys are missing."
        return True, "Connection successful!"
