"""Airport code resolution from free-text locations.

The city table lives in ``backend/app/data/airport_codes.json`` and can be
replaced via the ``AIRPORT_CODES_PATH`` setting.
"""

import json
import logging
import re
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_AIRPORT_CODES_PATH = Path(__file__).resolve().parent.parent / "data" / "airport_codes.json"

_IATA_TOKEN = re.compile(r"\b([A-Z]{3})\b")

# Three-letter country abbreviations that are not airports
_NON_AIRPORT_TOKENS = frozenset({"USA", "UAE", "PRC", "DRC", "ROK"})


@lru_cache
def load_airport_codes(path: str | None = None) -> dict[str, str]:
    """Load the city -> IATA code table.

    Args:
        path: Optional override file; defaults to the bundled table

    Returns:
        Mapping of lowercase city names to IATA codes, longest names first
        so "new york city" is tried before "york"
    """
    source = Path(path) if path else DEFAULT_AIRPORT_CODES_PATH
    with open(source, encoding="utf-8") as f:
        raw: dict[str, str] = json.load(f)

    table = {city.strip().lower(): code.strip().upper() for city, code in raw.items()}
    return dict(sorted(table.items(), key=lambda item: len(item[0]), reverse=True))


def resolve_airport_code(location: str, table: dict[str, str]) -> str | None:
    """Resolve a location string to an IATA airport code.

    Order: an explicit 3-letter uppercase token ("Toronto YYZ"), then a
    case-insensitive substring match against the city table.

    Args:
        location: Free-text location as typed by the user
        table: City -> IATA mapping (see load_airport_codes)

    Returns:
        IATA code, or None if the location cannot be resolved
    """
    for token in _IATA_TOKEN.findall(location):
        if token not in _NON_AIRPORT_TOKENS:
            return token

    location_lower = location.lower()
    for city, code in table.items():
        if city in location_lower:
            return code

    logger.warning(f"[airports] Could not determine airport code for {location!r}")
    return None
