"""Visa requirements adapter backed by a static example table.

The table maps a citizenship (e.g. "American") to destination countries
that do not need a tourist visa. It is example data only and is always
tagged with mock provenance.
"""

import json
from functools import lru_cache
from pathlib import Path

from backend.app.adapters.result import ProviderResult
from backend.app.models.common import Provenance
from backend.app.models.plan import VisaResult

DEFAULT_VISA_RULES_PATH = Path(__file__).resolve().parent.parent / "data" / "visa_free.json"

MOCK_NOTE = (
    "Note: This is example visa information. "
    "Always verify with official sources before travel."
)

VISA_FREE_DOCUMENTS = [
    "Valid passport (at least 6 months validity)",
    "Return or onward ticket",
    "Proof of accommodation",
    "Proof of sufficient funds",
]

VISA_REQUIRED_DOCUMENTS = [
    "Valid passport (at least 6 months validity)",
    "Completed visa application form",
    "Recent passport-sized photographs",
    "Proof of accommodation",
    "Proof of sufficient funds",
    "Return or onward ticket",
    "Travel insurance",
]


@lru_cache
def load_visa_rules(path: str | None = None) -> dict[str, list[str]]:
    """Load the citizenship -> visa-free destinations table.

    Keys are lowercased so "American" and "american" resolve alike.
    """
    source = Path(path) if path else DEFAULT_VISA_RULES_PATH
    with open(source, encoding="utf-8") as f:
        raw: dict[str, list[str]] = json.load(f)
    return {citizenship.strip().lower(): countries for citizenship, countries in raw.items()}


def destination_country(destination: str) -> str:
    """Trailing comma-separated token of a destination, lowercased."""
    tail = destination.split(",")[-1].strip().lower()
    return tail or destination.strip().lower()


def is_visa_free(citizenship: str, destination: str, rules: dict[str, list[str]]) -> bool:
    """Check whether the destination country appears in the citizenship's list."""
    country = destination_country(destination)
    visa_free = rules.get(citizenship.strip().lower(), [])
    return any(entry.lower() in country for entry in visa_free)


def lookup_visa_requirements(
    citizenship: str,
    destination: str,
    rules: dict[str, list[str]],
) -> ProviderResult[VisaResult]:
    """Build the mock visa requirement record.

    Args:
        citizenship: Traveller citizenship as selected in the form
        destination: Destination text; the trailing token is the country
        rules: Citizenship -> visa-free list (see load_visa_rules)

    Returns:
        Mock ProviderResult; unknown pairs default to visa required
    """
    if is_visa_free(citizenship, destination, rules):
        return ProviderResult.mock(
            VisaResult(
                required=False,
                documents=list(VISA_FREE_DOCUMENTS),
                notes=MOCK_NOTE,
                source=Provenance.mock,
            )
        )

    return ProviderResult.mock(
        VisaResult(
            required=True,
            visa_type="Tourist Visa (example)",
            processing_time="5-15 business days (example)",
            documents=list(VISA_REQUIRED_DOCUMENTS),
            notes=MOCK_NOTE,
            source=Provenance.mock,
        )
    )
