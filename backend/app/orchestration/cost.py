"""Total cost estimation."""

from decimal import Decimal

from backend.app.models.common import Provenance
from backend.app.models.plan import FlightResult


def estimate_total_cost(flight: FlightResult, baseline: Decimal) -> tuple[Decimal, bool]:
    """Combine the miscellaneous baseline with the flight price.

    The flight price only counts when it came from a live search and is
    positive; anything else leaves the total at the baseline.

    Args:
        flight: Flight sub-result
        baseline: Fixed accommodation/food/miscellaneous allowance

    Returns:
        (total, is_estimate) where is_estimate is True if no live flight
        price was included
    """
    if flight.source == Provenance.live and flight.total_price > 0:
        return baseline + flight.total_price, False
    return baseline, True
