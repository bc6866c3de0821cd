"""User-facing status message assembled from non-fatal degradations."""

OVERALL_FAILURE_NOTICE = (
    "Plan generation hit an unexpected error; some sections show fallback information."
)
COST_ESTIMATE_NOTE = "Total cost is an estimate because live flight prices were unavailable."
VISA_MOCK_NOTE = "Visa information is example data; verify with official sources."


class StatusMessage:
    """Ordered collection of status fragments."""

    def __init__(self) -> None:
        self._fragments: list[str] = []

    def add(self, fragment: str | None) -> None:
        """Append a fragment; blank fragments are ignored."""
        if fragment and fragment.strip():
            self._fragments.append(_sentence(fragment))

    def prepend(self, fragment: str) -> None:
        """Insert a fragment ahead of everything collected so far."""
        if fragment.strip():
            self._fragments.insert(0, _sentence(fragment))

    def render(self) -> str | None:
        """Join fragments into one message, or None when there is nothing to say."""
        message = " ".join(self._fragments).strip()
        return message or None


def _sentence(fragment: str) -> str:
    text = fragment.strip()
    if text[-1] not in ".!?":
        text += "."
    return text
