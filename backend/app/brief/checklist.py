"""Document checklist extraction from the narrative text.

Keyword and bullet heuristics only; the result is advisory.
"""

import re

DOCUMENT_KEYWORDS = (
    "passport",
    "visa",
    "id card",
    "driver's license",
    "birth certificate",
    "travel insurance",
    "customs declaration",
    "health certificate",
    "vaccination certificate",
    "entry permit",
    "exit permit",
    "invitation letter",
    "proof of funds",
    "hotel reservation",
    "return ticket",
)

SECTION_HEADINGS = ("required documents", "document checklist", "documents needed")

_NUMBERED_BULLET = re.compile(r"^\d+\.\s")
_TITLED_LINE = re.compile(r"^[A-Z][^:\n]*:")


def _capitalize(item: str) -> str:
    return item[:1].upper() + item[1:]


def _is_bullet(line: str) -> bool:
    return line.startswith("* ") or line.startswith("- ") or bool(_NUMBERED_BULLET.match(line))


def _ends_section(raw_line: str) -> bool:
    """A new heading closes the documents section."""
    lowered = raw_line.strip().lower()
    if lowered.startswith("section") or lowered.startswith("part "):
        return True
    return bool(_TITLED_LINE.match(raw_line.strip())) and "document" not in lowered


def _keyword_sentence(line: str, keyword: str) -> str | None:
    for sentence in line.split("."):
        if keyword in sentence:
            found = sentence.strip()
            if 5 < len(found) < 100:
                return found
            return None
    return None


def extract_document_checklist(text: str) -> list[str]:
    """Extract a document checklist from free-form narrative text.

    Lines after a "Required Documents" style heading are collected as
    bullets until the next heading. Outside that section only bullets or
    sentences that mention a document keyword are kept. If nothing is
    found, every sentence of the whole text that mentions a keyword is
    used instead.

    Args:
        text: Narrative text (markdown-ish)

    Returns:
        Capitalized items, de-duplicated, in order of first appearance
    """
    # dict keeps insertion order and de-duplicates
    checklist: dict[str, None] = {}
    in_section = False

    for raw_line in text.split("\n"):
        line = raw_line.strip().lower()

        if any(heading in line for heading in SECTION_HEADINGS):
            in_section = True
            continue
        if in_section and _ends_section(raw_line):
            in_section = False

        if _is_bullet(line):
            item = line[line.index(" ") + 1 :].strip()
            if item and (in_section or any(keyword in item for keyword in DOCUMENT_KEYWORDS)):
                checklist[_capitalize(item)] = None
            continue

        for keyword in DOCUMENT_KEYWORDS:
            if keyword in line:
                found = _keyword_sentence(line, keyword)
                if found:
                    checklist[_capitalize(found)] = None

    if not checklist:
        for sentence in text.lower().split("."):
            item = sentence.strip()
            if 5 < len(item) < 100 and any(keyword in item for keyword in DOCUMENT_KEYWORDS):
                checklist[_capitalize(item)] = None

    return list(checklist)
