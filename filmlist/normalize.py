import re
from typing import Optional

TITLE_ENTRY_PATTERN = re.compile(r"(.*?)\s*\((\d{4})\)")
YEAR_PATTERN = re.compile(r"\((\d{4})\)")

# Year sentinel meaning "accept any release year"
ANY_YEAR = 0


def normalize_text(s: str) -> str:
    return " ".join(s.split())


def is_title_entry(text: str) -> bool:
    """True if text contains a `<title> (<year>)` segment."""
    return TITLE_ENTRY_PATTERN.search(text) is not None


def extract_year(term: str) -> int:
    match = YEAR_PATTERN.search(term)
    if match is None:
        return ANY_YEAR
    return int(match.group(1))


def year_matches(target: int, year: Optional[int], secondary_year: Optional[int]) -> bool:
    if target == ANY_YEAR:
        return True
    return year == target or secondary_year == target
