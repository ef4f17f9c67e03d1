"""Extract `<title> (<year>)` entries from an exported FilmAffinity list page."""

from pathlib import Path
from typing import Iterable, Optional, Set

from bs4 import BeautifulSoup

from .logger import StructuredLogger, get_logger
from .normalize import is_title_entry, normalize_text

LIST_TABLE_CLASSES = {"ml", "lists"}


class NoMovieRowsError(ValueError):
    """Raised when the page holds no movie list rows at all."""


def _find_list_rows(soup: BeautifulSoup) -> list:
    for table in soup.find_all("table"):
        classes = set(table.get("class") or [])
        if classes == LIST_TABLE_CLASSES:
            return table.find_all("tr", recursive=False) or [
                tr for tbody in table.find_all("tbody", recursive=False)
                for tr in tbody.find_all("tr", recursive=False)
            ]
    return []


def entries_from_cells(cells: Iterable[str], logger: Optional[StructuredLogger] = None) -> Set[str]:
    """Keep the unique cell texts that look like a title entry."""
    logger = logger or get_logger()
    entries: Set[str] = set()
    for cell in cells:
        full_title = normalize_text(cell)
        if is_title_entry(full_title):
            entries.add(full_title)
        else:
            logger.warning(f"Invalid format for row {full_title}")
    return entries


def extract_entries(html: str, logger: Optional[StructuredLogger] = None) -> Set[str]:
    """
    Parse the list page and return the set of unique title entries.

    The first cell of each row in the `ml lists` table is the title cell.
    Rows whose title cell does not contain a `(YYYY)` year are skipped.

    Raises:
        NoMovieRowsError: If the list table or its rows are missing
    """
    soup = BeautifulSoup(html, "html.parser")
    rows = _find_list_rows(soup)
    if not rows:
        raise NoMovieRowsError("No movie data found in HTML file.")

    cells = []
    for row in rows:
        cell = row.find("td", recursive=False)
        if cell is not None:
            cells.append(cell.get_text())
    return entries_from_cells(cells, logger)


def load_entries(path: Path, logger: Optional[StructuredLogger] = None) -> Set[str]:
    with path.open("r", encoding="utf-8") as f:
        return extract_entries(f.read(), logger)
