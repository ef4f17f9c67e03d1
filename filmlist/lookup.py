"""Client for the movie lookup API (Radarr `/api/v3/movie/lookup`)."""

from typing import Any, Iterable, List, Optional

import requests

from .config import Settings
from .logger import StructuredLogger, get_logger
from .normalize import extract_year, year_matches
from .schema import CandidateMatch, validate_candidate


def filter_candidates(candidates: Iterable[CandidateMatch], year: int) -> List[CandidateMatch]:
    """Keep candidates with an IMDb or TMDb id whose year or secondary year matches."""
    return [
        c for c in candidates
        if c.has_identifier and year_matches(year, c.year, c.secondary_year)
    ]


def order_by_popularity(candidates: Iterable[CandidateMatch]) -> List[CandidateMatch]:
    """Most popular first; candidates without a score go last, ties keep API order."""
    return sorted(
        candidates,
        key=lambda c: c.popularity if c.popularity is not None else float("-inf"),
        reverse=True,
    )


class LookupClient:
    """
    Issues one lookup query per term and returns ranked candidates.

    The requests session is shared across worker threads; it is only used
    to send requests, never reconfigured after construction.
    """

    def __init__(
        self,
        settings: Settings,
        session: Optional[requests.Session] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        self.url = settings.lookup_url
        self.api_key = settings.api_key
        self.timeout = settings.lookup_timeout
        self.session = session or requests.Session()
        self.logger = logger or get_logger()

    def _fetch(self, term: str) -> Any:
        resp = self.session.get(
            self.url,
            params={"term": term, "apiKey": self.api_key},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    def _parse(self, payload: Any, term: str) -> List[CandidateMatch]:
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise ValueError(f"Expected a JSON array, got {type(payload).__name__}")

        candidates = []
        for item in payload:
            errors = validate_candidate(item)
            if errors:
                self.logger.debug("Skipping malformed candidate", term=term, errors=errors)
                continue
            candidates.append(CandidateMatch.from_api(item))
        return candidates

    def lookup(self, term: str) -> List[CandidateMatch]:
        """
        Look up a term such as "The Matrix (1999)".

        Returns:
            Filtered candidates ordered by popularity. Empty on any
            network or parse failure.
        """
        year = extract_year(term)
        try:
            payload = self._fetch(term)
            candidates = self._parse(payload, term)
        except requests.exceptions.Timeout:
            self.logger.record_lookup(failed=True)
            self.logger.error("API Error: lookup timed out", title=term, timeout=self.timeout)
            return []
        except requests.exceptions.RequestException as e:
            self.logger.record_lookup(failed=True)
            self.logger.error(f"API Error: {e}", title=term)
            return []
        except ValueError as e:
            self.logger.record_lookup(failed=True)
            self.logger.error(f"API Error: invalid response: {e}", title=term)
            return []
        except Exception as e:
            self.logger.record_lookup(failed=True)
            self.logger.error(f"API Error: unexpected {type(e).__name__}: {e}", title=term)
            return []

        self.logger.record_lookup()
        return order_by_popularity(filter_candidates(candidates, year))
