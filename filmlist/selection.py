"""
Match selection policy.

Several candidates are not a rejection: the most popular one is kept and
the title is flagged as ambiguous for manual review.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from .schema import CandidateMatch, ResolvedMovie


@dataclass(frozen=True)
class MatchDecision:
    candidate: Optional[CandidateMatch] = None
    ambiguous: bool = False

    @property
    def resolved(self) -> bool:
        return self.candidate is not None


def select_match(candidates: Sequence[CandidateMatch]) -> MatchDecision:
    if not candidates:
        return MatchDecision()
    return MatchDecision(candidate=candidates[0], ambiguous=len(candidates) > 1)


def poster_url(candidate: CandidateMatch) -> str:
    """First `poster` image's remote URL, else the remote poster, else ""."""
    poster = next((img for img in candidate.images if img.cover_type == "poster"), None)
    if poster is not None and poster.remote_url:
        return poster.remote_url
    if candidate.remote_poster:
        return candidate.remote_poster
    return ""


def to_resolved_movie(candidate: CandidateMatch) -> ResolvedMovie:
    return ResolvedMovie(
        title=candidate.title,
        poster_url=poster_url(candidate),
        imdb_id=candidate.imdb_id,
        tmdb_id=candidate.tmdb_id,
    )


def prompt_user_to_select(
    candidates: Sequence[CandidateMatch],
    original_title: str,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> Optional[CandidateMatch]:
    """
    Ask on the terminal which candidate is meant. Entering 0 skips.

    Only for manual runs; the automated pipeline uses select_match().
    """
    output_fn(f"Multiple matches found for '{original_title}'. Please select one:")
    for i, movie in enumerate(candidates, start=1):
        output_fn(f"{i}. {movie.title} ({movie.year}) - {movie.imdb_id}")

    while True:
        raw = input_fn(f"Enter selection (1-{len(candidates)}) or 0 to skip: ")
        try:
            selection = int(raw.strip())
        except ValueError:
            selection = -1

        if selection == 0:
            return None
        if 0 < selection <= len(candidates):
            return candidates[selection - 1]

        output_fn("Invalid selection, please try again.")
