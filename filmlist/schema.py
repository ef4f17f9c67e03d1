"""
Data model for lookup candidates and resolved output records.

Lookup payloads are camelCase JSON objects from the movie lookup API.
validate_candidate() reports shape problems as a list of messages; an
empty list means the payload can be turned into a CandidateMatch.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

OPTIONAL_STR_FIELDS = ["title", "originalTitle", "overview", "remotePoster", "imdbId"]
OPTIONAL_INT_FIELDS = ["year", "secondaryYear", "tmdbId"]


def _is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def validate_candidate(data: Any) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    Absent and null fields are always allowed.
    """
    if not isinstance(data, dict):
        return [f"Candidate must be an object, got {type(data).__name__}"]

    errors: List[str] = []

    for f in OPTIONAL_STR_FIELDS:
        if data.get(f) is not None and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")

    for f in OPTIONAL_INT_FIELDS:
        if data.get(f) is not None and not _is_int(data[f]):
            errors.append(f"Field '{f}' must be an integer if provided")

    popularity = data.get("popularity")
    if popularity is not None and (isinstance(popularity, bool) or not isinstance(popularity, (int, float))):
        errors.append("Field 'popularity' must be a number if provided")

    images = data.get("images")
    if images is not None:
        if not isinstance(images, list):
            errors.append("Field 'images' must be a list if provided")
        elif not all(isinstance(img, dict) for img in images):
            errors.append("Field 'images' must only contain objects")

    genres = data.get("genres")
    if genres is not None and not isinstance(genres, list):
        errors.append("Field 'genres' must be a list if provided")

    return errors


@dataclass(frozen=True)
class MovieImage:
    cover_type: Optional[str] = None
    url: Optional[str] = None
    remote_url: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "MovieImage":
        return cls(
            cover_type=data.get("coverType"),
            url=data.get("url"),
            remote_url=data.get("remoteUrl"),
        )


@dataclass(frozen=True)
class CandidateMatch:
    """One search result from the movie lookup API."""

    title: Optional[str] = None
    original_title: Optional[str] = None
    year: Optional[int] = None
    secondary_year: Optional[int] = None
    overview: Optional[str] = None
    images: Tuple[MovieImage, ...] = ()
    remote_poster: Optional[str] = None
    imdb_id: Optional[str] = None
    tmdb_id: Optional[int] = None
    genres: Tuple[str, ...] = ()
    popularity: Optional[float] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "CandidateMatch":
        popularity = data.get("popularity")
        return cls(
            title=data.get("title"),
            original_title=data.get("originalTitle"),
            year=data.get("year"),
            secondary_year=data.get("secondaryYear"),
            overview=data.get("overview"),
            images=tuple(MovieImage.from_api(img) for img in data.get("images") or []),
            remote_poster=data.get("remotePoster"),
            imdb_id=data.get("imdbId"),
            tmdb_id=data.get("tmdbId"),
            genres=tuple(str(g) for g in data.get("genres") or []),
            popularity=float(popularity) if popularity is not None else None,
        )

    @property
    def has_identifier(self) -> bool:
        return bool(self.imdb_id) or self.tmdb_id is not None


@dataclass(frozen=True)
class ResolvedMovie:
    title: Optional[str]
    poster_url: str
    imdb_id: Optional[str]
    tmdb_id: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Title": self.title,
            "Poster_url": self.poster_url,
            "Imdb_id": self.imdb_id,
            "Tmdb_id": self.tmdb_id,
        }
