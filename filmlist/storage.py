import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from .pipeline import ResolutionResults

MOVIES_FILE = "movies_output.json"
NOT_FOUND_FILE = "movies_not_found.txt"
MULTIPLE_MATCHES_FILE = "movies_multiple_matches.txt"


@dataclass(frozen=True)
class OutputPaths:
    movies: Path
    not_found: Path
    multiple_matches: Path


def unique_path(path: Path) -> Path:
    """Return path, or the first free `<stem>_<n><suffix>` sibling if it exists."""
    candidate = path
    counter = 1
    while candidate.exists():
        candidate = path.with_name(f"{path.stem}_{counter}{path.suffix}")
        counter += 1
    return candidate


def save_movies(path: Path, results: ResolutionResults) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump([m.to_dict() for m in results.resolved], f, indent=2, ensure_ascii=False)


def save_lines(path: Path, lines: Iterable[str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        for line in lines:
            f.write(f"{line}\n")


def write_results(results: ResolutionResults, output_dir: Path) -> OutputPaths:
    output_dir.mkdir(parents=True, exist_ok=True)
    paths = OutputPaths(
        movies=unique_path(output_dir / MOVIES_FILE),
        not_found=unique_path(output_dir / NOT_FOUND_FILE),
        multiple_matches=unique_path(output_dir / MULTIPLE_MATCHES_FILE),
    )
    save_movies(paths.movies, results)
    save_lines(paths.not_found, results.unresolved)
    save_lines(paths.multiple_matches, results.ambiguous)
    return paths
