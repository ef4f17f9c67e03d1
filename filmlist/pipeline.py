"""
Resolution pipeline.

Responsibilities:
- Run one independent task per title entry on a worker pool.
- Bound in-flight tasks with an admission gate.
- Drive each entry through lookup, optional translate + second lookup,
  and match selection.
- Accumulate resolved / unresolved / ambiguous results.

Invariant:
Every entry ends in exactly one of resolved or unresolved. Ambiguous
entries are always also resolved. No task failure escapes run().
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Generic, Iterable, List, Optional, TypeVar

from .logger import StructuredLogger, get_logger
from .lookup import LookupClient
from .schema import ResolvedMovie
from .selection import select_match, to_resolved_movie
from .translate import Translator

T = TypeVar("T")

SOURCE_LANG = "es"
TARGET_LANG = "en"


class ResultBag(Generic[T]):
    """Append-only collection shared by worker threads."""

    def __init__(self):
        self._items: List[T] = []
        self._lock = threading.Lock()

    def append(self, item: T) -> None:
        with self._lock:
            self._items.append(item)

    def drain(self) -> List[T]:
        """Remove and return everything appended so far."""
        with self._lock:
            items, self._items = self._items, []
        return items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class AdmissionGate:
    """
    Counting semaphore bounding how many tasks run at once.

    Use as a context manager so the slot is released on every exit path.
    """

    def __init__(self, limit: int):
        if limit < 1:
            raise ValueError("limit must be >= 1")
        self.limit = limit
        self._semaphore = threading.BoundedSemaphore(limit)
        self._lock = threading.Lock()
        self.in_flight = 0
        self.peak = 0

    def __enter__(self) -> "AdmissionGate":
        self._semaphore.acquire()
        with self._lock:
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        with self._lock:
            self.in_flight -= 1
        self._semaphore.release()


@dataclass
class ResolutionResults:
    resolved: List[ResolvedMovie] = field(default_factory=list)
    unresolved: List[str] = field(default_factory=list)
    ambiguous: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Resolution:
    """Terminal state of one entry."""

    entry: str
    movie: Optional[ResolvedMovie] = None
    ambiguous: bool = False


class ResolutionPipeline:
    def __init__(
        self,
        lookup_client: LookupClient,
        translator: Translator,
        concurrency: int = 5,
        max_workers: Optional[int] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Args:
            lookup_client: Lookup API client shared by all tasks
            translator: Fallback translator shared by all tasks
            concurrency: Admission gate size
            max_workers: Worker threads (default: concurrency)
            logger: Structured logger (default: global logger)
        """
        self.lookup_client = lookup_client
        self.translator = translator
        self.gate = AdmissionGate(concurrency)
        self.max_workers = max_workers or concurrency
        self.logger = logger or get_logger()
        self._reset_results()

    def _reset_results(self) -> None:
        self._resolved: ResultBag[ResolvedMovie] = ResultBag()
        self._unresolved: ResultBag[str] = ResultBag()
        self._ambiguous: ResultBag[str] = ResultBag()

    def resolve_entry(self, entry: str) -> Resolution:
        """Lookup, then translate + lookup again if nothing matched, then select."""
        self.logger.info(f"Processing: {entry}")

        candidates = self.lookup_client.lookup(entry)
        if not candidates:
            translated = self.translator.translate(entry, SOURCE_LANG, TARGET_LANG)
            if translated.casefold() != entry.casefold():
                candidates = self.lookup_client.lookup(translated)

        decision = select_match(candidates)
        if not decision.resolved:
            self.logger.info(f"No results found for: {entry}")
            return Resolution(entry=entry)

        if decision.ambiguous:
            self.logger.info(f"More than 1 results found for: {entry}", candidates=len(candidates))
        return Resolution(
            entry=entry,
            movie=to_resolved_movie(decision.candidate),
            ambiguous=decision.ambiguous,
        )

    def _record(self, resolution: Resolution) -> None:
        if resolution.movie is None:
            self._unresolved.append(resolution.entry)
            self.logger.record_outcome("unresolved")
            return

        self._resolved.append(resolution.movie)
        self.logger.record_outcome("resolved")
        if resolution.ambiguous:
            self._ambiguous.append(resolution.entry)
            self.logger.record_outcome("ambiguous")

    def _run_task(self, entry: str) -> None:
        with self.gate:
            try:
                resolution = self.resolve_entry(entry)
            except Exception as e:
                self.logger.record_task_error(type(e).__name__)
                self.logger.error(f"Unexpected error while processing: {e}", title=entry)
                resolution = Resolution(entry=entry)
            self._record(resolution)

    def run(self, entries: Iterable[str]) -> ResolutionResults:
        """Resolve every entry and wait for all tasks to finish."""
        self._reset_results()
        unique = list(dict.fromkeys(entries))
        if unique:
            with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="resolve") as pool:
                futures = [pool.submit(self._run_task, entry) for entry in unique]
                for future in futures:
                    future.result()

        return ResolutionResults(
            resolved=self._resolved.drain(),
            unresolved=self._unresolved.drain(),
            ambiguous=self._ambiguous.drain(),
        )
