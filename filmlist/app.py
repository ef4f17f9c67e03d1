import argparse
import os
from typing import Optional, Sequence

import requests

from .env import load_env
from . import __version__
from .config import DEFAULT_INPUT_NAME, Settings, load_settings
from .extract import NoMovieRowsError, load_entries
from .logger import StructuredLogger, get_logger
from .lookup import LookupClient
from .pipeline import ResolutionPipeline, ResolutionResults
from .storage import write_results
from .translate import Translator


def build_pipeline(settings: Settings, session: requests.Session, logger: StructuredLogger) -> ResolutionPipeline:
    return ResolutionPipeline(
        lookup_client=LookupClient(settings, session=session, logger=logger),
        translator=Translator(settings, session=session, logger=logger),
        concurrency=settings.concurrency,
        logger=logger,
    )


def run(
    input_name: str,
    settings: Settings,
    logger: StructuredLogger,
    session: Optional[requests.Session] = None,
) -> Optional[ResolutionResults]:
    """
    Resolve every title in the input list and write the three output files.

    Returns:
        The results, or None if the run stopped before resolving
        (missing input file or no movie rows).
    """
    input_path = settings.input_dir / input_name
    if not input_path.exists():
        logger.error(f"File not found: {input_path}")
        return None

    try:
        entries = load_entries(input_path, logger)
    except NoMovieRowsError as e:
        logger.error(str(e), path=str(input_path))
        return None
    if not entries:
        logger.error("No valid movie entries found in HTML file.", path=str(input_path))
        return None

    logger.info(f"Found {len(entries)} movies in the list")

    own_session = session is None
    session = session or requests.Session()
    try:
        results = build_pipeline(settings, session, logger).run(entries)
    finally:
        if own_session:
            session.close()

    paths = write_results(results, settings.output_dir)
    logger.info(f"Processing complete. Saved {len(results.resolved)} movies to {paths.movies}")
    logger.info(f"Saved {len(results.unresolved)} not found entries to {paths.not_found}")
    logger.info(f"Saved {len(results.ambiguous)} multiple match entries to {paths.multiple_matches}")
    logger.log_metrics_summary()
    return results


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        prog="filmlist",
        description=f"FilmAffinity list resolver {__version__}",
    )
    parser.add_argument(
        "input",
        nargs="?",
        default=DEFAULT_INPUT_NAME,
        help=f"List file name inside FILMLIST_INPUT_DIR (default: {DEFAULT_INPUT_NAME})",
    )
    args = parser.parse_args(argv)

    # Load .env if present (RADARR_API_KEY, FILMLIST_* overrides)
    load_env()
    settings = load_settings()

    logger = get_logger(
        level=settings.log_level,
        log_dir=settings.log_dir,
        enable_file=settings.log_dir is not None,
    )
    logger.info("FilmAffinity List Parser")
    logger.info("-------------------------")
    logger.info(f"Working path: {os.getenv('INPUT_PATH')}")
    for warning in settings.warnings:
        logger.warning(warning)
    if settings.api_key_source:
        logger.debug(f"Using lookup API key from {settings.api_key_source}")

    run(args.input, settings, logger)


if __name__ == "__main__":
    main()
