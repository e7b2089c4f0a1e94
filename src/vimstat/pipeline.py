"""Per-line pipeline: validate, fetch, extract, check and format."""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable

from vimstat.extract import extract_record
from vimstat.fetcher import FetchError, PageFetcher
from vimstat.formatters import Formatter
from vimstat.record import VideoRecord, is_record_valid
from vimstat.utils import is_skippable, is_url_valid, strip_newline

logger = logging.getLogger(__name__)


class StatError(Exception):
    """Base exception for a URL that could not be turned into a record."""

    message = 'Cannot stat URL'

    def __init__(self, url: str):
        super().__init__(f'{self.message}: {url}')
        self.url = url


class InvalidURLError(StatError):
    message = 'Invalid URL'


class UnreachableURLError(StatError):
    message = 'Unable to stat URL'


class BadValuesError(StatError):
    message = 'Bad values parsed from URL'


@dataclass
class RunSummary:
    """Counts of input lines by outcome."""

    processed: int = 0
    failed: int = 0
    skipped: int = 0


def stat_url(url: str, fetcher: PageFetcher, scrape_title: bool = True) -> VideoRecord:
    """Scrape one video URL into a validated record.

    Args:
        url: Candidate URL, trailing newline already stripped.
        fetcher: Page fetcher used for the single download attempt.
        scrape_title: Whether a title is scraped and required.

    Returns:
        A record with all counters set.

    Raises:
        InvalidURLError: If url is not a supported Vimeo link.
        UnreachableURLError: If the page could not be fetched.
        BadValuesError: If the page lacked one of the expected fields.
    """
    if not is_url_valid(url):
        raise InvalidURLError(url)

    try:
        lines = fetcher.fetch(url)
    except FetchError as e:
        logger.debug("Fetch failed: %s", e)
        raise UnreachableURLError(url) from e

    record = extract_record(url, lines, scrape_title=scrape_title)
    if not is_record_valid(record, require_title=scrape_title):
        logger.debug("Incomplete record: %r", record)
        raise BadValuesError(url)

    return record


def process_lines(
    lines: Iterable[str],
    fetcher: PageFetcher,
    formatter: Formatter,
    *,
    scrape_title: bool,
    emit: Callable[[str], None],
    report: Callable[[StatError], None],
) -> RunSummary:
    """Run every input line through the pipeline, in order.

    Blank and ``#`` comment lines are skipped silently. Each failing line is
    passed to report and processing continues with the next one.

    Args:
        lines: Input lines, with or without trailing newlines.
        fetcher: Page fetcher.
        formatter: Render function for valid records.
        scrape_title: Whether a title is scraped and required.
        emit: Called with the rendered output of each valid record.
        report: Called with the error of each failed line.

    Returns:
        RunSummary with per-outcome counts.
    """
    summary = RunSummary()

    for raw in lines:
        line = strip_newline(raw)
        if is_skippable(line):
            summary.skipped += 1
            continue

        try:
            record = stat_url(line, fetcher, scrape_title=scrape_title)
        except StatError as e:
            summary.failed += 1
            report(e)
            continue

        summary.processed += 1
        emit(formatter(record, scrape_title))

    return summary
