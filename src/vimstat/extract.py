"""Field extraction from fetched marker lines."""

from typing import Iterable

from vimstat.record import LINK_MAX, TITLE_MAX, VideoRecord
from vimstat.utils import parse_leading_int, strip_newline

VIEWS_MARKER = 'userplays:'
LIKES_MARKER = 'userlikes:'
COMMENTS_MARKER = 'usercomments:'
HINTS_MARKER = 'google_hints'


def _starts_with(line: str, marker: str) -> bool:
    return line[:len(marker)].lower() == marker


def extract_record(
    link: str,
    lines: Iterable[str],
    scrape_title: bool = True,
) -> VideoRecord:
    """Build a record from the marker lines of one video page.

    Markers are matched case-insensitively at the start of each line. When
    scrape_title is set, every line that is not a counter (and not a raw
    google_hints line) is taken as the title; the last such line wins.

    Args:
        link: The video URL the lines were fetched from.
        lines: Values produced by a PageFetcher.
        scrape_title: Whether to collect a title candidate.

    Returns:
        A new VideoRecord. Counters whose marker never appeared stay UNSET.
    """
    record = VideoRecord(link=strip_newline(link)[:LINK_MAX])

    for line in lines:
        if _starts_with(line, VIEWS_MARKER):
            record.view_count = parse_leading_int(line[len(VIEWS_MARKER):])
        elif _starts_with(line, LIKES_MARKER):
            record.like_count = parse_leading_int(line[len(LIKES_MARKER):])
        elif _starts_with(line, COMMENTS_MARKER):
            record.comment_count = parse_leading_int(line[len(COMMENTS_MARKER):])
        elif scrape_title and not _starts_with(line, HINTS_MARKER):
            record.title = strip_newline(line[:TITLE_MAX])

    return record
