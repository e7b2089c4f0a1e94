"""Scraped video record and its validation."""

from dataclasses import dataclass

# Counter value before the matching marker has been seen
UNSET = -1

LINK_MAX = 25
TITLE_MAX = 200


@dataclass
class VideoRecord:
    """Counters (and optionally the title) scraped from one video page."""

    link: str
    title: str = ''
    view_count: int = UNSET
    like_count: int = UNSET
    comment_count: int = UNSET


def is_record_valid(record: VideoRecord, require_title: bool = True) -> bool:
    """Check that every expected field was scraped.

    Args:
        record: The populated record.
        require_title: If True, an empty title makes the record invalid.

    Returns:
        True if all counters are non-negative (and the title is set when
        required).
    """
    if require_title and not record.title:
        return False
    return (
        record.view_count >= 0
        and record.like_count >= 0
        and record.comment_count >= 0
    )
