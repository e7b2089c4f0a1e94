"""Utility functions for vimstat."""

import re

VIMEO_PREFIX = 'http://vimeo.com/'
URL_LENGTH = 25

_LEADING_INT = re.compile(r'\s*([+-]?\d+)', re.ASCII)
_DIGITS = re.compile(r'[0-9]+', re.ASCII)


def strip_newline(text: str) -> str:
    """Remove a trailing newline (``\\n`` or ``\\r\\n``) from text."""
    if text.endswith('\n'):
        text = text[:-1]
        if text.endswith('\r'):
            text = text[:-1]
    return text


def is_skippable(line: str) -> bool:
    """Check if an input line is blank or a ``#`` comment.

    Args:
        line: Input line with its trailing newline already stripped.

    Returns:
        True if the line carries no URL and should be ignored silently.
    """
    return not line or line.startswith('#')


def parse_leading_int(text: str) -> int:
    """Parse the integer at the start of text, ignoring anything after it.

    Leading whitespace and a single sign are accepted. Parsing stops at the
    first non-digit. Text without a leading number yields 0.

    Args:
        text: Text such as ``"1234 plays"`` or ``" -5"``.

    Returns:
        The parsed integer, or 0 if there is none.
    """
    match = _LEADING_INT.match(text)
    if match is None:
        return 0
    return int(match.group(1))


def is_url_valid(url: str) -> bool:
    """Check if url is a supported Vimeo video link.

    Only the exact ``http://vimeo.com/NNNNNNNN`` shape is accepted: 25
    characters in total, with a positive numeric identifier after the prefix.

    Args:
        url: Candidate URL, trailing newline already stripped.

    Returns:
        True if the URL can be fetched and scraped.
    """
    if len(url) != URL_LENGTH or not url.startswith(VIMEO_PREFIX):
        return False

    video_id = url[len(VIMEO_PREFIX):]
    return _DIGITS.fullmatch(video_id) is not None and int(video_id) > 0
