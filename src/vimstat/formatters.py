"""Plain text and HTML table row output for scraped records."""

from enum import Enum
from typing import Callable

from vimstat.record import VideoRecord


class OutputFormat(str, Enum):
    TEXT = 'text'
    HTML = 'html'


def format_text(record: VideoRecord, include_title: bool = True) -> str:
    """Render a record as labeled lines followed by a blank line.

    Args:
        record: A validated record.
        include_title: Whether to emit the Title line.

    Returns:
        The text block, newline-terminated.
    """
    lines = [f'Link: {record.link}']
    if include_title:
        lines.append(f'Title: {record.title}')
    lines += [
        f'Views: {record.view_count}',
        f'Likes: {record.like_count}',
        f'Comments: {record.comment_count}',
    ]
    return '\n'.join(lines) + '\n\n'


def format_html(record: VideoRecord, include_title: bool = True) -> str:
    """Render a record as one HTML ``<tr>`` row.

    The anchor text is the title, or the link itself when titles are not
    scraped. Values are emitted verbatim, without HTML escaping.

    Args:
        record: A validated record.
        include_title: Whether the anchor text is the title.

    Returns:
        The table row, newline-terminated.
    """
    text = record.title if include_title else record.link
    cells = [
        f'<td><a href="{record.link}">{text}</a></td>',
        f'<td>{record.view_count}</td>',
        f'<td>{record.like_count}</td>',
        f'<td>{record.comment_count}</td>',
    ]
    return '<tr>' + ''.join(cells) + '</tr>\n'


Formatter = Callable[[VideoRecord, bool], str]

_FORMATTERS: dict[OutputFormat, Formatter] = {
    OutputFormat.TEXT: format_text,
    OutputFormat.HTML: format_html,
}


def get_formatter(output_format: OutputFormat) -> Formatter:
    """Return the render function for an output format."""
    return _FORMATTERS[output_format]
