"""Page fetching: download a video page and keep only its marker lines."""

import logging
import re
import shutil
import subprocess
from typing import Any, Iterable, Protocol, runtime_checkable

import requests

logger = logging.getLogger(__name__)

# Keywords of the page lines that carry the values we scrape, e.g.
#   <meta itemprop="interactionCount" content="UserPlays:1234">
#   google_hints = 'Video title ...';
MARKER_KEYWORDS = ('google_hints', 'userplays', 'userlikes', 'usercomments')

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = 'vimstat/0.1 (+https://vimeo.com)'

# Text between the last pair of quotes on the line
_QUOTED_VALUE = re.compile(r'^.*[\'"](.*)[\'"].*$')
_SED_EXPRESSION = "s/^.*['\"]\\(.*\\)['\"].*$/\\1/g"

REQUIRED_TOOLS = (
    ('wget', 'Wget not installed.'),
    ('grep', 'Grep not installed.'),
    ('sed', 'Sed not installed.'),
)


class FetchError(Exception):
    """Exception raised when a page cannot be retrieved."""

    pass


@runtime_checkable
class PageFetcher(Protocol):
    """Protocol for anything that can turn a video URL into marker lines."""

    def missing_tool(self) -> str | None:
        """Return a diagnostic naming a missing external tool, or None."""
        ...

    def fetch(self, url: str) -> list[str]:
        """Fetch url and return its marker lines with values extracted.

        Raises:
            FetchError: If the page could not be retrieved.
        """
        ...


def has_marker(line: str) -> bool:
    """Check if line mentions any marker keyword (case-insensitive)."""
    lowered = line.lower()
    return any(keyword in lowered for keyword in MARKER_KEYWORDS)


def extract_quoted_value(line: str) -> str:
    """Return the text between the last two quote characters of line.

    Lines with fewer than two quotes are returned unchanged.
    """
    match = _QUOTED_VALUE.match(line)
    if match is None:
        return line
    return match.group(1)


def select_marker_lines(lines: Iterable[str]) -> list[str]:
    """Keep marker lines of a page and reduce each to its quoted value.

    Args:
        lines: Raw page lines.

    Returns:
        Extracted values, in page order.
    """
    return [extract_quoted_value(line) for line in lines if has_marker(line)]


class HttpPageFetcher:
    """Fetch pages with requests and filter them in-process."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        session: requests.Session | None = None,
    ):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': user_agent})

    def missing_tool(self) -> str | None:
        return None

    def fetch(self, url: str) -> list[str]:
        logger.debug("GET %s (timeout %ss)", url, self.timeout)
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(f"Request for {url} failed: {e}") from e

        lines = select_marker_lines(response.text.splitlines())
        logger.debug("%s: %d marker lines", url, len(lines))
        return lines


class CommandPageFetcher:
    """Fetch pages through the wget, grep and sed command-line tools."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    def missing_tool(self) -> str | None:
        for tool, message in REQUIRED_TOOLS:
            if shutil.which(tool) is None:
                return message
        return None

    def _run(self, cmd: list[str], stdin: str | None = None) -> subprocess.CompletedProcess:
        logger.debug("Running %s", cmd[0])
        try:
            return subprocess.run(
                cmd,
                input=stdin,
                capture_output=True,
                encoding='utf-8',
                errors='replace',
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise FetchError(f"{cmd[0]} timed out")
        except FileNotFoundError:
            raise FetchError(f"{cmd[0]} not found")

    def fetch(self, url: str) -> list[str]:
        page = self._run(['wget', '-qO-', url])
        if page.returncode != 0:
            raise FetchError(f"wget exited with status {page.returncode}")

        grep_cmd = ['grep', '-i']
        for keyword in MARKER_KEYWORDS:
            grep_cmd += ['-e', keyword]
        selected = self._run(grep_cmd, page.stdout)
        if selected.returncode == 1:
            # No line matched
            return []
        if selected.returncode != 0:
            raise FetchError(f"grep failed: {selected.stderr.strip()}")

        values = self._run(['sed', _SED_EXPRESSION], selected.stdout)
        if values.returncode != 0:
            raise FetchError(f"sed failed: {values.stderr.strip()}")

        return values.stdout.splitlines()


def build_fetcher(config: dict[str, Any]) -> PageFetcher:
    """Create the page fetcher selected by the configuration.

    Args:
        config: Configuration dict (see vimstat.config).

    Returns:
        An HttpPageFetcher or CommandPageFetcher.
    """
    timeout = float(config.get('timeout', DEFAULT_TIMEOUT))
    if config.get('fetcher') == 'command':
        return CommandPageFetcher(timeout=timeout)
    return HttpPageFetcher(
        timeout=timeout,
        user_agent=config.get('user_agent') or DEFAULT_USER_AGENT,
    )
