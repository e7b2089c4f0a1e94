"""Tests for page fetching and marker line selection."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest
import requests

from vimstat.fetcher import (
    CommandPageFetcher,
    FetchError,
    HttpPageFetcher,
    PageFetcher,
    build_fetcher,
    extract_quoted_value,
    has_marker,
    select_marker_lines,
)

URL = "http://vimeo.com/12345678"

PAGE = """\
<html>
<head>
<title>Some page</title>
<script>var google_hints = 'My Great Video';</script>
<meta itemprop="interactionCount" content="UserPlays:1234">
<meta itemprop="interactionCount" content="UserLikes:56">
<meta itemprop="interactionCount" content="UserComments:7">
</head>
<body>plain text</body>
</html>
"""


class TestMarkerLines:
    """Tests for has_marker(), extract_quoted_value() and select_marker_lines()."""

    def test_has_marker_case_insensitive(self):
        assert has_marker('content="USERPLAYS:1"') is True
        assert has_marker("Google_Hints = 'x'") is True
        assert has_marker("<title>nothing</title>") is False

    def test_quoted_value_is_last_pair(self):
        line = '<meta itemprop="interactionCount" content="UserPlays:1234">'
        assert extract_quoted_value(line) == "UserPlays:1234"

    def test_single_quotes(self):
        assert extract_quoted_value("var google_hints = 'Title';") == "Title"

    def test_unquoted_line_unchanged(self):
        assert extract_quoted_value("UserPlays: 12") == "UserPlays: 12"

    def test_select_marker_lines(self):
        assert select_marker_lines(PAGE.splitlines()) == [
            "My Great Video",
            "UserPlays:1234",
            "UserLikes:56",
            "UserComments:7",
        ]


class TestHttpPageFetcher:
    """Tests for HttpPageFetcher."""

    def _session(self, text="", error=None):
        session = MagicMock()
        response = MagicMock(text=text)
        if error is not None:
            response.raise_for_status.side_effect = error
        session.get.return_value = response
        return session

    def test_is_page_fetcher(self):
        assert isinstance(HttpPageFetcher(session=MagicMock()), PageFetcher)

    def test_fetch_filters_page(self):
        session = self._session(PAGE)
        fetcher = HttpPageFetcher(timeout=5, session=session)

        lines = fetcher.fetch(URL)

        assert lines[1:] == ["UserPlays:1234", "UserLikes:56", "UserComments:7"]
        session.get.assert_called_once_with(URL, timeout=5)

    def test_user_agent_header(self):
        session = self._session()
        HttpPageFetcher(user_agent="test-agent", session=session)
        session.headers.update.assert_called_once_with({'User-Agent': 'test-agent'})

    def test_http_error(self):
        session = self._session(error=requests.HTTPError("404 Client Error"))
        with pytest.raises(FetchError, match="404"):
            HttpPageFetcher(session=session).fetch(URL)

    def test_connection_error(self):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("Name or service not known")
        with pytest.raises(FetchError):
            HttpPageFetcher(session=session).fetch(URL)

    def test_single_attempt(self):
        session = MagicMock()
        session.get.side_effect = requests.Timeout("timed out")
        with pytest.raises(FetchError):
            HttpPageFetcher(session=session).fetch(URL)
        assert session.get.call_count == 1

    def test_no_missing_tool(self):
        assert HttpPageFetcher(session=MagicMock()).missing_tool() is None


class TestCommandPageFetcher:
    """Tests for CommandPageFetcher."""

    @patch("vimstat.fetcher.shutil.which", return_value="/usr/bin/tool")
    def test_all_tools_present(self, mock_which):
        assert CommandPageFetcher().missing_tool() is None
        assert [c.args[0] for c in mock_which.call_args_list] == ['wget', 'grep', 'sed']

    @pytest.mark.parametrize("tool, message", [
        ("wget", "Wget not installed."),
        ("grep", "Grep not installed."),
        ("sed", "Sed not installed."),
    ])
    def test_missing_tool(self, tool, message):
        def which(name):
            return None if name == tool else f"/usr/bin/{name}"

        with patch("vimstat.fetcher.shutil.which", side_effect=which):
            assert CommandPageFetcher().missing_tool() == message

    @patch("vimstat.fetcher.subprocess.run")
    def test_fetch_pipeline(self, mock_run):
        mock_run.side_effect = [
            MagicMock(returncode=0, stdout=PAGE),
            MagicMock(returncode=0, stdout="<grep output>\n"),
            MagicMock(returncode=0, stdout="Title\nUserPlays:1\n"),
        ]

        lines = CommandPageFetcher(timeout=10).fetch(URL)

        assert lines == ["Title", "UserPlays:1"]
        wget_cmd = mock_run.call_args_list[0].args[0]
        grep_cmd = mock_run.call_args_list[1].args[0]
        assert wget_cmd == ['wget', '-qO-', URL]
        assert grep_cmd[:2] == ['grep', '-i']
        assert 'usercomments' in grep_cmd
        assert mock_run.call_args_list[1].kwargs['input'] == PAGE
        assert mock_run.call_args_list[2].kwargs['input'] == "<grep output>\n"
        sed_cmd = mock_run.call_args_list[2].args[0]
        assert sed_cmd == ['sed', "s/^.*['\"]\\(.*\\)['\"].*$/\\1/g"]
        assert "\\'" not in sed_cmd[1] and '\\"' not in sed_cmd[1]

    @patch("vimstat.fetcher.subprocess.run")
    def test_no_matching_lines(self, mock_run):
        mock_run.side_effect = [
            MagicMock(returncode=0, stdout="<html></html>"),
            MagicMock(returncode=1, stdout=""),
        ]
        assert CommandPageFetcher().fetch(URL) == []
        assert mock_run.call_count == 2

    @patch("vimstat.fetcher.subprocess.run")
    def test_wget_failure(self, mock_run):
        mock_run.return_value = MagicMock(returncode=4, stdout="")
        with pytest.raises(FetchError, match="status 4"):
            CommandPageFetcher().fetch(URL)

    @patch("vimstat.fetcher.subprocess.run")
    def test_timeout(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="wget", timeout=1)
        with pytest.raises(FetchError, match="timed out"):
            CommandPageFetcher(timeout=1).fetch(URL)


class TestBuildFetcher:
    """Tests for build_fetcher()."""

    def test_http_default(self):
        fetcher = build_fetcher({"fetcher": "http", "timeout": 12, "user_agent": None})
        assert isinstance(fetcher, HttpPageFetcher)
        assert fetcher.timeout == 12.0

    def test_command(self):
        fetcher = build_fetcher({"fetcher": "command", "timeout": 3})
        assert isinstance(fetcher, CommandPageFetcher)
        assert fetcher.timeout == 3.0
