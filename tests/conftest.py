"""Shared fixtures for vimstat tests."""

import pytest

from vimstat.fetcher import FetchError

VIDEO_URL = "http://vimeo.com/12345678"

PAGE_LINES = [
    "My Great Video",
    "UserPlays:1234",
    "UserLikes:56",
    "UserComments:7",
]


class FakeFetcher:
    """PageFetcher returning canned marker lines per URL."""

    def __init__(self, pages=None, missing=None):
        self.pages = pages or {}
        self.missing = missing
        self.calls = []

    def missing_tool(self):
        return self.missing

    def fetch(self, url):
        self.calls.append(url)
        if url not in self.pages:
            raise FetchError(f"no page for {url}")
        return list(self.pages[url])


@pytest.fixture
def fetcher():
    return FakeFetcher({VIDEO_URL: PAGE_LINES})
