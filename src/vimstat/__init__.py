"""vimstat: scrape view, like and comment counts from Vimeo video pages."""

__version__ = "0.1.0"
