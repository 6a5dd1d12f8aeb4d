"""linkshelf: bookmarks, tags and curated archives over a REST API."""

__version__ = "0.1.0"
