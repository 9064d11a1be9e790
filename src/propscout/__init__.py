"""PropScout - select real-estate pages to scrape by URL category."""

__version__ = "0.1.0"
