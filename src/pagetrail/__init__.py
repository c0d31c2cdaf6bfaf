"""pagetrail — unique page names and path-history redirects for content trees."""

__version__ = "0.1.0"
