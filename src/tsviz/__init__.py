"""Chart-ready transformations for time-series query results."""
