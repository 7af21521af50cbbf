"""Generate the Go variant map used by the test grid from a TSV table."""

__version__ = "0.1.0"
