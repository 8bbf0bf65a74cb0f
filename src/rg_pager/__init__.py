"""Pagination and aggregation engine for ripgrep JSON output."""

__version__ = "0.1.0"
