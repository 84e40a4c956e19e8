"""Command-line data tools."""
