"""Shared helpers used by every tool: console output and logging."""
