"""Cumulative player season snapshots."""

__version__ = "0.1.0"
