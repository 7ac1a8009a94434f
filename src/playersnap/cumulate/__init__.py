"""Cumulative snapshot merge built on the season fact models."""

from .merge import MergeSummary, classify_scoring, merge_snapshots, merge_snapshots_with_summary

__all__ = ["MergeSummary", "classify_scoring", "merge_snapshots", "merge_snapshots_with_summary"]
