"""Snapshot history utilities (expansion, growth, export)."""

from .history import (
    HISTORY_COLUMNS,
    expand_history,
    export_history_to_csv,
    growth_ratio,
    growth_ratios,
    history_rows,
)

__all__ = [
    "HISTORY_COLUMNS",
    "expand_history",
    "export_history_to_csv",
    "growth_ratio",
    "growth_ratios",
    "history_rows",
]
