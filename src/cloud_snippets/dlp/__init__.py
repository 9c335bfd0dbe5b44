"""Data Loss Prevention snippets and the config builders behind them."""

from . import builders, deidentify, inspect, jobs, reporting
from .reporting import flatten_findings, table_rows

__all__ = [
    "builders",
    "deidentify",
    "inspect",
    "jobs",
    "reporting",
    "flatten_findings",
    "table_rows",
]
