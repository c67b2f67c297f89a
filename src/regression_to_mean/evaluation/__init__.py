"""Evaluation metrics, report tables and visualization tools."""

from .metrics import (
    detection_rate,
    summarise_replications,
    print_simulation_summary,
    print_replication_summary,
)
from .report import build_report_tables
from .visualization import RegressionVisualizer

__all__ = [
    'detection_rate',
    'summarise_replications',
    'print_simulation_summary',
    'print_replication_summary',
    'build_report_tables',
    'RegressionVisualizer',
]
