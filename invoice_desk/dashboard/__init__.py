"""
Dashboard Module for the Invoice Desk.

This module provides functionality for:
    - Interpreting stored invoice rows
    - Grouping them into monthly, weekly and category summaries
"""

from .records import InvoiceRecord
from .aggregate import (
    CategoryBucket,
    DailyBucket,
    DashboardAggregate,
    DashboardStats,
    MonthlyBucket,
)
from .aggregator import aggregate

__all__ = [
    'InvoiceRecord',
    'CategoryBucket',
    'DailyBucket',
    'DashboardAggregate',
    'DashboardStats',
    'MonthlyBucket',
    'aggregate'
]
