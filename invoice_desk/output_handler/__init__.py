"""
Output Handler Module for the Invoice Desk.

This module provides functionality for:
    - Excel ledger export of processed invoices
"""

from .excel_exporter import LedgerExporter

__all__ = [
    'LedgerExporter'
]
