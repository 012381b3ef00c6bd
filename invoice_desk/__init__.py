"""
Invoice Desk - Source Package.

Back-office tooling for a foundation and its kindergarten: reading
scanned Hungarian invoices and summarizing them for the dashboard.

Modules:
    - extraction: Heuristic field extraction from OCR text
    - reextraction: Optional generative-model re-extraction pass
    - pipeline: Extraction, re-extraction and validation of one invoice
    - dashboard: Monthly, weekly and category aggregation
    - output_handler: Excel ledger export
    - utils: Logging, exceptions and file helpers

Architecture:
    OCR text → Extraction → (AI re-extraction) → Validation → Ledger
    Stored invoices → Dashboard aggregation
"""

__version__ = "1.0.0"

__all__ = [
    'extraction',
    'reextraction',
    'pipeline',
    'dashboard',
    'output_handler',
    'utils'
]
