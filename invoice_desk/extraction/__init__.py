"""
Extraction Module for the Invoice Desk.

This module provides functionality for:
    - Heuristic field extraction from Hungarian OCR text
    - Keyword tables driving the extraction
    - Amount and date normalization
    - Field validation
"""

from .parsed_fields import ParsedInvoiceFields, InvoiceType, Organization
from .keywords import KeywordTables
from .extractor import InvoiceFieldExtractor, extract, detect_organization
from .normalizers import AmountNormalizer, DateNormalizer
from .validators import FieldValidator, ValidationResult

__all__ = [
    'ParsedInvoiceFields',
    'InvoiceType',
    'Organization',
    'KeywordTables',
    'InvoiceFieldExtractor',
    'extract',
    'detect_organization',
    'AmountNormalizer',
    'DateNormalizer',
    'FieldValidator',
    'ValidationResult'
]
