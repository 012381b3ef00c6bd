"""
AI Re-Extraction Module for the Invoice Desk.

This module provides functionality for:
    - Calling the generative text model
    - Prompting for the ledger columns
    - Mapping the JSON answer onto ParsedInvoiceFields
"""

from .gemini_client import GeminiClient
from .reextractor import AIReExtractor, ReExtractionResult, parse_response_json

__all__ = [
    'GeminiClient',
    'AIReExtractor',
    'ReExtractionResult',
    'parse_response_json'
]
