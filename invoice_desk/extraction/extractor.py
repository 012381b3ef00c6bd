"""
Invoice Field Extractor Module.

Heuristic extraction of invoice header fields from OCR'd Hungarian
invoice text.

Approach:
    The text is split into trimmed, non-empty lines. Each field is then
    resolved independently by a top-to-bottom scan that stops at the
    first satisfying line. Labels and values are assumed to sit either
    on the same line or on adjacent lines, which tolerates OCR noise
    better than reconstructing table layout.

The extractor is a pure function of its input: it keeps no state between
calls and never raises for a field it cannot find.
"""

import re
from typing import List, Optional

from invoice_desk.utils.logger import get_logger
from .keywords import DEFAULT_TABLES, KINDERGARTEN_MARKER, KeywordTables, contains_any
from .normalizers import AmountNormalizer, DateNormalizer
from .parsed_fields import InvoiceType, Organization, ParsedInvoiceFields, field_warning

# Initialize module logger
logger = get_logger(__name__)


BANK_ACCOUNT_PATTERN = re.compile(r'[0-9]{8}-[0-9]{8}(?:-[0-9]{8})?')

# Trailing serial-number token on a label line
INVOICE_NUMBER_PATTERN = re.compile(r'[A-Z0-9/\-]+$')


def split_lines(text: str) -> List[str]:
    """Split text on newlines, trim each line and drop blank ones."""
    if not text:
        return []
    return [line.strip() for line in text.split('\n') if line.strip()]


def detect_organization(text: str) -> Organization:
    """
    Guess which entity an invoice belongs to.

    Any mention of the kindergarten assigns it there; everything else
    belongs to the foundation.
    """
    if text and KINDERGARTEN_MARKER in text.lower():
        return Organization.KINDERGARTEN
    return Organization.FOUNDATION


class InvoiceFieldExtractor:
    """
    Keyword-driven invoice field extractor.

    Attributes:
        keywords: Vocabulary bundle consulted for every label search.
        subject_min_length: Minimum length of a line used as the
            fallback subject.

    Example:
        >>> extractor = InvoiceFieldExtractor()
        >>> fields = extractor.extract("Szállító:\\nTeszt Kft.\\n125 000 Ft")
        >>> fields.partner, fields.amount
        ('Teszt Kft.', 125000.0)
    """

    def __init__(
        self,
        keywords: Optional[KeywordTables] = None,
        subject_min_length: int = 10
    ) -> None:
        self.keywords = keywords or DEFAULT_TABLES
        self.subject_min_length = subject_min_length
        self.date_normalizer = DateNormalizer()
        self.amount_normalizer = AmountNormalizer()

    @classmethod
    def from_config(cls) -> 'InvoiceFieldExtractor':
        """Create an extractor using keyword additions from settings.yaml."""
        from config import get_config

        return cls(
            keywords=KeywordTables.from_config(),
            subject_min_length=get_config("extraction.subject_min_length", 10)
        )

    def extract(self, text: str) -> ParsedInvoiceFields:
        """
        Extract all invoice fields from OCR text.

        Args:
            text: Plain OCR text of a single invoice.

        Returns:
            ParsedInvoiceFields with every field found; missing fields
            stay None. Empty text gives an empty result.
        """
        lines = split_lines(text)
        result = ParsedInvoiceFields()

        if not lines:
            logger.debug("No text to extract from")
            return result

        result.partner = self._find_partner(lines)
        result.bank_account = self._find_bank_account(lines)
        result.invoice_number = self._find_invoice_number(lines)
        result.amount = self._find_amount(lines, result)
        result.invoice_date = self._find_keyword_date(
            lines, self.keywords.invoice_date, 'invoice_date', result
        )
        result.payment_deadline = self._find_keyword_date(
            lines, self.keywords.payment_deadline, 'payment_deadline', result
        )
        result.payment_method_text, result.invoice_type = self._find_payment_method(lines)
        result.subject = self._find_subject(lines)

        logger.debug(
            f"Extracted {len(result.extracted_fields)}/{len(result.fields)} fields "
            f"from {len(lines)} lines"
        )
        return result

    def _find_partner(self, lines: List[str]) -> Optional[str]:
        for i, line in enumerate(lines):
            if contains_any(line, self.keywords.partner) and i + 1 < len(lines):
                return lines[i + 1]
        return None

    def _find_bank_account(self, lines: List[str]) -> Optional[str]:
        for line in lines:
            match = BANK_ACCOUNT_PATTERN.search(line)
            if match:
                return match.group(0)
        return None

    def _find_invoice_number(self, lines: List[str]) -> Optional[str]:
        """
        Find the serial number next to the first invoice-number label.

        The token at the end of the label line wins; otherwise the next
        line is taken verbatim. Only the first label line is considered.
        """
        for i, line in enumerate(lines):
            if contains_any(line, self.keywords.invoice_number):
                match = INVOICE_NUMBER_PATTERN.search(line)
                if match:
                    return match.group(0)
                if i + 1 < len(lines):
                    return lines[i + 1]
                return None
        return None

    def _find_amount(self, lines: List[str], result: ParsedInvoiceFields) -> Optional[float]:
        for line in lines:
            found = self.amount_normalizer.match(line)
            if found is None:
                continue
            raw, value = found
            if value is None:
                result.add_warning(field_warning('amount', raw))
            return value
        return None

    def _find_keyword_date(self, lines, keywords, field_name, result):
        """
        Find a date on or directly below the first label line that holds one.

        Dates with out-of-range components are skipped with a warning and
        the scan moves on to the next label line.
        """
        for i, line in enumerate(lines):
            if not contains_any(line, keywords):
                continue

            found = self.date_normalizer.search(line)
            if found is None and i + 1 < len(lines):
                found = self.date_normalizer.search(lines[i + 1])
            if found is None:
                continue

            value = self.date_normalizer.from_match(found)
            if value is not None:
                return value
            result.add_warning(field_warning(field_name, found.group(0)))
        return None

    def _find_payment_method(self, lines: List[str]):
        for line in lines:
            for method, keywords in self.keywords.payment_methods.items():
                if contains_any(line, keywords):
                    return line, InvoiceType(method)
        return None, None

    def _find_subject(self, lines: List[str]) -> Optional[str]:
        for i, line in enumerate(lines):
            if contains_any(line, self.keywords.subject) and i + 1 < len(lines):
                return lines[i + 1]

        # First meaningful line that is neither a date nor an amount
        for line in lines:
            if (
                len(line) > self.subject_min_length
                and not self.date_normalizer.looks_like_date(line)
                and not self.amount_normalizer.looks_like_amount(line)
            ):
                return line
        return None

    def classify_payment_method(self, text: Optional[str]) -> Optional[InvoiceType]:
        """Classify a single payment-method description, if it names one."""
        if not text:
            return None
        _, invoice_type = self._find_payment_method([text])
        return invoice_type


_default_extractor = InvoiceFieldExtractor()


def extract(text: str) -> ParsedInvoiceFields:
    """
    Extract invoice fields with the built-in keyword tables.

    Args:
        text: Plain OCR text of a single invoice.

    Returns:
        ParsedInvoiceFields.

    Example:
        >>> extract("Szállító:\\nTeszt Kft.").partner
        'Teszt Kft.'
    """
    return _default_extractor.extract(text)
