"""
Data Normalizers Module.

This module turns the raw snippets found by the extractor into typed
values:
    - HUF amounts ("125 000 Ft", "1 234,50 HUF") into floats
    - ``YYYY.MM.DD`` style dates into ``datetime.date``

Normalizers never raise. A value that cannot be converted is returned
as None and the caller records the miss.
"""

import math
import re
from datetime import date, datetime
from typing import Any, Optional

from dateutil import parser as date_parser

from invoice_desk.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


class DateNormalizer:
    """
    Builds calendar dates from year-first Hungarian date notation.

    Out-of-range components (month 13, day 32, 2023.02.29) are rejected
    instead of rolling over into the next month.

    Example:
        >>> normalizer = DateNormalizer()
        >>> normalizer.match("Számla kelte: 2024.03.15.")
        datetime.date(2024, 3, 15)
        >>> normalizer.match("2024.13.01") is None
        True
    """

    # Year, month, day separated by dot, hyphen or slash
    DATE_PATTERN = re.compile(r'([0-9]{4})[.\-/]([0-9]{1,2})[.\-/]([0-9]{1,2})')

    # Looser shape used to decide whether a line merely looks like a date
    DATE_LIKE_PATTERN = re.compile(r'[0-9]{4}[.\-/][0-9]{1,2}[.\-/][0-9]{1,2}')

    PARSE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))

    def search(self, line: str) -> Optional[re.Match]:
        """Return the first date-shaped match in a line, valid or not."""
        return self.DATE_PATTERN.search(line)

    def from_match(self, match: re.Match) -> Optional[date]:
        """
        Construct a date from the three captured groups of DATE_PATTERN.

        Args:
            match: Match produced by search().

        Returns:
            date, or None when a component is out of range.
        """
        year, month, day = (int(group) for group in match.groups())
        try:
            return date(year, month, day)
        except ValueError as e:
            logger.debug(f"Rejected date '{match.group(0)}': {e}")
            return None

    def match(self, line: str) -> Optional[date]:
        """Find and construct the first date in a line."""
        found = self.search(line)
        if found is None:
            return None
        return self.from_match(found)

    def looks_like_date(self, line: str) -> bool:
        return self.DATE_LIKE_PATTERN.search(line) is not None

    def normalize(self, value: Any) -> Optional[date]:
        """
        Normalize a free-form date value, such as one returned by the AI pass.

        Tries the year-first pattern first, then dateutil's fuzzy parser
        with year-first ordering. Text missing the year, month or day is
        rejected rather than completed from a default.

        Args:
            value: A date, or a string containing a date.

        Returns:
            date or None.
        """
        if value is None or value == "":
            return None
        if isinstance(value, date):
            return value

        text = str(value).strip()
        found = self.search(text)
        if found is not None:
            return self.from_match(found)

        # Parsed against two different defaults: any component dateutil
        # had to fill in differs between the two results.
        try:
            first, second = (
                date_parser.parse(
                    text, default=default, yearfirst=True, dayfirst=False, fuzzy=True
                ).date()
                for default in self.PARSE_DEFAULTS
            )
        except (ValueError, OverflowError) as e:
            logger.debug(f"Could not parse date '{text}': {e}")
            return None

        if first != second:
            logger.debug(f"Incomplete date '{text}'")
            return None
        return first


class AmountNormalizer:
    """
    Parses Hungarian forint amounts.

    Hungarian notation groups thousands with spaces and uses a decimal
    comma: ``1 234 567,50 Ft``.

    Example:
        >>> normalizer = AmountNormalizer()
        >>> normalizer.match("Összesen: 125 000 Ft")
        ('125 000', 125000.0)
        >>> normalizer.normalize("1.234,50")
        1234.5
    """

    # Grouped number with optional two-digit decimal part, followed by a currency word
    AMOUNT_PATTERN = re.compile(
        r'([0-9]{1,3}(?:\s?[0-9]{3})*(?:,[0-9]{2})?)\s*(?:ft|huf|forint)',
        re.IGNORECASE
    )

    # Looser shape used to decide whether a line merely looks like an amount
    AMOUNT_LIKE_PATTERN = re.compile(r'[0-9]+\s*ft', re.IGNORECASE)

    CURRENCY_WORDS = re.compile(r'(?:huf|forint|ft)\.?', re.IGNORECASE)

    # Plain ASCII decimal number
    NUMBER_PATTERN = re.compile(r'-?[0-9]+(?:\.[0-9]+)?')

    def search(self, line: str) -> Optional[re.Match]:
        return self.AMOUNT_PATTERN.search(line)

    def to_float(self, number: str) -> Optional[float]:
        """
        Convert a matched number string to float.

        Whitespace group separators are dropped and the decimal comma
        becomes a dot.

        Args:
            number: Captured numeric part, e.g. "1 234,50".

        Returns:
            Finite float, or None when the string does not convert.
        """
        cleaned = re.sub(r'\s', '', number).replace(',', '.')
        if not self.NUMBER_PATTERN.fullmatch(cleaned):
            logger.debug(f"Could not parse amount: '{number}'")
            return None
        value = float(cleaned)
        if not math.isfinite(value):
            logger.debug(f"Amount is not finite: '{number}'")
            return None
        return value

    def match(self, line: str):
        """
        Find the first currency amount in a line.

        Returns:
            Tuple of (raw number string, parsed float or None), or None
            when the line holds no currency amount.
        """
        found = self.search(line)
        if found is None:
            return None
        raw = found.group(1)
        return raw, self.to_float(raw)

    def looks_like_amount(self, line: str) -> bool:
        return self.AMOUNT_LIKE_PATTERN.search(line) is not None

    def normalize(self, value: Any) -> Optional[float]:
        """
        Normalize a free-form amount, such as one returned by the AI pass.

        Accepts numbers and strings with optional currency words, space or
        dot thousands separators and a decimal comma.

        Args:
            value: Number or string.

        Returns:
            Finite float or None.
        """
        if value is None or value == "" or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return float(value) if math.isfinite(value) else None

        text = self.CURRENCY_WORDS.sub('', str(value))
        text = re.sub(r'\s', '', text)

        if ',' in text:
            # Dots are thousands separators when a decimal comma is present
            text = text.replace('.', '').replace(',', '.')
        elif text.count('.') > 1 or re.search(r'\.[0-9]{3}$', text):
            text = text.replace('.', '')

        return self.to_float(text)
