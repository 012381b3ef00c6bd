"""
Keyword Tables Module.

Hungarian vocabularies used by the invoice field extractor. Each table
is an immutable tuple of lower-case substrings; a line matches a table
when its lower-cased text contains any of the entries.

The extractor never embeds literals of its own: it receives a
``KeywordTables`` bundle, so a new label variant only needs to be added
here or under ``extraction.extra_keywords`` in ``settings.yaml``.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from invoice_desk.utils.logger import get_logger

logger = get_logger(__name__)


# Vendor / supplier labels and Hungarian company forms
PARTNER_KEYWORDS: Tuple[str, ...] = (
    'eladó', 'szállító', 'szolgáltató', 'partner', 'cég',
    'kft', 'zrt', 'bt', 'kkt',
)

INVOICE_NUMBER_KEYWORDS: Tuple[str, ...] = (
    'számla sorszáma', 'számlaszám', 'bizonylatszám', 'sorszám',
)

INVOICE_DATE_KEYWORDS: Tuple[str, ...] = (
    'számla kelte', 'kiállítás dátuma', 'dátum',
)

PAYMENT_DEADLINE_KEYWORDS: Tuple[str, ...] = (
    'fizetési határidő', 'esedékesség', 'teljesítés határideje',
)

SUBJECT_KEYWORDS: Tuple[str, ...] = (
    'tárgy', 'megnevezés', 'szolgáltatás', 'termék',
)

BANK_TRANSFER_KEYWORDS: Tuple[str, ...] = (
    'banki átutalás', 'átutalás', 'csoportos beszedés', 'utalás',
)

CARD_CASH_AFTERPAY_KEYWORDS: Tuple[str, ...] = (
    'készpénz', 'kártya', 'utánvét', 'bankkártya', 'cash',
)

# Checked in insertion order for every line
PAYMENT_METHOD_KEYWORDS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    'bank_transfer': BANK_TRANSFER_KEYWORDS,
    'card_cash_afterpay': CARD_CASH_AFTERPAY_KEYWORDS,
})

KINDERGARTEN_MARKER = 'óvoda'

# Configuration keys accepted under extraction.extra_keywords
EXTRA_KEYWORD_TABLES = (
    'partner', 'invoice_number', 'invoice_date', 'payment_deadline',
    'subject', 'bank_transfer', 'card_cash_afterpay',
)


def contains_any(line: str, keywords: Iterable[str]) -> bool:
    """Return True if the lower-cased line contains any keyword."""
    lowered = line.lower()
    return any(keyword in lowered for keyword in keywords)


def _extend(base: Tuple[str, ...], extra: Optional[Iterable[str]]) -> Tuple[str, ...]:
    if not extra:
        return base
    additions = tuple(
        str(word).lower() for word in extra if str(word).lower() not in base
    )
    return base + additions


@dataclass(frozen=True)
class KeywordTables:
    """
    Bundle of every vocabulary the extractor consults.

    Example:
        >>> tables = KeywordTables().with_extra({"partner": ["vállalkozó"]})
        >>> "vállalkozó" in tables.partner
        True
    """
    partner: Tuple[str, ...] = PARTNER_KEYWORDS
    invoice_number: Tuple[str, ...] = INVOICE_NUMBER_KEYWORDS
    invoice_date: Tuple[str, ...] = INVOICE_DATE_KEYWORDS
    payment_deadline: Tuple[str, ...] = PAYMENT_DEADLINE_KEYWORDS
    subject: Tuple[str, ...] = SUBJECT_KEYWORDS
    payment_methods: Mapping[str, Tuple[str, ...]] = field(
        default_factory=lambda: PAYMENT_METHOD_KEYWORDS
    )

    def with_extra(self, extra: Optional[Mapping[str, Iterable[str]]]) -> 'KeywordTables':
        """
        Return a new bundle with additional keywords appended.

        Args:
            extra: Mapping of table name to extra keywords. Unknown table
                   names are ignored with a warning.

        Returns:
            New KeywordTables instance; self is left untouched.
        """
        if not extra:
            return self

        for name in extra:
            if name not in EXTRA_KEYWORD_TABLES:
                logger.warning(f"Ignoring unknown keyword table: '{name}'")

        payment_methods = MappingProxyType({
            method: _extend(words, extra.get(method))
            for method, words in self.payment_methods.items()
        })

        return replace(
            self,
            partner=_extend(self.partner, extra.get('partner')),
            invoice_number=_extend(self.invoice_number, extra.get('invoice_number')),
            invoice_date=_extend(self.invoice_date, extra.get('invoice_date')),
            payment_deadline=_extend(self.payment_deadline, extra.get('payment_deadline')),
            subject=_extend(self.subject, extra.get('subject')),
            payment_methods=payment_methods,
        )

    @classmethod
    def from_config(cls) -> 'KeywordTables':
        """Build the default tables extended with ``extraction.extra_keywords``."""
        from config import get_config

        return cls().with_extra(get_config("extraction.extra_keywords", {}))


DEFAULT_TABLES = KeywordTables()
