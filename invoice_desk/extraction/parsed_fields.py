"""
Parsed Invoice Fields Data Class.

This module defines the best-effort record produced by the invoice
field extractor, together with the two small enumerations shared by the
extractor, the AI re-extraction pass and the dashboard aggregator.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional


class InvoiceType(str, Enum):
    """How an invoice was (or is to be) paid."""
    BANK_TRANSFER = 'bank_transfer'
    CARD_CASH_AFTERPAY = 'card_cash_afterpay'

    @property
    def label(self) -> str:
        return INVOICE_TYPE_LABELS[self]


class Organization(str, Enum):
    """The two legal entities an invoice can belong to."""
    FOUNDATION = 'alapitvany'
    KINDERGARTEN = 'ovoda'

    @property
    def label(self) -> str:
        return ORGANIZATION_LABELS[self]


INVOICE_TYPE_LABELS = {
    InvoiceType.BANK_TRANSFER: 'Banki átutalás',
    InvoiceType.CARD_CASH_AFTERPAY: 'Kártya/Készpénz/Utánvét',
}

ORGANIZATION_LABELS = {
    Organization.FOUNDATION: 'Alapítvány',
    Organization.KINDERGARTEN: 'Óvoda',
}

# Fields that carry extracted invoice data (warnings excluded)
FIELD_NAMES = (
    'partner',
    'bank_account',
    'subject',
    'invoice_number',
    'amount',
    'invoice_date',
    'payment_deadline',
    'payment_method_text',
    'invoice_type',
)


def field_warning(name: str, raw: Any) -> str:
    """Warning text for a value that was found but could not be normalized."""
    return f"Invalid {name}: '{raw}'"


def _warning_field(warning: str) -> Optional[str]:
    if warning.startswith("Invalid ") and ":" in warning:
        return warning[len("Invalid "):warning.index(":")]
    return None


@dataclass
class ParsedInvoiceFields:
    """
    Best-effort structured view of one invoice.

    Every field is independently optional: a miss on one never prevents
    the others from being filled.

    Attributes:
        partner: Counterparty name, taken from the line after a vendor label.
        bank_account: Hungarian account number (2 or 3 groups of 8 digits).
        subject: Description of the goods or services.
        invoice_number: Serial number of the invoice.
        amount: Amount in HUF.
        invoice_date: Issue date.
        payment_deadline: Payment due date.
        payment_method_text: The raw line describing the payment method.
        invoice_type: Classification derived from payment_method_text.
        warnings: Values that were found but could not be normalized.

    Example:
        >>> fields = ParsedInvoiceFields(partner="Teszt Kft.", amount=125000.0)
        >>> fields.missing_fields[:2]
        ['bank_account', 'subject']
    """
    partner: Optional[str] = None
    bank_account: Optional[str] = None
    subject: Optional[str] = None
    invoice_number: Optional[str] = None
    amount: Optional[float] = None
    invoice_date: Optional[date] = None
    payment_deadline: Optional[date] = None
    payment_method_text: Optional[str] = None
    invoice_type: Optional[InvoiceType] = None

    warnings: List[str] = field(default_factory=list)

    @property
    def fields(self) -> Dict[str, Any]:
        """All extractable fields as a dictionary."""
        return {name: getattr(self, name) for name in FIELD_NAMES}

    @property
    def missing_fields(self) -> List[str]:
        return [k for k, v in self.fields.items() if v is None or v == ""]

    @property
    def extracted_fields(self) -> Dict[str, Any]:
        return {k: v for k, v in self.fields.items() if v is not None and v != ""}

    @property
    def extraction_rate(self) -> float:
        """Percentage of fields that were filled (0-100)."""
        return len(self.extracted_fields) / len(FIELD_NAMES) * 100

    @property
    def is_empty(self) -> bool:
        return not self.extracted_fields

    def add_warning(self, warning: str) -> None:
        self.warnings.append(warning)

    def merged_with(self, override: 'ParsedInvoiceFields') -> 'ParsedInvoiceFields':
        """
        Combine two results into a new one.

        Values present in ``override`` win; fields it leaves empty keep
        the value from self. Warnings of self about a field that the
        override filled are dropped; all other warnings are kept.

        Args:
            override: Result whose values take precedence.

        Returns:
            New ParsedInvoiceFields; neither input is modified.
        """
        values = {}
        filled = set()
        for name in FIELD_NAMES:
            value = getattr(override, name)
            if value is None or value == "":
                values[name] = getattr(self, name)
            else:
                values[name] = value
                filled.add(name)

        warnings = [w for w in self.warnings if _warning_field(w) not in filled]
        return replace(self, warnings=warnings + override.warnings, **values)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a JSON-friendly dictionary.

        Dates become ISO strings and the invoice type its string value.
        """
        return {
            'partner': self.partner,
            'bank_account': self.bank_account,
            'subject': self.subject,
            'invoice_number': self.invoice_number,
            'amount': self.amount,
            'invoice_date': self.invoice_date.isoformat() if self.invoice_date else None,
            'payment_deadline': self.payment_deadline.isoformat() if self.payment_deadline else None,
            'payment_method_text': self.payment_method_text,
            'invoice_type': self.invoice_type.value if self.invoice_type else None,
            'warnings': list(self.warnings),
            'extraction_rate': self.extraction_rate,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ParsedInvoiceFields':
        """
        Create ParsedInvoiceFields from a dictionary produced by to_dict().

        Args:
            data: Dictionary with field values.

        Returns:
            ParsedInvoiceFields instance.
        """
        invoice_date = data.get('invoice_date')
        payment_deadline = data.get('payment_deadline')
        invoice_type = data.get('invoice_type')
        amount = data.get('amount')

        return cls(
            partner=data.get('partner'),
            bank_account=data.get('bank_account'),
            subject=data.get('subject'),
            invoice_number=data.get('invoice_number'),
            amount=float(amount) if amount is not None else None,
            invoice_date=date.fromisoformat(invoice_date) if isinstance(invoice_date, str) else invoice_date,
            payment_deadline=(
                date.fromisoformat(payment_deadline)
                if isinstance(payment_deadline, str) else payment_deadline
            ),
            payment_method_text=data.get('payment_method_text'),
            invoice_type=InvoiceType(invoice_type) if invoice_type else None,
            warnings=list(data.get('warnings', [])),
        )

    def __repr__(self) -> str:
        return (
            f"ParsedInvoiceFields("
            f"partner={self.partner!r}, "
            f"number={self.invoice_number!r}, "
            f"amount={self.amount}, "
            f"type={self.invoice_type.value if self.invoice_type else None}, "
            f"rate={self.extraction_rate:.0f}%)"
        )
