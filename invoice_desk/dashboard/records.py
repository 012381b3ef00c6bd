"""
Invoice Record Data Class.

The minimal view of a stored invoice row that the dashboard aggregator
consumes.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from dateutil import parser as date_parser

from invoice_desk.extraction.parsed_fields import InvoiceType, Organization
from invoice_desk.utils.exceptions import InvalidRecordError


@dataclass(frozen=True)
class InvoiceRecord:
    """
    One uploaded invoice as stored in the datastore.

    Attributes:
        organization: Entity the invoice belongs to.
        invoice_type: Payment classification, if known.
        amount: Amount in HUF; None counts as zero.
        uploaded_at: Upload timestamp.
        id: Row identifier.
        file_name: Original upload name.
        partner: Counterparty, for the recent-invoices table.

    Example:
        >>> record = InvoiceRecord.from_dict({
        ...     "organization": "ovoda",
        ...     "invoice_type": "bank_transfer",
        ...     "amount": 125000,
        ...     "uploaded_at": "2024-03-15T10:30:00+01:00",
        ... })
        >>> record.organization
        <Organization.KINDERGARTEN: 'ovoda'>
    """
    organization: Organization
    invoice_type: Optional[InvoiceType]
    amount: Optional[float]
    uploaded_at: datetime
    id: Optional[str] = None
    file_name: Optional[str] = None
    partner: Optional[str] = None

    @property
    def amount_value(self) -> float:
        if self.amount is None or not math.isfinite(self.amount):
            return 0.0
        return self.amount

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'InvoiceRecord':
        """
        Build a record from a datastore row.

        Args:
            data: Row with ``organization``, ``invoice_type``, ``amount``
                  and ``uploaded_at`` (ISO string or datetime).

        Returns:
            InvoiceRecord.

        Raises:
            InvalidRecordError: If a field cannot be interpreted.
        """
        if not isinstance(data, Mapping):
            raise InvalidRecordError('row', data, "Row must be an object")

        try:
            organization = Organization(data.get('organization'))
        except ValueError:
            raise InvalidRecordError('organization', data.get('organization'))

        invoice_type = data.get('invoice_type')
        if invoice_type:
            try:
                invoice_type = InvoiceType(invoice_type)
            except ValueError:
                raise InvalidRecordError('invoice_type', invoice_type)
        else:
            invoice_type = None

        amount = data.get('amount')
        if amount is not None:
            try:
                amount = float(amount)
            except (TypeError, ValueError):
                raise InvalidRecordError('amount', amount)
            if not math.isfinite(amount):
                raise InvalidRecordError('amount', data.get('amount'), "Amount must be finite")

        uploaded_at = data.get('uploaded_at')
        if not isinstance(uploaded_at, datetime):
            try:
                uploaded_at = date_parser.isoparse(str(uploaded_at))
            except (TypeError, ValueError) as e:
                raise InvalidRecordError('uploaded_at', uploaded_at, str(e))

        record_id = data.get('id')
        return cls(
            organization=organization,
            invoice_type=invoice_type,
            amount=amount,
            uploaded_at=uploaded_at,
            id=str(record_id) if record_id is not None else None,
            file_name=data.get('file_name'),
            partner=data.get('partner'),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'file_name': self.file_name,
            'partner': self.partner,
            'organization': self.organization.value,
            'invoice_type': self.invoice_type.value if self.invoice_type else None,
            'amount': self.amount,
            'uploaded_at': self.uploaded_at.isoformat(),
        }
