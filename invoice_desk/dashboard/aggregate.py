"""
Dashboard Aggregate Data Classes.

Read-only view objects produced by the aggregator. They are rebuilt on
every request and never modified after construction.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Tuple

from invoice_desk.extraction.parsed_fields import Organization
from .records import InvoiceRecord


@dataclass(frozen=True)
class MonthlyBucket:
    """Invoices uploaded in one calendar month of the current year."""
    month: int
    label: str
    count: int
    amount: float
    organization_counts: Dict[Organization, int]
    organization_amounts: Dict[Organization, float]

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'month': self.month,
            'label': self.label,
            'count': self.count,
            'amount': self.amount,
        }
        for organization in Organization:
            data[organization.value] = self.organization_counts.get(organization, 0)
            data[f'{organization.value}_amount'] = self.organization_amounts.get(organization, 0.0)
        return data


@dataclass(frozen=True)
class DailyBucket:
    """Invoices uploaded on one day of the current week."""
    day: date
    label: str
    count: int
    amount: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'day': self.day.isoformat(),
            'label': self.label,
            'count': self.count,
            'amount': self.amount,
        }


@dataclass(frozen=True)
class CategoryBucket:
    """Count and sum for one category of a two-way breakdown."""
    key: str
    name: str
    count: int
    amount: float

    def to_dict(self) -> Dict[str, Any]:
        return {'key': self.key, 'name': self.name, 'count': self.count, 'amount': self.amount}


@dataclass(frozen=True)
class DashboardStats:
    """Scalar key metrics."""
    total_count: int
    total_amount: float
    foundation_count: int
    kindergarten_count: int
    bank_transfer_count: int
    card_cash_count: int
    this_month_count: int
    this_month_amount: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_count': self.total_count,
            'total_amount': self.total_amount,
            'foundation_count': self.foundation_count,
            'kindergarten_count': self.kindergarten_count,
            'bank_transfer_count': self.bank_transfer_count,
            'card_cash_count': self.card_cash_count,
            'this_month_count': self.this_month_count,
            'this_month_amount': self.this_month_amount,
        }


@dataclass(frozen=True)
class DashboardAggregate:
    """Everything the dashboard charts need, computed for one moment."""
    stats: DashboardStats
    monthly: Tuple[MonthlyBucket, ...]
    weekly: Tuple[DailyBucket, ...]
    by_organization: Tuple[CategoryBucket, ...]
    by_payment_type: Tuple[CategoryBucket, ...]
    recent: Tuple[InvoiceRecord, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'stats': self.stats.to_dict(),
            'monthly': [bucket.to_dict() for bucket in self.monthly],
            'weekly': [bucket.to_dict() for bucket in self.weekly],
            'by_organization': [bucket.to_dict() for bucket in self.by_organization],
            'by_payment_type': [bucket.to_dict() for bucket in self.by_payment_type],
            'recent': [record.to_dict() for record in self.recent],
        }
