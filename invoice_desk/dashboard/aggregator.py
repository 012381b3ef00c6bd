"""
Dashboard Aggregator Module.

Pure functions that group invoice records for the dashboard charts:
    - monthly series for the current year, split by organization
    - daily series for the Monday-start week containing "now"
    - organization and payment-type breakdowns
    - key metrics, including the current calendar month
    - the most recent uploads

Nothing here mutates its input; the same list and "now" always give an
equal DashboardAggregate.
"""

from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

from dateutil.relativedelta import MO, relativedelta

from invoice_desk.extraction.parsed_fields import InvoiceType, Organization
from invoice_desk.utils.logger import get_logger
from .aggregate import (
    CategoryBucket,
    DailyBucket,
    DashboardAggregate,
    DashboardStats,
    MonthlyBucket,
)
from .records import InvoiceRecord

logger = get_logger(__name__)


MONTH_LABELS = ('Jan', 'Feb', 'Már', 'Ápr', 'Máj', 'Jún',
                'Júl', 'Aug', 'Szep', 'Okt', 'Nov', 'Dec')

DAY_LABELS = ('Hétfő', 'Kedd', 'Szerda', 'Csütörtök', 'Péntek', 'Szombat', 'Vasárnap')

ORGANIZATION_NAMES = {
    Organization.FOUNDATION: 'Feketerigó Alapítvány',
    Organization.KINDERGARTEN: 'Feketerigó Alapítványi Óvoda',
}

RECENT_LIMIT = 5


def local_time(timestamp: datetime, now: datetime) -> datetime:
    """
    Express a timestamp in the same frame as ``now``.

    Aware timestamps are converted to now's zone, or to the local zone
    when now is naive. Naive timestamps are taken to be in now's frame.
    """
    if timestamp.tzinfo is None:
        return timestamp if now.tzinfo is None else timestamp.replace(tzinfo=now.tzinfo)
    if now.tzinfo is None:
        return timestamp.astimezone().replace(tzinfo=None)
    return timestamp.astimezone(now.tzinfo)


def _total(records: Iterable[InvoiceRecord]) -> float:
    return float(sum(record.amount_value for record in records))


def _localized(invoices: Sequence[InvoiceRecord], now: datetime) -> List[Tuple[datetime, InvoiceRecord]]:
    return [(local_time(record.uploaded_at, now), record) for record in invoices]


def monthly_series(invoices: Sequence[InvoiceRecord], now: datetime) -> Tuple[MonthlyBucket, ...]:
    """
    Twelve buckets for the calendar year of ``now``.

    Args:
        invoices: Records to group.
        now: Reference moment.

    Returns:
        Tuple of MonthlyBucket, January first.
    """
    localized = _localized(invoices, now)
    buckets = []

    for index, label in enumerate(MONTH_LABELS, 1):
        month_records = [
            record for timestamp, record in localized
            if timestamp.year == now.year and timestamp.month == index
        ]
        buckets.append(MonthlyBucket(
            month=index,
            label=label,
            count=len(month_records),
            amount=_total(month_records),
            organization_counts={
                organization: sum(1 for r in month_records if r.organization is organization)
                for organization in Organization
            },
            organization_amounts={
                organization: _total(r for r in month_records if r.organization is organization)
                for organization in Organization
            },
        ))

    return tuple(buckets)


def week_start(now: datetime) -> datetime:
    """Midnight of the Monday on or before ``now``."""
    return now + relativedelta(weekday=MO(-1), hour=0, minute=0, second=0, microsecond=0)


def weekly_series(invoices: Sequence[InvoiceRecord], now: datetime) -> Tuple[DailyBucket, ...]:
    """Seven daily buckets, Monday to Sunday, of the week containing ``now``."""
    localized = _localized(invoices, now)
    monday = week_start(now).date()
    buckets = []

    for offset, label in enumerate(DAY_LABELS):
        day = monday + timedelta(days=offset)
        day_records = [record for timestamp, record in localized if timestamp.date() == day]
        buckets.append(DailyBucket(
            day=day,
            label=label,
            count=len(day_records),
            amount=_total(day_records),
        ))

    return tuple(buckets)


def organization_breakdown(invoices: Sequence[InvoiceRecord]) -> Tuple[CategoryBucket, ...]:
    buckets = []
    for organization in Organization:
        records = [r for r in invoices if r.organization is organization]
        buckets.append(CategoryBucket(
            key=organization.value,
            name=ORGANIZATION_NAMES[organization],
            count=len(records),
            amount=_total(records),
        ))
    return tuple(buckets)


def payment_type_breakdown(invoices: Sequence[InvoiceRecord]) -> Tuple[CategoryBucket, ...]:
    """Records without a payment type are left out of both categories."""
    buckets = []
    for invoice_type in InvoiceType:
        records = [r for r in invoices if r.invoice_type is invoice_type]
        buckets.append(CategoryBucket(
            key=invoice_type.value,
            name=invoice_type.label,
            count=len(records),
            amount=_total(records),
        ))
    return tuple(buckets)


def month_bounds(now: datetime) -> Tuple[datetime, datetime]:
    """Start of the current calendar month and start of the next one."""
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return start, start + relativedelta(months=1)


def summary_stats(invoices: Sequence[InvoiceRecord], now: datetime) -> DashboardStats:
    start, end = month_bounds(now)
    this_month = [
        record for timestamp, record in _localized(invoices, now)
        if start <= timestamp < end
    ]

    return DashboardStats(
        total_count=len(invoices),
        total_amount=_total(invoices),
        foundation_count=sum(1 for r in invoices if r.organization is Organization.FOUNDATION),
        kindergarten_count=sum(1 for r in invoices if r.organization is Organization.KINDERGARTEN),
        bank_transfer_count=sum(1 for r in invoices if r.invoice_type is InvoiceType.BANK_TRANSFER),
        card_cash_count=sum(1 for r in invoices if r.invoice_type is InvoiceType.CARD_CASH_AFTERPAY),
        this_month_count=len(this_month),
        this_month_amount=_total(this_month),
    )


def recent_invoices(invoices: Sequence[InvoiceRecord], limit: int = RECENT_LIMIT) -> Tuple[InvoiceRecord, ...]:
    """
    The first ``limit`` records.

    The list is expected to be ordered by upload time, newest first, as
    the datastore query returns it.
    """
    return tuple(invoices[:limit])


def aggregate(
    invoices: Sequence[InvoiceRecord],
    now: Optional[datetime] = None,
    recent_limit: int = RECENT_LIMIT
) -> DashboardAggregate:
    """
    Compute every dashboard view for a list of invoices.

    Args:
        invoices: Records, newest upload first.
        now: Reference moment; defaults to the current local time.
        recent_limit: How many records to list as recent.

    Returns:
        DashboardAggregate. An empty list gives zero-valued buckets.

    Example:
        >>> result = aggregate(records, datetime(2024, 3, 20))
        >>> result.stats.this_month_count
        3
    """
    if now is None:
        now = datetime.now()
    invoices = list(invoices)

    result = DashboardAggregate(
        stats=summary_stats(invoices, now),
        monthly=monthly_series(invoices, now),
        weekly=weekly_series(invoices, now),
        by_organization=organization_breakdown(invoices),
        by_payment_type=payment_type_breakdown(invoices),
        recent=recent_invoices(invoices, recent_limit),
    )

    logger.debug(
        f"Aggregated {len(invoices)} invoices for {now:%Y-%m-%d} "
        f"({result.stats.this_month_count} this month)"
    )
    return result
