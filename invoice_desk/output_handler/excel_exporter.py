"""
Ledger Exporter Module.

This module writes processed invoices into an Excel bookkeeping ledger
using openpyxl. Bank-transfer invoices and card/cash/after-pay invoices
go to separate sheets with their own column sets, matching the layout
the office keeps its ledger in.

Features:
    - Formatted headers
    - Auto-column width
    - One sheet per payment type
"""

from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

import openpyxl
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import IllegalCharacterError

from config import get_config
from invoice_desk.extraction.parsed_fields import InvoiceType
from invoice_desk.pipeline import ProcessedInvoice
from invoice_desk.utils.exceptions import LedgerExportError
from invoice_desk.utils.helpers import ensure_directory, generate_timestamp
from invoice_desk.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


def _date_cell(value):
    return value.isoformat() if value else ''


def _cell_value(value):
    """Blank for None; control characters from OCR text are dropped."""
    if value is None:
        return ''
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub('', value)
    return value


class LedgerExporter:
    """
    Exports processed invoices to an Excel ledger.

    Attributes:
        output_dir: Directory for output files
        organization_names: Display names per organization code

    Example:
        >>> exporter = LedgerExporter()
        >>> filepath = exporter.export(processed_invoices, "szamlak.xlsx")
        >>> print(f"Saved to: {filepath}")
    """

    BANK_TRANSFER_SHEET = 'Átutalásos'
    CARD_CASH_SHEET = 'KP'

    # (header, value getter) per sheet
    BANK_TRANSFER_COLUMNS: List[Tuple[str, Callable]] = [
        ('Szervezet', None),
        ('Partner', lambda inv: inv.fields.partner),
        ('Bankszámlaszám', lambda inv: inv.fields.bank_account),
        ('Munkaszám', lambda inv: inv.work_number),
        ('Tárgy', lambda inv: inv.fields.subject),
        ('Számla sorszáma', lambda inv: inv.fields.invoice_number),
        ('Összeg', lambda inv: inv.fields.amount),
        ('Számla kelte', lambda inv: _date_cell(inv.fields.invoice_date)),
        ('Fizetési határidő', lambda inv: _date_cell(inv.fields.payment_deadline)),
    ]

    CARD_CASH_COLUMNS: List[Tuple[str, Callable]] = [
        ('Szervezet', None),
        ('Partner', lambda inv: inv.fields.partner),
        ('Tárgy', lambda inv: inv.fields.subject),
        ('Számla sorszáma', lambda inv: inv.fields.invoice_number),
        ('Összeg', lambda inv: inv.fields.amount),
        ('Számla kelte', lambda inv: _date_cell(inv.fields.invoice_date)),
        ('Munkaszám', lambda inv: inv.work_number),
    ]

    DEFAULT_ORGANIZATION_NAMES = {
        'alapitvany': 'Feketerigó Alapítvány',
        'ovoda': 'Feketerigó Alapítványi Óvoda',
    }

    def __init__(self) -> None:
        """Initialize the exporter with configuration."""
        self.output_dir = Path(get_config("paths.output_dir", "outputs"))
        self.organization_names = dict(self.DEFAULT_ORGANIZATION_NAMES)
        self.organization_names.update(
            get_config("output.ledger.organization_names", {}) or {}
        )
        logger.debug(f"LedgerExporter initialized (output_dir: {self.output_dir})")

    def export(
        self,
        invoices: Union[ProcessedInvoice, Sequence[ProcessedInvoice]],
        filename: Optional[str] = None,
        output_dir: Optional[str] = None
    ) -> str:
        """
        Export processed invoices to an Excel file.

        Invoices without a recognized payment type go to the card/cash
        sheet, the same way the office files them by default.

        Args:
            invoices: Single invoice or list of invoices to export.
            filename: Output filename. If None, auto-generated.
            output_dir: Output directory. If None, uses configured dir.

        Returns:
            Path to the created Excel file.

        Raises:
            LedgerExportError: If there is nothing to export or writing fails.
        """
        if isinstance(invoices, ProcessedInvoice):
            invoices = [invoices]

        out_dir = Path(output_dir) if output_dir else self.output_dir
        if filename is None:
            filename = self.get_default_filename()
        filepath = out_dir / filename

        if not invoices:
            raise LedgerExportError(str(filepath), "No invoices to export")

        bank_transfer = [
            inv for inv in invoices if inv.fields.invoice_type is InvoiceType.BANK_TRANSFER
        ]
        card_cash = [
            inv for inv in invoices if inv.fields.invoice_type is not InvoiceType.BANK_TRANSFER
        ]

        try:
            ensure_directory(out_dir)
            workbook = openpyxl.Workbook()
            first_sheet = workbook.active
            first_sheet.title = self.BANK_TRANSFER_SHEET
            self._fill_sheet(first_sheet, self.BANK_TRANSFER_COLUMNS, bank_transfer)
            self._fill_sheet(
                workbook.create_sheet(title=self.CARD_CASH_SHEET),
                self.CARD_CASH_COLUMNS,
                card_cash
            )
            workbook.save(filepath)
        except (OSError, ValueError, IllegalCharacterError) as e:
            logger.error(f"Ledger export failed: {e}")
            raise LedgerExportError(str(filepath), str(e)) from e

        logger.info(
            f"Ledger saved: {filepath} "
            f"({len(bank_transfer)} bank transfer, {len(card_cash)} card/cash)"
        )
        return str(filepath)

    def _fill_sheet(self, sheet, columns, invoices: Sequence[ProcessedInvoice]) -> None:
        """
        Write headers and one row per invoice.

        Args:
            sheet: openpyxl worksheet.
            columns: (header, getter) pairs.
            invoices: Invoices belonging to this sheet.
        """
        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
        header_alignment = Alignment(horizontal="center", vertical="center")
        thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

        for col, (header_name, _) in enumerate(columns, 1):
            cell = sheet.cell(row=1, column=col, value=header_name)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = header_alignment
            cell.border = thin_border

        for row_num, invoice in enumerate(invoices, 2):
            for col, (_, getter) in enumerate(columns, 1):
                if getter is None:
                    value = self.organization_names.get(invoice.organization.value, '')
                else:
                    value = getter(invoice)
                cell = sheet.cell(row=row_num, column=col, value=_cell_value(value))
                cell.border = thin_border

        for col, (header_name, _) in enumerate(columns, 1):
            column_letter = get_column_letter(col)
            max_length = len(header_name)
            for row in range(2, len(invoices) + 2):
                cell_value = sheet.cell(row=row, column=col).value
                if cell_value:
                    max_length = max(max_length, len(str(cell_value)))
            sheet.column_dimensions[column_letter].width = min(max_length + 2, 50)

        sheet.freeze_panes = 'A2'

    def get_default_filename(self) -> str:
        """Generate a default filename with timestamp."""
        pattern = get_config(
            "output.ledger.filename_pattern",
            "szamlak_{timestamp}.xlsx"
        )
        return pattern.format(timestamp=generate_timestamp())
