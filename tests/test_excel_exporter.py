import openpyxl
import pytest

from invoice_desk.output_handler import LedgerExporter
from invoice_desk.pipeline import InvoicePipeline
from invoice_desk.utils.exceptions import LedgerExportError


CASH_INVOICE = """Feketerigó Alapítványi Óvoda
Eladó:
Papír Bolt Bt.
Bizonylatszám: PB-88
Fizetés módja: készpénz
Termék
Rajzlap csomag
Fizetendő: 4 990 Ft
"""


@pytest.fixture
def invoices(sample_invoice_text):
    pipeline = InvoicePipeline(use_ai=False)
    return [
        pipeline.process(sample_invoice_text, source="atutalas.txt"),
        pipeline.process(CASH_INVOICE, source="kp.txt"),
    ]


def test_export_splits_by_payment_type(tmp_path, invoices):
    path = LedgerExporter().export(invoices, filename="ledger.xlsx", output_dir=str(tmp_path))

    workbook = openpyxl.load_workbook(path)
    assert workbook.sheetnames == ['Átutalásos', 'KP']

    transfer = workbook['Átutalásos']
    assert [cell.value for cell in transfer[1]] == [
        'Szervezet', 'Partner', 'Bankszámlaszám', 'Munkaszám', 'Tárgy',
        'Számla sorszáma', 'Összeg', 'Számla kelte', 'Fizetési határidő',
    ]
    assert transfer.max_row == 2
    assert transfer['A2'].value == 'Feketerigó Alapítvány'
    assert transfer['C2'].value == '12345678-87654321'
    assert transfer['G2'].value == 125000
    assert transfer['H2'].value == '2024-03-15'

    cash = workbook['KP']
    assert cash.max_row == 2
    assert cash['A2'].value == 'Feketerigó Alapítványi Óvoda'
    assert cash['B2'].value == 'Papír Bolt Bt.'
    assert cash['C2'].value == 'Rajzlap csomag'
    assert cash['D2'].value == 'PB-88'
    assert cash['E2'].value == 4990


def test_export_single_invoice(tmp_path, invoices):
    path = LedgerExporter().export(invoices[0], filename="one.xlsx", output_dir=str(tmp_path))
    workbook = openpyxl.load_workbook(path)
    assert workbook['KP'].max_row == 1


def test_default_filename_uses_pattern():
    name = LedgerExporter().get_default_filename()
    assert name.startswith("szamlak_")
    assert name.endswith(".xlsx")


def test_export_nothing_raises(tmp_path):
    with pytest.raises(LedgerExportError):
        LedgerExporter().export([], filename="empty.xlsx", output_dir=str(tmp_path))


def test_control_characters_are_dropped(tmp_path):
    text = "Szállító:\nTeszt\x1b Kft.\nTermék\nIrodaszer\x0bcsomag\nFizetés: készpénz\nÖsszesen: 990 Ft"
    processed = InvoicePipeline(use_ai=False).process(text)

    path = LedgerExporter().export(processed, filename="ctrl.xlsx", output_dir=str(tmp_path))

    cash = openpyxl.load_workbook(path)['KP']
    assert cash['B2'].value == 'Teszt Kft.'
    assert cash['C2'].value == 'Irodaszercsomag'


def test_unwritable_target_raises_export_error(tmp_path, invoices):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(LedgerExportError):
        LedgerExporter().export(invoices, filename="x.xlsx", output_dir=str(blocker))
