from datetime import date

import pytest

from invoice_desk.extraction import (
    InvoiceFieldExtractor,
    InvoiceType,
    KeywordTables,
    Organization,
    ParsedInvoiceFields,
    detect_organization,
    extract,
)
from invoice_desk.extraction.extractor import split_lines


def test_full_bank_transfer_invoice(sample_invoice_text):
    fields = extract(sample_invoice_text)

    assert fields.partner == "Teszt Kft."
    assert fields.bank_account == "12345678-87654321"
    assert fields.invoice_number == "TK-2024/0042"
    assert fields.amount == 125000
    assert fields.invoice_date == date(2024, 3, 15)
    assert fields.payment_deadline == date(2024, 3, 30)
    assert fields.payment_method_text == "Fizetési mód: Banki átutalás"
    assert fields.invoice_type is InvoiceType.BANK_TRANSFER
    assert fields.subject == "Irodaszer beszerzés"
    assert fields.warnings == []
    assert fields.missing_fields == []


def test_partner_is_line_after_supplier_label():
    assert extract("Szállító:\nTeszt Kft.").partner == "Teszt Kft."


def test_partner_label_on_last_line_gives_nothing():
    assert extract("Valami\nSzállító:").partner is None


def test_bank_account_two_groups():
    assert extract("12345678-87654321").bank_account == "12345678-87654321"


def test_bank_account_three_groups_inside_line():
    fields = extract("Számlaszámunk: 11773016-01234567-00000000 (OTP)")
    assert fields.bank_account == "11773016-01234567-00000000"


def test_amount_with_space_grouping():
    assert extract("125 000 Ft").amount == 125000


def test_amount_with_decimal_comma_and_huf():
    assert extract("Fizetendő: 1 234 567,50 HUF").amount == 1234567.5


def test_amount_first_matching_line_wins():
    fields = extract("Nettó: 100 000 Ft\nBruttó: 127 000 Ft")
    assert fields.amount == 100000


def test_invoice_date_on_next_line():
    fields = extract("Számla kelte\n2024.03.15")
    assert fields.invoice_date == date(2024, 3, 15)


@pytest.mark.parametrize("line", [
    "Kiállítás dátuma: 2024-03-15",
    "Dátum: 2024/03/15",
    "Számla kelte: 2024.3.15.",
])
def test_invoice_date_separators(line):
    assert extract(line).invoice_date == date(2024, 3, 15)


def test_payment_deadline_keywords():
    fields = extract("Esedékesség:\n2024.04.01")
    assert fields.payment_deadline == date(2024, 4, 1)
    assert fields.invoice_date is None


def test_out_of_range_date_is_rejected_and_scan_continues():
    fields = extract("Számla kelte: 2024.13.45\nDátum: 2024.02.29")
    assert fields.invoice_date == date(2024, 2, 29)
    assert any("2024.13.45" in warning for warning in fields.warnings)


def test_out_of_range_date_alone_leaves_field_empty():
    fields = extract("Számla kelte: 2023.02.29")
    assert fields.invoice_date is None
    assert fields.warnings


def test_cash_payment_classification():
    line = "Fizetés módja: készpénz"
    fields = extract(f"Vevő neve\n{line}")
    assert fields.invoice_type is InvoiceType.CARD_CASH_AFTERPAY
    assert fields.payment_method_text == line


def test_payment_method_first_line_wins():
    fields = extract("Fizetés: bankkártya\nÁtutalás esetén a közleménybe írja")
    assert fields.invoice_type is InvoiceType.CARD_CASH_AFTERPAY
    assert fields.payment_method_text == "Fizetés: bankkártya"


def test_invoice_number_from_next_line():
    fields = extract("Bizonylatszám:\nABC 123")
    assert fields.invoice_number == "ABC 123"


def test_invoice_number_first_label_only():
    # Only the first label line is consulted
    fields = extract("Sorszám: INV-7\nSzámlaszám: X-9")
    assert fields.invoice_number == "INV-7"


def test_subject_fallback_skips_dates_and_amounts():
    text = "2024.03.15 kelt\n15 000 Ft összesen\nRövid\nKarbantartási munkadíj"
    assert extract(text).subject == "Karbantartási munkadíj"


def test_empty_text_gives_empty_result():
    fields = extract("")
    assert fields == ParsedInvoiceFields()
    assert fields.is_empty


@pytest.mark.parametrize("text", [
    "   \n\n  \t ",
    "lorem ipsum",
    "Szállító:",
    "Számla kelte: 9999.99.99",
    "999 999 999 999 999,99 ft" * 3,
    None,
])
def test_extract_never_raises(text):
    fields = extract(text)
    assert isinstance(fields, ParsedInvoiceFields)
    assert fields.amount is None or isinstance(fields.amount, float)
    assert fields.invoice_date is None or isinstance(fields.invoice_date, date)


def test_split_lines_trims_and_drops_blanks():
    assert split_lines("  a  \n\n b\r\n") == ["a", "b"]


def test_extractor_is_stateless(sample_invoice_text):
    extractor = InvoiceFieldExtractor()
    first = extractor.extract(sample_invoice_text)
    extractor.extract("Szállító:\nMásik Bt.")
    assert extractor.extract(sample_invoice_text) == first


def test_extra_keywords_extend_partner_vocabulary():
    extractor = InvoiceFieldExtractor(
        keywords=KeywordTables().with_extra({"partner": ["Vállalkozó"]})
    )
    fields = extractor.extract("Vállalkozó neve\nKovács János EV")
    assert fields.partner == "Kovács János EV"


def test_classify_payment_method():
    extractor = InvoiceFieldExtractor()
    assert extractor.classify_payment_method("Utánvét") is InvoiceType.CARD_CASH_AFTERPAY
    assert extractor.classify_payment_method("csoportos beszedés") is InvoiceType.BANK_TRANSFER
    assert extractor.classify_payment_method("online") is None
    assert extractor.classify_payment_method(None) is None


def test_detect_organization():
    assert detect_organization("Feketerigó Alapítványi Óvoda") is Organization.KINDERGARTEN
    assert detect_organization("Feketerigó Alapítvány") is Organization.FOUNDATION
    assert detect_organization("") is Organization.FOUNDATION


def test_non_ascii_digits_fill_nothing():
    fields = extract("１２３４５６７８-８７６５４３２１\nÖsszesen: ١٢٥ ٠٠٠ Ft")
    assert fields.bank_account is None
    assert fields.amount is None
