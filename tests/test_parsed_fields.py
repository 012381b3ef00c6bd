from datetime import date

from invoice_desk.extraction import InvoiceType, Organization, ParsedInvoiceFields, extract
from invoice_desk.extraction.parsed_fields import field_warning
from invoice_desk.reextraction.reextractor import ORGANIZATION_VALUES


def test_to_dict_from_dict_round_trip(sample_invoice_text):
    fields = extract(sample_invoice_text)
    fields.add_warning(field_warning('payment_deadline', '2024.02.30'))

    restored = ParsedInvoiceFields.from_dict(fields.to_dict())

    assert restored == fields
    assert restored.invoice_date == date(2024, 3, 15)
    assert restored.invoice_type is InvoiceType.BANK_TRANSFER


def test_from_dict_with_missing_values():
    restored = ParsedInvoiceFields.from_dict({"amount": "990", "invoice_type": None})
    assert restored.amount == 990.0
    assert restored.invoice_type is None
    assert restored.missing_fields == [
        'partner', 'bank_account', 'subject', 'invoice_number',
        'invoice_date', 'payment_deadline', 'payment_method_text', 'invoice_type',
    ]


def test_extraction_rate():
    fields = ParsedInvoiceFields(partner="Teszt Kft.", amount=1.0, subject="")
    assert round(fields.extraction_rate) == 22
    assert not fields.is_empty


def test_merged_with_keeps_other_warnings():
    base = ParsedInvoiceFields(amount=None, warnings=[
        field_warning('amount', '12a'),
        "AI re-extraction failed: timeout",
    ])
    merged = base.merged_with(ParsedInvoiceFields(amount=12.0, warnings=["from override"]))

    assert merged.amount == 12.0
    assert merged.warnings == ["AI re-extraction failed: timeout", "from override"]
    assert len(base.warnings) == 2


def test_labels():
    assert InvoiceType.BANK_TRANSFER.label == 'Banki átutalás'
    assert Organization.KINDERGARTEN.label == 'Óvoda'


def test_organization_answers_accept_labels_and_codes():
    assert ORGANIZATION_VALUES['óvoda'] is Organization.KINDERGARTEN
    assert ORGANIZATION_VALUES['ovoda'] is Organization.KINDERGARTEN
    assert ORGANIZATION_VALUES['alapítvány'] is Organization.FOUNDATION
    assert ORGANIZATION_VALUES['alapitvany'] is Organization.FOUNDATION
