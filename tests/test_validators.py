from datetime import date

from invoice_desk.extraction import FieldValidator, InvoiceType, ParsedInvoiceFields, extract


def make_fields(**overrides):
    values = dict(
        partner="Teszt Kft.",
        bank_account="12345678-87654321",
        invoice_number="TK-1",
        amount=125000.0,
        invoice_date=date(2024, 3, 15),
        payment_deadline=date(2024, 3, 30),
        invoice_type=InvoiceType.BANK_TRANSFER,
    )
    values.update(overrides)
    return ParsedInvoiceFields(**values)


def test_complete_invoice_is_valid(sample_invoice_text):
    validation = FieldValidator().validate(extract(sample_invoice_text))
    assert validation.is_valid
    assert validation.errors == []


def test_bank_transfer_requires_bank_account():
    validation = FieldValidator().validate(make_fields(bank_account=None))
    assert not validation.is_valid
    assert "Bank account is required for bank transfer invoices" in validation.errors


def test_card_invoice_without_bank_account_is_valid():
    fields = make_fields(bank_account=None, invoice_type=InvoiceType.CARD_CASH_AFTERPAY)
    assert FieldValidator().validate(fields).is_valid


def test_required_fields_from_settings():
    validation = FieldValidator().validate(make_fields(invoice_number=None, amount=None))
    assert "Required field missing: invoice_number" in validation.errors
    assert "Required field missing: amount" in validation.errors


def test_custom_required_fields():
    validation = FieldValidator(required_fields=["partner"]).validate(
        make_fields(partner=None, amount=None)
    )
    assert validation.errors == ["Required field missing: partner"]


def test_negative_amount_and_bad_account():
    validation = FieldValidator().validate(
        make_fields(amount=-5.0, bank_account="1234-5678")
    )
    assert "amount: Amount must be positive" in validation.errors
    assert any(error.startswith("bank_account:") for error in validation.errors)


def test_deadline_before_invoice_date_is_a_warning():
    validation = FieldValidator().validate(
        make_fields(payment_deadline=date(2024, 3, 1))
    )
    assert validation.is_valid
    assert "Payment deadline is before invoice date" in validation.warnings


def test_extraction_warnings_are_carried_over():
    fields = make_fields()
    fields.add_warning("Invalid invoice_date: '2024.13.45'")
    validation = FieldValidator().validate(fields)
    assert "Invalid invoice_date: '2024.13.45'" in validation.warnings


def test_validation_does_not_modify_fields():
    fields = make_fields(bank_account=None)
    before = fields.to_dict()
    FieldValidator().validate(fields)
    assert fields.to_dict() == before


def test_to_dict_is_json_friendly():
    data = FieldValidator().validate(make_fields(amount=None)).to_dict()
    assert data["is_valid"] is False
    assert isinstance(data["field_results"], dict)


def test_bank_account_with_fullwidth_digits_is_rejected():
    validation = FieldValidator().validate(make_fields(bank_account="１２３４５６７８-８７６５４３２１"))
    assert not validation.is_valid
    assert validation.field_results["bank_account"][0] is False
