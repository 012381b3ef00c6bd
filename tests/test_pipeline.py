from datetime import date

from invoice_desk.extraction import InvoiceType, Organization, ParsedInvoiceFields
from invoice_desk.pipeline import InvoicePipeline, ProcessedInvoice
from invoice_desk.reextraction import ReExtractionResult
from invoice_desk.utils.exceptions import ReExtractionError


class FakeReExtractor:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = 0

    def reextract(self, text):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result


def ai_result(**values):
    return ReExtractionResult(
        fields=ParsedInvoiceFields(**values),
        organization=Organization.KINDERGARTEN,
        raw_response="{}"
    )


def test_heuristic_only_by_default(sample_invoice_text):
    reextractor = FakeReExtractor()
    processed = InvoicePipeline(reextractor=reextractor).process(
        sample_invoice_text, source="szamla.txt"
    )

    assert isinstance(processed, ProcessedInvoice)
    assert reextractor.calls == 0
    assert not processed.ai_used
    assert processed.organization is Organization.FOUNDATION
    assert processed.fields.invoice_number == "TK-2024/0042"
    assert processed.validation.is_valid


def test_ai_values_override_heuristic(sample_invoice_text):
    reextractor = FakeReExtractor(ai_result(
        partner="Teszt Kereskedelmi Kft.",
        amount=127000.0,
        subject="",
    ))
    processed = InvoicePipeline(reextractor=reextractor, use_ai=True).process(
        sample_invoice_text
    )

    assert processed.ai_used
    assert processed.organization is Organization.KINDERGARTEN
    assert processed.fields.partner == "Teszt Kereskedelmi Kft."
    assert processed.fields.amount == 127000.0
    # Empty AI values keep the heuristic ones
    assert processed.fields.subject == "Irodaszer beszerzés"
    assert processed.fields.invoice_date == date(2024, 3, 15)
    assert processed.heuristic_fields.amount == 125000.0


def test_ai_failure_keeps_heuristic_result(sample_invoice_text):
    reextractor = FakeReExtractor(error=ReExtractionError("quota exceeded", status_code=429))
    processed = InvoicePipeline(reextractor=reextractor).process(
        sample_invoice_text, use_ai=True
    )

    assert reextractor.calls == 1
    assert not processed.ai_used
    assert processed.fields.amount == 125000.0
    assert "AI re-extraction failed: quota exceeded" in processed.fields.warnings
    assert "AI re-extraction failed: quota exceeded" in processed.validation.warnings


def test_missing_payment_method_is_reported():
    processed = InvoicePipeline().process("Számla sorszáma: A-1\nÖsszesen: 5 000 Ft")

    assert processed.fields.invoice_type is None
    assert processed.validation.is_valid
    assert "Payment method not recognized" in processed.validation.warnings


def test_bank_transfer_without_account_is_invalid():
    processed = InvoicePipeline().process(
        "Számla sorszáma: A-1\nFizetési mód: átutalás\nÖsszesen: 5 000 Ft"
    )

    assert processed.fields.invoice_type is InvoiceType.BANK_TRANSFER
    assert not processed.validation.is_valid


def test_to_dict(sample_invoice_text):
    data = InvoicePipeline().process(sample_invoice_text, source="a.txt").to_dict()

    assert data["source"] == "a.txt"
    assert data["organization"] == "alapitvany"
    assert data["fields"]["invoice_date"] == "2024-03-15"
    assert data["validation"]["is_valid"] is True


def test_stale_heuristic_warnings_dropped_when_ai_fills_field():
    text = "Számla sorszáma: A-1\nSzámla kelte: 2024.13.45\nFizetés: készpénz"
    reextractor = FakeReExtractor(ai_result(invoice_date=date(2024, 3, 15), amount=990.0))
    processed = InvoicePipeline(reextractor=reextractor, use_ai=True).process(text)

    assert processed.heuristic_fields.warnings == ["Invalid invoice_date: '2024.13.45'"]
    assert processed.fields.invoice_date == date(2024, 3, 15)
    assert processed.fields.warnings == []
    assert not any("invoice_date" in w for w in processed.validation.warnings)


def test_heuristic_warnings_kept_for_fields_ai_left_empty():
    text = "Számla sorszáma: A-1\nSzámla kelte: 2024.13.45"
    reextractor = FakeReExtractor(ai_result(amount=990.0))
    processed = InvoicePipeline(reextractor=reextractor, use_ai=True).process(text)

    assert processed.fields.warnings == ["Invalid invoice_date: '2024.13.45'"]
