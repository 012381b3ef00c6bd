"""
AI Re-Extraction Module.

A second extraction pass that asks a generative text model to read the
OCR text and answer with a JSON object keyed by the Hungarian ledger
column names. The answer is mapped back onto ParsedInvoiceFields with
the same normalizers as the heuristic extractor, so both passes yield
values of identical types.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from invoice_desk.extraction.extractor import InvoiceFieldExtractor, detect_organization
from invoice_desk.extraction.normalizers import AmountNormalizer, DateNormalizer
from invoice_desk.extraction.parsed_fields import (
    InvoiceType,
    Organization,
    ParsedInvoiceFields,
    field_warning,
)
from invoice_desk.utils.exceptions import ReExtractionError
from invoice_desk.utils.logger import get_logger
from .gemini_client import GeminiClient

# Initialize module logger
logger = get_logger(__name__)


PROMPT_TEMPLATE = """Here is the raw data from a hungarian invoice, I need you to extract the following information:

First, determine which organization this invoice belongs to by looking for these indicators:
- "Feketerigó Alapítvány" or similar → should be "Alapítvány"
- "Feketerigó Alapítványi Óvoda" or "óvoda" or similar → should be "Óvoda"

Then check if the invoice is paid by átutalás (bank transfer) or kártya/készpénz/utánvét/online or any other payment method.

If the invoice is átutalásos (bank transfer) then I need these values:
Szervezet, Partner, Bankszámlaszám, Tárgy, Számla sorszáma, Összeg, Számla kelte, Fizetési határidő, Fizetési mód

If it's kártya/készpénz/utánvét/online or any other payment method then I need these values:
Szervezet, Partner, Tárgy, Számla sorszáma, Összeg, Számla kelte, Fizetési mód

Important guidelines:
- Szervezet: Must be exactly "Alapítvány" or "Óvoda" based on the document content
- Partner: Include the company formation (Kft., Bt., Zrt., etc.) in the name
- Bankszámlaszám: Only include if it's a bank transfer payment
- Tárgy: The first product/service mentioned in the invoice
- Összeg: Number only, no currency symbols
- Dates: Use YYYY-MM-DD format
- Fizetési mód: The payment method as written on the invoice

Please respond with a JSON object containing the extracted data. Use null for missing values.

Invoice text:
{text}"""

# Hungarian response key -> ParsedInvoiceFields attribute (text fields only)
TEXT_FIELD_KEYS = {
    'Partner': 'partner',
    'Bankszámlaszám': 'bank_account',
    'Tárgy': 'subject',
    'Számla sorszáma': 'invoice_number',
    'Fizetési mód': 'payment_method_text',
}

ORGANIZATION_VALUES = {
    name: organization
    for organization in Organization
    for name in (organization.value, organization.label.lower())
}

JSON_OBJECT_PATTERN = re.compile(r'\{.*\}', re.DOTALL)


@dataclass(frozen=True)
class ReExtractionResult:
    """Outcome of one AI pass."""
    fields: ParsedInvoiceFields
    organization: Organization
    raw_response: str


def parse_response_json(text: str) -> Dict[str, Any]:
    """
    Pull the JSON object out of a model answer.

    Models often wrap JSON in prose or markdown fences; everything between
    the first ``{`` and the last ``}`` is parsed.

    Raises:
        ReExtractionError: If no JSON object can be parsed.
    """
    match = JSON_OBJECT_PATTERN.search(text or '')
    if match is None:
        raise ReExtractionError("No JSON found in response")
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse AI response as JSON: {text}")
        raise ReExtractionError(f"Failed to parse AI response: {e}") from e
    if not isinstance(data, dict):
        raise ReExtractionError("AI response JSON is not an object")
    return data


class AIReExtractor:
    """
    Re-extracts invoice fields with a generative text model.

    Attributes:
        client: Object with a ``generate_text(prompt) -> str`` method.

    Example:
        >>> reextractor = AIReExtractor()
        >>> result = reextractor.reextract(ocr_text)
        >>> result.organization, result.fields.partner
    """

    def __init__(self, client: Optional[GeminiClient] = None) -> None:
        self.client = client or GeminiClient()
        self.amount_normalizer = AmountNormalizer()
        self.date_normalizer = DateNormalizer()
        self.payment_classifier = InvoiceFieldExtractor()

    def build_prompt(self, text: str) -> str:
        return PROMPT_TEMPLATE.format(text=text)

    def reextract(self, text: str) -> ReExtractionResult:
        """
        Run the AI pass over OCR text.

        Args:
            text: Plain OCR text of one invoice.

        Returns:
            ReExtractionResult.

        Raises:
            ReExtractionError: If the service call or JSON parsing fails.
        """
        raw = self.client.generate_text(self.build_prompt(text))
        data = parse_response_json(raw)

        fields = self.map_response(data)
        organization = self._resolve_organization(data.get('Szervezet'), text)

        logger.info(
            f"AI re-extraction returned {len(fields.extracted_fields)} fields "
            f"({organization.value})"
        )
        return ReExtractionResult(
            fields=fields,
            organization=organization,
            raw_response=raw
        )

    def map_response(self, data: Dict[str, Any]) -> ParsedInvoiceFields:
        """
        Map a response object keyed by Hungarian column names to fields.

        Args:
            data: Parsed JSON object.

        Returns:
            ParsedInvoiceFields; unparseable amounts and dates become
            warnings instead of values.
        """
        fields = ParsedInvoiceFields()

        for key, attribute in TEXT_FIELD_KEYS.items():
            value = data.get(key)
            if value is not None and str(value).strip():
                setattr(fields, attribute, str(value).strip())

        raw_amount = data.get('Összeg')
        fields.amount = self.amount_normalizer.normalize(raw_amount)
        if fields.amount is None and raw_amount not in (None, ''):
            fields.add_warning(field_warning('amount', raw_amount))

        for key, attribute in (('Számla kelte', 'invoice_date'),
                               ('Fizetési határidő', 'payment_deadline')):
            raw_date = data.get(key)
            value = self.date_normalizer.normalize(raw_date)
            setattr(fields, attribute, value)
            if value is None and raw_date not in (None, ''):
                fields.add_warning(field_warning(attribute, raw_date))

        fields.invoice_type = self._resolve_invoice_type(data, fields)
        return fields

    def _resolve_invoice_type(self, data, fields) -> Optional[InvoiceType]:
        declared = data.get('paymentType') or data.get('invoice_type')
        if declared in (InvoiceType.BANK_TRANSFER.value, InvoiceType.CARD_CASH_AFTERPAY.value):
            return InvoiceType(declared)

        invoice_type = self.payment_classifier.classify_payment_method(fields.payment_method_text)
        if invoice_type is None and fields.bank_account:
            invoice_type = InvoiceType.BANK_TRANSFER
        return invoice_type

    def _resolve_organization(self, value: Any, text: str) -> Organization:
        if isinstance(value, str):
            organization = ORGANIZATION_VALUES.get(value.strip().lower())
            if organization is not None:
                return organization
        # Fall back to scanning the invoice text itself
        return detect_organization(text)
