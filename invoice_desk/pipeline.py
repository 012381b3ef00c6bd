"""
Invoice Processing Pipeline Module.

This module provides the InvoicePipeline class that orchestrates all
operations applied to one invoice's OCR text.

Operations:
    - Heuristic field extraction
    - Optional AI re-extraction and merge
    - Organization detection
    - Validation
    - Logging of the outcome
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from config import get_config
from invoice_desk.extraction import (
    FieldValidator,
    InvoiceFieldExtractor,
    Organization,
    ParsedInvoiceFields,
    ValidationResult,
    detect_organization,
)
from invoice_desk.reextraction import AIReExtractor
from invoice_desk.utils.exceptions import ReExtractionError
from invoice_desk.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)


@dataclass
class ProcessedInvoice:
    """
    One invoice after the full pipeline.

    Attributes:
        fields: Final (possibly merged) field values.
        organization: Entity the invoice belongs to.
        validation: Outcome of the plausibility checks.
        source: Where the text came from, e.g. a file name.
        ai_used: Whether an AI pass contributed values.
        work_number: Bookkeeping work number, filled in by a person.
    """
    fields: ParsedInvoiceFields
    organization: Organization
    validation: ValidationResult
    source: Optional[str] = None
    ai_used: bool = False
    work_number: Optional[str] = None
    heuristic_fields: Optional[ParsedInvoiceFields] = field(default=None, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source': self.source,
            'organization': self.organization.value,
            'ai_used': self.ai_used,
            'work_number': self.work_number,
            'fields': self.fields.to_dict(),
            'validation': self.validation.to_dict(),
        }


class InvoicePipeline:
    """
    Runs OCR text through extraction, re-extraction and validation.

    Attributes:
        extractor: Heuristic field extractor.
        reextractor: AI pass, created lazily when first needed.
        validator: Field validator.
        use_ai: Default for the AI pass (``reextraction.enabled``).

    Example:
        >>> pipeline = InvoicePipeline()
        >>> processed = pipeline.process(ocr_text, source="szamla_01.txt")
        >>> processed.fields.partner
        'Teszt Kft.'
    """

    def __init__(
        self,
        extractor: Optional[InvoiceFieldExtractor] = None,
        reextractor: Optional[AIReExtractor] = None,
        validator: Optional[FieldValidator] = None,
        use_ai: Optional[bool] = None
    ) -> None:
        self.extractor = extractor or InvoiceFieldExtractor.from_config()
        self._reextractor = reextractor
        self.validator = validator or FieldValidator()
        self.use_ai = get_config("reextraction.enabled", False) if use_ai is None else use_ai

        logger.info(f"InvoicePipeline initialized (AI pass: {'on' if self.use_ai else 'off'})")

    @property
    def reextractor(self) -> AIReExtractor:
        if self._reextractor is None:
            self._reextractor = AIReExtractor()
        return self._reextractor

    def process(
        self,
        text: str,
        source: Optional[str] = None,
        use_ai: Optional[bool] = None
    ) -> ProcessedInvoice:
        """
        Process the OCR text of one invoice.

        A failing AI pass is logged and the heuristic result is kept.

        Args:
            text: Plain OCR text.
            source: Label for logging and output, e.g. the file name.
            use_ai: Override the configured AI setting for this call.

        Returns:
            ProcessedInvoice.
        """
        logger.info(f"Processing invoice text: {source or '<text>'}")

        heuristic = self.extractor.extract(text)
        fields = heuristic
        organization = detect_organization(text)
        ai_used = False

        if self.use_ai if use_ai is None else use_ai:
            try:
                ai_result = self.reextractor.reextract(text)
            except ReExtractionError as e:
                logger.warning(f"AI re-extraction skipped for {source or '<text>'}: {e}")
                heuristic.add_warning(f"AI re-extraction failed: {e.details.get('reason')}")
            else:
                fields = heuristic.merged_with(ai_result.fields)
                organization = ai_result.organization
                ai_used = True

        validation = self.validator.validate(fields)

        self._log_summary(source, fields, validation)

        return ProcessedInvoice(
            fields=fields,
            organization=organization,
            validation=validation,
            source=source,
            ai_used=ai_used,
            heuristic_fields=heuristic,
        )

    def _log_summary(self, source, fields: ParsedInvoiceFields, validation: ValidationResult) -> None:
        logger.info(
            f"Extraction complete for {source or '<text>'}: "
            f"{len(fields.extracted_fields)} fields, "
            f"{len(validation.errors)} errors, "
            f"{len(validation.warnings)} warnings"
        )
        for error in validation.errors:
            logger.warning(f"Validation error: {error}")
        for warning in validation.warnings[:5]:  # Limit logging
            logger.debug(f"Validation warning: {warning}")
