"""
Field Validators Module.

Plausibility checks run on a ParsedInvoiceFields after extraction:
    - required fields present
    - bank-transfer invoices carry a bank account number
    - positive amount within a sane range
    - payment deadline not before the invoice date

Validation never modifies the fields and never raises; problems are
reported as errors (must be fixed by a person) or warnings.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from config import get_config
from invoice_desk.utils.logger import get_logger
from .extractor import BANK_ACCOUNT_PATTERN
from .parsed_fields import InvoiceType, ParsedInvoiceFields

# Initialize module logger
logger = get_logger(__name__)


class ValidationResult:
    """
    Contains the result of validation checks.

    Attributes:
        is_valid: Overall validation result
        errors: List of error messages
        warnings: List of warning messages
        field_results: Per-field validation results
    """

    def __init__(self):
        self.is_valid = True
        self.errors: List[str] = []
        self.warnings: List[str] = []
        self.field_results: Dict[str, Tuple[bool, str]] = {}

    def add_error(self, message: str) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(message)

    def add_field_result(self, field: str, is_valid: bool, message: str) -> None:
        """Add a field-level validation result."""
        self.field_results[field] = (is_valid, message)
        if not is_valid:
            self.add_error(f"{field}: {message}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'is_valid': self.is_valid,
            'errors': self.errors,
            'warnings': self.warnings,
            'field_results': {k: list(v) for k, v in self.field_results.items()}
        }


class AmountValidator:
    """
    Validates forint amounts.

    Example:
        >>> AmountValidator().validate(-100.0)
        (False, 'Amount must be positive')
    """

    MAX_AMOUNT = 1_000_000_000  # 1 billion HUF

    def validate(self, amount: Optional[float]) -> Tuple[bool, str]:
        if amount is None:
            return False, "Amount is empty"
        if amount <= 0:
            return False, "Amount must be positive"
        if amount > self.MAX_AMOUNT:
            return False, f"Amount {amount:.0f} exceeds maximum"
        return True, "Valid amount"


class DateValidator:
    """Validates invoice dates and their ordering."""

    MIN_YEAR = 2000
    MAX_YEAR = 2100

    def validate(self, value: Optional[date]) -> Tuple[bool, str]:
        if value is None:
            return False, "Date is empty"
        if value.year < self.MIN_YEAR:
            return False, f"Year {value.year} is too old"
        if value.year > self.MAX_YEAR:
            return False, f"Year {value.year} is too far in future"
        return True, "Valid date"

    def is_due_after_invoice(self, invoice_date: date, due_date: date) -> Tuple[bool, str]:
        if due_date < invoice_date:
            return False, "Payment deadline is before invoice date"
        return True, "Valid date relationship"


class FieldValidator:
    """
    Invoice-level validation.

    Attributes:
        required_fields: Field names that must be filled.

    Example:
        >>> validation = FieldValidator().validate(fields)
        >>> validation.is_valid
        False
        >>> validation.errors
        ['Bank account is required for bank transfer invoices']
    """

    def __init__(self, required_fields: Optional[List[str]] = None) -> None:
        if required_fields is None:
            required_fields = get_config(
                "validation.required_fields",
                ["invoice_number", "amount"]
            )
        self.required_fields = list(required_fields)
        self.amount_validator = AmountValidator()
        self.date_validator = DateValidator()

        logger.debug(f"FieldValidator initialized (required: {self.required_fields})")

    def validate_bank_account(self, value: str) -> Tuple[bool, str]:
        if BANK_ACCOUNT_PATTERN.fullmatch(value.strip()) is None:
            return False, "Bank account must be 2 or 3 groups of 8 digits"
        return True, "Valid bank account"

    def check_required_fields(self, fields: Dict[str, Any]) -> Tuple[bool, List[str]]:
        """
        Check if all required fields are present.

        Returns:
            Tuple of (all_present, list of missing fields).
        """
        missing = [
            name for name in self.required_fields
            if fields.get(name) is None or str(fields.get(name)).strip() == ""
        ]
        return len(missing) == 0, missing

    def validate(self, fields: ParsedInvoiceFields) -> ValidationResult:
        """
        Validate a parsed invoice.

        Args:
            fields: Extraction result to check.

        Returns:
            ValidationResult with errors and warnings.
        """
        validation = ValidationResult()

        _, missing = self.check_required_fields(fields.fields)
        for name in missing:
            validation.add_error(f"Required field missing: {name}")

        if fields.invoice_type is InvoiceType.BANK_TRANSFER and not fields.bank_account:
            validation.add_error("Bank account is required for bank transfer invoices")

        if fields.bank_account:
            validation.add_field_result(
                'bank_account', *self.validate_bank_account(fields.bank_account)
            )

        if fields.amount is not None:
            validation.add_field_result('amount', *self.amount_validator.validate(fields.amount))

        for name in ('invoice_date', 'payment_deadline'):
            value = getattr(fields, name)
            if value is not None:
                validation.add_field_result(name, *self.date_validator.validate(value))

        if fields.invoice_date and fields.payment_deadline:
            is_valid, message = self.date_validator.is_due_after_invoice(
                fields.invoice_date,
                fields.payment_deadline
            )
            if not is_valid:
                validation.add_warning(message)

        if fields.invoice_type is None:
            validation.add_warning("Payment method not recognized")

        for warning in fields.warnings:
            validation.add_warning(warning)

        return validation
