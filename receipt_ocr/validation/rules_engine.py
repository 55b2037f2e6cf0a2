"""Validation rules engine for submitted transaction forms.

Receipt extraction output is advisory; before a transaction is saved the
form values are re-checked against stricter business rules (positive
amount, at most two decimals, no future dates, length limits).
"""

import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from receipt_ocr.utils.logger import get_logger

logger = get_logger(__name__)


DATE_FORMATS: list[str] = [
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
]


@dataclass
class ValidationResult:
    """Result of a single field validation check."""

    field_name: str
    is_valid: bool
    message: str
    rule_name: str


@dataclass
class ValidationReport:
    """Aggregated validation report for a form submission."""

    all_valid: bool
    results: list[ValidationResult]
    warnings: list[str] = field(default_factory=list)

    @property
    def errors(self) -> dict[str, list[str]]:
        """Failure messages grouped by field name."""
        grouped: dict[str, list[str]] = {}
        for result in self.results:
            if not result.is_valid:
                grouped.setdefault(result.field_name, []).append(result.message)
        return grouped


def _to_decimal(value: Any) -> Decimal:
    amount = Decimal(str(value).strip().replace(",", "."))
    # NaN and Infinity parse but cannot be compared or saved.
    if not amount.is_finite():
        raise InvalidOperation(f"Non-finite amount: {value}")
    return amount


def _to_date(value: Any) -> dt.date | None:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    for fmt in DATE_FORMATS:
        try:
            return dt.datetime.strptime(str(value).strip(), fmt).date()
        except ValueError:
            continue
    return None


class RulesEngine:
    """Configurable validation rules engine.

    Applies field-level rules loaded from a YAML file, falling back to the
    built-in transaction rules when the file is missing or empty.

    Args:
        rules_path: Path to the validation rules YAML file.
    """

    def __init__(
        self, rules_path: Path = Path("configs/validation_rules.yaml")
    ) -> None:
        self.rules = self._load_rules(rules_path)
        self._validators: dict[str, Any] = {
            "required": self._validate_required,
            "choice": self._validate_choice,
            "positive_amount": self._validate_positive_amount,
            "amount_range": self._validate_amount_range,
            "max_decimals": self._validate_max_decimals,
            "date_format": self._validate_date,
            "not_future": self._validate_not_future,
            "max_length": self._validate_max_length,
        }

    def _load_rules(self, path: Path) -> dict:
        """Load validation rules from YAML file.

        Args:
            path: Path to the rules file.

        Returns:
            Dictionary of form-type-specific rules.
        """
        if path.exists():
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
                if data:
                    logger.info("Loaded validation rules from %s", path)
                    return data
        logger.debug("Using default validation rules")
        return self._default_rules()

    def _default_rules(self) -> dict:
        """Rules matching the transaction form's business constraints."""
        return {
            "transaction": {
                "type": [
                    {"type": "required"},
                    {"type": "choice", "choices": ["income", "expense"]},
                ],
                "amount": [
                    {"type": "required"},
                    {"type": "positive_amount"},
                    {"type": "amount_range", "min": 0, "max": "999999999.99"},
                    {"type": "max_decimals", "places": 2},
                ],
                "date": [
                    {"type": "required"},
                    {"type": "date_format"},
                    {"type": "not_future"},
                ],
                "description": [
                    {"type": "required"},
                    {"type": "max_length", "max": 500},
                ],
                "category": [{"type": "max_length", "max": 50}],
            },
        }

    def validate(
        self, fields: dict[str, Any], form_type: str = "transaction"
    ) -> ValidationReport:
        """Validate submitted fields against the rules for a form type.

        Args:
            fields: Field name-value pairs from the form.
            form_type: Rule set to apply.

        Returns:
            Validation report with one result per rule checked.
        """
        results: list[ValidationResult] = []
        warnings: list[str] = []

        form_rules = self.rules.get(form_type)
        if form_rules is None:
            warnings.append(f"No rules defined for form type: {form_type}")
            form_rules = {}

        for field_name, rules in form_rules.items():
            value = fields.get(field_name)

            for rule in rules:
                rule_type = rule.get("type")
                validator = self._validators.get(rule_type)

                if not validator:
                    warnings.append(f"Unknown rule type: {rule_type}")
                    continue

                results.append(validator(field_name, value, rule))

        all_valid = all(r.is_valid for r in results)
        logger.info(
            "Validation for %s: %s (%d checks)",
            form_type,
            "PASSED" if all_valid else "FAILED",
            len(results),
        )

        return ValidationReport(all_valid=all_valid, results=results, warnings=warnings)

    def _validate_required(
        self, field_name: str, value: Any, rule: dict
    ) -> ValidationResult:
        """Check that a field is present and not blank."""
        if value is not None and str(value).strip():
            return ValidationResult(field_name, True, "Required field present", "required")
        return ValidationResult(
            field_name, False, f"Required field missing: {field_name}", "required"
        )

    def _validate_choice(
        self, field_name: str, value: Any, rule: dict
    ) -> ValidationResult:
        """Check that a value is one of the allowed choices."""
        if value is None:
            return ValidationResult(field_name, True, "No value to validate", "choice")

        choices = rule.get("choices", [])
        if value in choices:
            return ValidationResult(field_name, True, "Allowed value", "choice")
        return ValidationResult(
            field_name,
            False,
            f"Value {value!r} not in {', '.join(map(str, choices))}",
            "choice",
        )

    def _validate_positive_amount(
        self, field_name: str, value: Any, rule: dict
    ) -> ValidationResult:
        """Check if a value is a positive monetary amount."""
        if value is None:
            return ValidationResult(
                field_name, True, "No value to validate", "positive_amount"
            )

        try:
            amount = _to_decimal(value)
        except InvalidOperation:
            return ValidationResult(
                field_name, False, f"Invalid amount format: {value}", "positive_amount"
            )
        if amount > 0:
            return ValidationResult(
                field_name, True, f"Valid positive amount: {amount}", "positive_amount"
            )
        return ValidationResult(
            field_name, False, f"Amount must be positive: {amount}", "positive_amount"
        )

    def _validate_amount_range(
        self, field_name: str, value: Any, rule: dict
    ) -> ValidationResult:
        """Check if an amount falls within a specified range."""
        if value is None:
            return ValidationResult(
                field_name, True, "No value to validate", "amount_range"
            )

        try:
            amount = _to_decimal(value)
            min_val = Decimal(str(rule.get("min", 0)))
            max_val = Decimal(str(rule.get("max", "999999999.99")))
        except InvalidOperation:
            return ValidationResult(
                field_name, False, f"Invalid amount: {value}", "amount_range"
            )

        if min_val <= amount <= max_val:
            return ValidationResult(
                field_name, True, "Amount in valid range", "amount_range"
            )
        return ValidationResult(
            field_name,
            False,
            f"Amount {amount} outside range [{min_val}, {max_val}]",
            "amount_range",
        )

    def _validate_max_decimals(
        self, field_name: str, value: Any, rule: dict
    ) -> ValidationResult:
        """Check that an amount has no more fractional digits than allowed."""
        if value is None:
            return ValidationResult(
                field_name, True, "No value to validate", "max_decimals"
            )

        places = int(rule.get("places", 2))
        try:
            exponent = _to_decimal(value).normalize().as_tuple().exponent
        except InvalidOperation:
            return ValidationResult(
                field_name, False, f"Invalid amount: {value}", "max_decimals"
            )

        # Trailing zeros are dropped by normalize(), so 45.900 counts as 45.9.
        if isinstance(exponent, int) and -exponent <= places:
            return ValidationResult(
                field_name, True, f"At most {places} decimal places", "max_decimals"
            )
        return ValidationResult(
            field_name,
            False,
            f"Amount must have at most {places} decimal places: {value}",
            "max_decimals",
        )

    def _validate_date(
        self, field_name: str, value: Any, rule: dict
    ) -> ValidationResult:
        """Check that a value is a date or a string in a supported format."""
        if value is None:
            return ValidationResult(
                field_name, True, "No value to validate", "date_format"
            )

        if _to_date(value) is not None:
            return ValidationResult(field_name, True, "Valid date", "date_format")
        return ValidationResult(
            field_name, False, f"Invalid date format: {value}", "date_format"
        )

    def _validate_not_future(
        self, field_name: str, value: Any, rule: dict
    ) -> ValidationResult:
        """Check that a date is not later than today."""
        parsed = _to_date(value) if value is not None else None
        if parsed is None:
            return ValidationResult(
                field_name, True, "No date to validate", "not_future"
            )

        if parsed <= dt.date.today():
            return ValidationResult(field_name, True, "Date not in the future", "not_future")
        return ValidationResult(
            field_name, False, f"Date cannot be in the future: {parsed}", "not_future"
        )

    def _validate_max_length(
        self, field_name: str, value: Any, rule: dict
    ) -> ValidationResult:
        """Check that a trimmed text value does not exceed a maximum length."""
        if value is None:
            return ValidationResult(
                field_name, True, "No value to validate", "max_length"
            )

        limit = int(rule.get("max", 0))
        length = len(str(value).strip())
        if length <= limit:
            return ValidationResult(field_name, True, "Length within limit", "max_length")
        return ValidationResult(
            field_name,
            False,
            f"Too long: {length} characters (maximum {limit})",
            "max_length",
        )
