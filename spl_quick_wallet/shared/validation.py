"""Input validation utilities for token amounts and addresses."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from solders.pubkey import Pubkey


@dataclass
class ValidationResult:
    is_valid: bool
    error_message: str | None = None
    normalized_value: Any = None


class AmountValidator:
    # SPL Token amounts are u64.
    MAX_AMOUNT = 18_446_744_073_709_551_615

    @staticmethod
    def parse_human_amount(value: Any) -> ValidationResult:
        if isinstance(value, Decimal):
            value = str(value)
        if value is None or not str(value).strip():
            return ValidationResult(
                is_valid=False,
                error_message="Amount is required",
            )

        raw_amount = str(value).strip().replace(",", "").replace(" ", "")

        if raw_amount.startswith("-") or raw_amount.startswith("+"):
            return ValidationResult(
                is_valid=False,
                error_message="Amount must be a positive number",
            )

        try:
            amount_decimal = Decimal(raw_amount)
        except (InvalidOperation, ValueError):
            return ValidationResult(
                is_valid=False,
                error_message="Amount must be a valid number",
            )

        if not amount_decimal.is_finite():
            return ValidationResult(
                is_valid=False,
                error_message="Invalid numeric format (special value detected)",
            )

        if amount_decimal == 0:
            return ValidationResult(
                is_valid=False,
                error_message="Amount must be greater than zero",
            )

        return ValidationResult(
            is_valid=True,
            normalized_value=amount_decimal,
        )

    @staticmethod
    def validate_decimal_places(amount: Decimal, decimals: int) -> ValidationResult:
        exponent = amount.as_tuple().exponent
        if not isinstance(exponent, int):
            return ValidationResult(
                is_valid=False,
                error_message="Invalid numeric format",
            )

        decimal_places = max(0, -exponent)
        if decimal_places > decimals:
            if decimals == 0:
                return ValidationResult(
                    is_valid=False,
                    error_message="This token does not support decimal amounts (decimals: 0)",
                )
            return ValidationResult(
                is_valid=False,
                error_message=f"Too many decimal places. Maximum {decimals} allowed for this token",
            )

        return ValidationResult(is_valid=True)

    @staticmethod
    def convert_to_base_units(amount: Decimal, decimals: int) -> ValidationResult:
        try:
            scale = Decimal(10) ** decimals
            base_units = int(amount * scale)
        except (TypeError, ValueError, OverflowError, InvalidOperation):
            return ValidationResult(
                is_valid=False,
                error_message="Failed to convert amount to base units",
            )

        if base_units <= 0:
            return ValidationResult(
                is_valid=False,
                error_message="Amount must be greater than zero",
            )

        if base_units > AmountValidator.MAX_AMOUNT:
            return ValidationResult(
                is_valid=False,
                error_message="Amount exceeds maximum allowed value",
            )

        return ValidationResult(
            is_valid=True,
            normalized_value=base_units,
        )

    @classmethod
    def validate_full(cls, value: Any, decimals: int) -> ValidationResult:
        """Parse a user-entered amount and scale it to base units."""
        parse_result = cls.parse_human_amount(value)
        if not parse_result.is_valid:
            return parse_result

        amount = parse_result.normalized_value
        places_result = cls.validate_decimal_places(amount, decimals)
        if not places_result.is_valid:
            return places_result

        return cls.convert_to_base_units(amount, decimals)


def from_base_units(amount: int, decimals: int) -> Decimal:
    return Decimal(amount) / (Decimal(10) ** decimals)


class AddressValidator:
    @staticmethod
    def validate(address: Any, field_name: str = "Address") -> ValidationResult:
        if address is None or not str(address).strip():
            return ValidationResult(
                is_valid=False,
                error_message=f"{field_name} is required",
            )

        normalized = str(address).strip()
        try:
            pubkey = Pubkey.from_string(normalized)
        except ValueError:
            return ValidationResult(
                is_valid=False,
                error_message=f"Invalid {field_name.lower()}: {normalized}",
            )

        return ValidationResult(is_valid=True, normalized_value=str(pubkey))

    @staticmethod
    def is_valid(address: Any) -> bool:
        return AddressValidator.validate(address).is_valid
