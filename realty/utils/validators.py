"""
Validation utilities for query parameters and multipart form fields.
Every failure is a ValidationError naming the offending field.
"""

import json
from typing import Any, List, Optional, Type, TypeVar
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import enum

from realty.utils.exceptions import ValidationError


EnumType = TypeVar("EnumType", bound=enum.Enum)

TWO_PLACES = Decimal("0.01")


def is_blank(value: Any) -> bool:
    """True for None and whitespace-only strings ("not supplied")."""
    return value is None or (isinstance(value, str) and not value.strip())


class ValidationUtils:
    """
    Parsers for text-typed input.
    Blank input returns None unless the field is required.
    """

    @staticmethod
    def validate_string(
        value: Any,
        field_name: str,
        max_length: Optional[int] = None,
        required: bool = True
    ) -> Optional[str]:
        """
        Validate and strip a text value.

        Args:
            value: Value to validate
            field_name: Name of the field for error messages
            max_length: Maximum string length
            required: Whether a blank value is an error

        Returns:
            Stripped string, or None when blank and not required

        Raises:
            ValidationError: If the string is missing or too long
        """
        if is_blank(value):
            if required:
                raise ValidationError(f"{field_name} is required", field=field_name)
            return None

        str_value = str(value).strip()

        if max_length is not None and len(str_value) > max_length:
            raise ValidationError(
                f"{field_name} cannot exceed {max_length} characters",
                field=field_name
            )

        return str_value

    @staticmethod
    def parse_non_negative_int(
        value: Any,
        field_name: str,
        required: bool = False,
        max_value: Optional[int] = None
    ) -> Optional[int]:
        """
        Parse a non-negative integer from text.

        Raises:
            ValidationError: If the value is not a whole number, is negative
                or exceeds max_value
        """
        if is_blank(value):
            if required:
                raise ValidationError(f"{field_name} is required", field=field_name)
            return None

        if isinstance(value, bool):
            raise ValidationError(f"{field_name} must be a valid integer", field=field_name)

        try:
            int_value = int(str(value).strip())
        except (ValueError, TypeError):
            raise ValidationError(f"{field_name} must be a valid integer", field=field_name)

        if int_value < 0:
            raise ValidationError(f"{field_name} cannot be negative", field=field_name)

        if max_value is not None and int_value > max_value:
            raise ValidationError(f"{field_name} cannot exceed {max_value}", field=field_name)

        return int_value

    @staticmethod
    def parse_non_negative_decimal(
        value: Any,
        field_name: str,
        required: bool = False,
        quantize: bool = True,
        max_value: Optional[Decimal] = None
    ) -> Optional[Decimal]:
        """
        Parse a non-negative decimal from text.

        Args:
            value: Raw value (string, int, float or Decimal)
            field_name: Name of the field for error messages
            required: Whether a blank value is an error
            quantize: Round half-up to 2 places (stored amounts); filter
                bounds pass False so they compare exactly
            max_value: Inclusive upper bound, checked after rounding

        Returns:
            Decimal, or None when blank

        Raises:
            ValidationError: If the value is not a finite non-negative number
                or exceeds max_value
        """
        if is_blank(value):
            if required:
                raise ValidationError(f"{field_name} is required", field=field_name)
            return None

        try:
            decimal_value = Decimal(str(value).strip())
        except (InvalidOperation, ValueError, TypeError):
            raise ValidationError(f"{field_name} must be a valid number", field=field_name)

        if not decimal_value.is_finite():
            raise ValidationError(f"{field_name} must be a valid number", field=field_name)

        if decimal_value < 0:
            raise ValidationError(f"{field_name} cannot be negative", field=field_name)

        if not quantize:
            return decimal_value

        try:
            rounded = decimal_value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            raise ValidationError(f"{field_name} is too large", field=field_name)

        if max_value is not None and rounded > max_value:
            raise ValidationError(f"{field_name} cannot exceed {max_value}", field=field_name)

        return rounded

    @staticmethod
    def parse_enum(
        value: Any,
        enum_cls: Type[EnumType],
        field_name: str,
        required: bool = False
    ) -> Optional[EnumType]:
        """
        Parse an enumerated value (case-insensitive).

        Raises:
            ValidationError: If the value is not one of the enum's values
        """
        if is_blank(value):
            if required:
                raise ValidationError(f"{field_name} is required", field=field_name)
            return None

        if isinstance(value, enum_cls):
            return value

        normalized = str(value).strip().lower()
        for member in enum_cls:
            if member.value == normalized:
                return member

        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(
            f"Invalid {field_name} '{value}'. Allowed values: {allowed}",
            field=field_name
        )

    @staticmethod
    def parse_string_list(value: Any, field_name: str) -> Optional[List[str]]:
        """
        Parse a JSON array of strings sent as a form field.

        Returns:
            List of strings, or None when blank

        Raises:
            ValidationError: If the value is not a JSON array of strings
        """
        if is_blank(value):
            return None

        if isinstance(value, list):
            items = value
        else:
            try:
                items = json.loads(value)
            except (TypeError, ValueError):
                raise ValidationError(f"{field_name} must be a JSON array", field=field_name)

        if not isinstance(items, list) or not all(isinstance(item, str) for item in items):
            raise ValidationError(f"{field_name} must be a JSON array of strings", field=field_name)

        return items
