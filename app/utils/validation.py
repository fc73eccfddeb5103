"""
Validation utilities
"""
import re
from decimal import Decimal, InvalidOperation


MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
COUNTRY_PATTERN = re.compile(r"^[A-Z]{2}$")
# Min 8 chars, 1 upper, 1 lower, 1 digit
STRONG_PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)[a-zA-Z\d@$!%*?&]{8,}$")

MAX_AMOUNT = Decimal("999999999.99")


def is_valid_month(value: str) -> bool:
    """
    Check a budget month key

    Example:
        >>> is_valid_month("2024-05")
        True
        >>> is_valid_month("2024-13")
        False
    """
    return bool(value) and bool(MONTH_PATTERN.match(value))


def validate_email(value: str) -> str:
    """
    Normalize and validate an email address

    Raises:
        ValueError: if the address is malformed
    """
    value = value.strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email format")
    return value


def validate_name(value: str, max_length: int = 50) -> str:
    """Strip and require 2..max_length characters"""
    value = value.strip()
    if not 2 <= len(value) <= max_length:
        raise ValueError(f"Name must be between 2 and {max_length} characters long")
    return value


def validate_description(value: str | None) -> str | None:
    if value is None:
        return value
    value = value.strip()
    if len(value) > 500:
        raise ValueError("Description must not exceed 500 characters")
    return value


def validate_country(value: str) -> str:
    """Two-letter country code, stored upper-case"""
    value = value.strip().upper()
    if not COUNTRY_PATTERN.match(value):
        raise ValueError("Country must be a two-letter code")
    return value


def validate_strong_password(value: str) -> str:
    if not STRONG_PASSWORD_PATTERN.match(value):
        raise ValueError(
            "Password must contain at least 8 characters, 1 uppercase letter, "
            "1 lowercase letter, and 1 number"
        )
    return value


def validate_money(value, allow_zero: bool = False) -> Decimal:
    """
    Validate a money amount: positive (or zero), at most 2 decimal places

    Raises:
        ValueError: if validation fails

    Example:
        >>> validate_money("100.50")
        Decimal("100.50")
        >>> validate_money("100.505")
        ValueError: Maximum 2 decimal places
    """
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValueError("Invalid amount")

    if not amount.is_finite():
        raise ValueError("Invalid amount")
    if amount < 0 or (amount == 0 and not allow_zero):
        raise ValueError("Amount must be zero or positive" if allow_zero else "Amount must be a positive number")
    if amount > MAX_AMOUNT:
        raise ValueError("Amount must not exceed 999,999,999.99")
    if amount.as_tuple().exponent < -2:
        raise ValueError("Maximum 2 decimal places")
    return amount
