"""Validation of admin form input before it reaches a store."""

import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import TypeVar

from service_billing.exceptions import ValidationError
from service_billing.models.fiscal import Company

CENTS = Decimal("0.01")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# "1.500" or "12.345.678": dots grouping thousands, no decimal part
THOUSANDS_PATTERN = re.compile(r"^\d{1,3}(\.\d{3})+$")

E = TypeVar("E", bound=Enum)


def _digits(value: str) -> str:
    return re.sub(r"\D", "", value or "")


def parse_amount(value: str | int | float | Decimal, field: str = "amount") -> Decimal:
    """Parse a currency amount typed in an admin form.

    Accepts plain numbers (``"1234.56"``) and Brazilian notation
    (``"R$ 1.234,56"``, ``"R$ 1.500"``). The result is rounded to cents and
    must not be negative.
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError({field: "amount is required"})
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip().replace("R$", "").replace(" ", "")
        if "," in text:
            # Brazilian notation: dots group thousands, comma marks cents
            text = text.replace(".", "").replace(",", ".")
        elif THOUSANDS_PATTERN.match(text):
            text = text.replace(".", "")
        try:
            amount = Decimal(text)
        except InvalidOperation:
            raise ValidationError({field: f"invalid amount {value!r}"}) from None
    else:
        raise ValidationError({field: f"invalid amount {value!r}"})

    if not amount.is_finite():
        raise ValidationError({field: f"invalid amount {value!r}"})
    if amount < 0:
        raise ValidationError({field: "amount must not be negative"})
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_date(value: str | date, field: str = "date") -> date:
    """Parse an ISO date or timestamp (``2024-01-15`` or ``2024-01-15T10:00:00Z``)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValidationError({field: f"invalid date {value!r}"})
    text = value.strip()
    try:
        if "T" in text:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        return date.fromisoformat(text)
    except ValueError:
        raise ValidationError({field: f"invalid date {value!r}"}) from None


def parse_choice(enum_cls: type[E], value: E | str, field: str) -> E:
    """Coerce form input to a member of ``enum_cls``."""
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError({field: f"invalid value {value!r}, expected one of {allowed}"}) from None


def validate_cnpj(cnpj: str) -> bool:
    """Check a CNPJ's length and verification digits."""
    digits = _digits(cnpj)
    if len(digits) != 14 or digits == digits[0] * 14:
        return False

    def check_digit(base: str) -> str:
        weights = list(range(len(base) - 7, 1, -1)) + list(range(9, 1, -1))
        total = sum(int(d) * w for d, w in zip(base, weights))
        remainder = total % 11
        return "0" if remainder < 2 else str(11 - remainder)

    first = check_digit(digits[:12])
    second = check_digit(digits[:12] + first)
    return digits[12:] == first + second


def company_errors(company: Company) -> dict[str, str]:
    """Collect every problem with an issuing company's registration data."""
    errors: dict[str, str] = {}

    if not validate_cnpj(company.cnpj):
        errors["cnpj"] = "invalid CNPJ"
    if not company.legal_name:
        errors["legal_name"] = "legal name is required"
    if not company.email or not EMAIL_PATTERN.match(company.email):
        errors["email"] = "invalid e-mail"
    if len(_digits(company.address.postal_code)) != 8:
        errors["postal_code"] = "invalid CEP"
    if not company.municipal_service_code:
        errors["municipal_service_code"] = "municipal service code is required"
    if company.iss_rate < 0 or company.iss_rate > 100:
        errors["iss_rate"] = "ISS rate must be between 0 and 100"
    if not company.service_description:
        errors["service_description"] = "service description is required"

    return errors


def validate_company(company: Company) -> None:
    """Raise ``ValidationError`` listing every problem with ``company``."""
    errors = company_errors(company)
    if errors:
        raise ValidationError(errors)
