"""Field presence and format checks for inbound customer and address records.

Validators only inspect; callers trim and normalize before persisting.
"""

import re
from typing import Any, Mapping, Optional

PHONE_SEPARATORS = re.compile(r"[+\-\s()]")
PHONE_PATTERN = re.compile(r"^[0-9]{6,15}$")
PIN_CODE_PATTERN = re.compile(r"^[0-9]{3,10}$")

CUSTOMER_FIELDS = ("first_name", "last_name", "phone_number")
ADDRESS_FIELDS = ("address_details", "city", "state", "pin_code")


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def normalize_phone_number(value: str) -> str:
    """Strip ``+``, ``-``, whitespace and parentheses from a phone number."""
    return PHONE_SEPARATORS.sub("", value)


def validate_customer(record: Mapping[str, Any]) -> Optional[str]:
    for field in CUSTOMER_FIELDS:
        if _is_blank(record.get(field)):
            return f"{field} is required"

    if not PHONE_PATTERN.match(normalize_phone_number(record["phone_number"])):
        return "phone_number looks invalid"
    return None


def validate_address(record: Mapping[str, Any]) -> Optional[str]:
    for field in ADDRESS_FIELDS:
        if _is_blank(record.get(field)):
            return f"{field} is required"

    if not PIN_CODE_PATTERN.match(record["pin_code"].strip()):
        return "pin_code looks invalid"
    return None


def normalize_customer(record: Mapping[str, Any]) -> dict:
    """Trimmed copy of a validated customer record, phone reduced to digits."""
    return {
        "first_name": record["first_name"].strip(),
        "last_name": record["last_name"].strip(),
        "phone_number": normalize_phone_number(record["phone_number"].strip()),
    }


def normalize_address(record: Mapping[str, Any]) -> dict:
    return {field: record[field].strip() for field in ADDRESS_FIELDS}
