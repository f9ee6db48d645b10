"""Shape checks for the model's receipt JSON.

Checks run in a fixed order and the first violation is reported; nothing is
aggregated. Each check is a ``(predicate, message)`` pair where the predicate
returns True when the payload is acceptable.
"""
import logging
import math
from typing import Any, Callable

from receipt_extractor.errors import InvalidInputError
from receipt_extractor.schemas import AIReceiptResponse

logger = logging.getLogger("receipt_extractor")

REQUIRED_FIELDS = ("date", "currency", "vendor_name", "receipt_items", "tax", "total")


def is_number(value: Any) -> bool:
    # bool is an int subclass but JSON true/false is not a number. Overflowing
    # literals such as 1e400 parse to inf and are rejected too.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return isinstance(value, int) or math.isfinite(value)


def _is_valid_item(item: Any) -> bool:
    if not isinstance(item, dict):
        return False
    name = item.get("item_name")
    return isinstance(name, str) and bool(name) and is_number(item.get("item_cost"))


def _has_field(field: str) -> Callable[[dict], bool]:
    return lambda data: field in data


Check = tuple[Callable[[Any], bool], str]

CHECKS: list[Check] = [
    (lambda data: isinstance(data, dict), "Invalid response from AI model"),
    *[(_has_field(field), f"Missing required field: {field}") for field in REQUIRED_FIELDS],
    (lambda data: isinstance(data["receipt_items"], list), "receipt_items must be an array"),
    (lambda data: len(data["receipt_items"]) > 0, "receipt_items cannot be empty"),
    (lambda data: all(_is_valid_item(item) for item in data["receipt_items"]), "Invalid receipt item format"),
    (
        lambda data: isinstance(data["currency"], str) and len(data["currency"]) == 3,
        "Currency must be a 3-character code",
    ),
    (lambda data: is_number(data["tax"]) and is_number(data["total"]), "Tax and total must be numbers"),
]


def _as_text(value: Any) -> str | None:
    # Presence is all that is checked for date and vendor_name; null is left for the
    # NOT NULL columns to reject.
    return None if value is None else str(value)


def find_violation(data: Any) -> str | None:
    """Return the message of the first failing check, or None if all pass."""
    for predicate, message in CHECKS:
        if not predicate(data):
            return message
    return None


def verify_ai_response(data: Any) -> AIReceiptResponse:
    violation = find_violation(data)
    if violation is not None:
        logger.warning("AI response rejected", extra={"extra_data": {"reason": violation}})
        raise InvalidInputError(violation)

    return AIReceiptResponse(
        date=_as_text(data["date"]),
        currency=data["currency"],
        vendor_name=_as_text(data["vendor_name"]),
        receipt_items=[
            {"item_name": item["item_name"], "item_cost": item["item_cost"]}
            for item in data["receipt_items"]
        ],
        tax=data["tax"],
        total=data["total"],
    )
