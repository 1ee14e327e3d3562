"""
validation.py - Request validation chains for the product routes

Each route declares an ordered list of rules. A rule reads one field from one
request location ("params" or "body"), applies a predicate and, when the
predicate fails, contributes exactly one error entry. Every rule runs, so a
request with several problems gets all of them back in one 400 response:

    POST /api/products {}            -> 4 errors (name, price x3)
    PUT  /api/products/1 {}          -> 5 errors (name, price x3, availability)
    GET  /api/products/hola          -> 1 error  ("Invalid Id")

Routes use the rules through FastAPI dependencies:

    @router.get("/{id}")
    async def get_product(checked: ValidatedRequest = Depends(validate_request(ID_RULES))):
        ...
"""

import json
import math
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from fastapi import Request

from exceptions import RequestValidationFailed
from models import NAME_MAX_LENGTH

# Sentinel for "field not sent at all", distinct from an explicit null
MISSING = object()

# Ids are stored in a 32-bit integer column
MAX_PRODUCT_ID = 2_147_483_647

_POSITIVE_INT = re.compile(r"[1-9][0-9]*")
_NUMERIC = re.compile(r"[+-]?([0-9]*[.])?[0-9]+")


def is_positive_int(value: Any) -> bool:
    if not isinstance(value, str) or not _POSITIVE_INT.fullmatch(value):
        return False
    return int(value) <= MAX_PRODUCT_ID


def is_numeric(value: Any) -> bool:
    """True for finite JSON numbers and numeric strings. Booleans are not numbers."""
    if isinstance(value, bool):
        return False
    if isinstance(value, str):
        if _NUMERIC.fullmatch(value) is None:
            return False
        value = float(value)
    if isinstance(value, (int, float)):
        try:
            return math.isfinite(value)
        except OverflowError:
            return False
    return False


def is_present(value: Any) -> bool:
    return value is not MISSING and value is not None and value != ""


def is_positive_number(value: Any) -> bool:
    return is_numeric(value) and float(value) > 0


def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def fits_name_column(value: Any) -> bool:
    # Non-strings are reported by the empty-name rule
    return not isinstance(value, str) or len(value) <= NAME_MAX_LENGTH


def is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


@dataclass(frozen=True)
class Rule:
    """A single predicate over one request field."""

    location: str
    field: str
    check: Callable[[Any], bool]
    message: str

    def evaluate(self, sources: Dict[str, Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        """Return an error entry when the rule fails, None otherwise."""
        value = sources.get(self.location, {}).get(self.field, MISSING)
        if self.check(value):
            return None
        return {
            "type": "field",
            "value": None if value is MISSING else value,
            "msg": self.message,
            "path": self.field,
            "location": self.location,
        }


ID_RULE = Rule("params", "id", is_positive_int, "Invalid Id")

PRODUCT_BODY_RULES = [
    Rule("body", "name", is_non_empty_string, "Product name can not be empty"),
    Rule("body", "name", fits_name_column, f"Product name can not be longer than {NAME_MAX_LENGTH} characters"),
    Rule("body", "price", is_numeric, "Invalid value"),
    Rule("body", "price", is_present, "Product price can not be empty"),
    Rule("body", "price", is_positive_number, "The price can not be 0"),
]

AVAILABILITY_RULE = Rule("body", "availability", is_boolean, "Invalid availability value")

ID_RULES = [ID_RULE]
CREATE_PRODUCT_RULES = list(PRODUCT_BODY_RULES)
UPDATE_PRODUCT_RULES = [ID_RULE, *PRODUCT_BODY_RULES, AVAILABILITY_RULE]


def collect_errors(rules: Sequence[Rule], sources: Dict[str, Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Evaluate every rule, in order, without stopping at the first failure."""
    errors = []
    for rule in rules:
        error = rule.evaluate(sources)
        if error is not None:
            errors.append(error)
    return errors


@dataclass
class ValidatedRequest:
    """Request input that passed its validation chain."""

    params: Dict[str, Any] = field(default_factory=dict)
    body: Dict[str, Any] = field(default_factory=dict)

    @property
    def product_id(self) -> int:
        return int(self.params["id"])


async def read_json_body(request: Request) -> Dict[str, Any]:
    """Parse the body as a JSON object. Empty and non-object bodies read as {}."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        payload = json.loads(raw)
    except (ValueError, RecursionError):
        # RecursionError: valid JSON nested deeper than the decoder can follow
        raise RequestValidationFailed(
            [{"type": "body", "value": None, "msg": "Malformed JSON body", "path": None, "location": "body"}]
        )
    return payload if isinstance(payload, dict) else {}


def validate_request(rules: Sequence[Rule]):
    """Build a FastAPI dependency that runs `rules` against the request."""
    needs_body = any(rule.location == "body" for rule in rules)

    async def dependency(request: Request) -> ValidatedRequest:
        params = dict(request.path_params)
        body = await read_json_body(request) if needs_body else {}
        errors = collect_errors(rules, {"params": params, "body": body})
        if errors:
            raise RequestValidationFailed(errors)
        return ValidatedRequest(params=params, body=body)

    return dependency
