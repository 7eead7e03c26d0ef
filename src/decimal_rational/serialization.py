"""
serialization.py — JSON collaborator for DecimalRational

================================================================================
CONTRACT
================================================================================

A DecimalRational is serialized as exactly its three canonical fields:

    {"significand": int, "denominator": int, "exponent": int}

Key order is part of the contract and is preserved on output.
Values are NEVER serialized as floats.

Reconstruction always goes through DecimalRational.create(), so a payload
that is not in canonical form is normalized on load, and a zero denominator
raises ZeroDivisionError exactly as create() does.

================================================================================
USAGE
================================================================================

    from decimal_rational import DecimalRational
    from decimal_rational.serialization import to_json, from_json

    text = to_json(DecimalRational.create(1, 2, 3))
    # '{"significand":1,"denominator":3,"exponent":2}'
    assert from_json(text) == DecimalRational.create(1, 2, 3)

================================================================================
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List
import json

from .core import DecimalRational


# Compact output: the payload is a data contract, not a display format
_SEPARATORS = (",", ":")


def _as_mapping(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise TypeError(
            f"Expected a JSON object for DecimalRational, got {type(payload).__name__}"
        )
    return payload


def to_json(value: DecimalRational) -> str:
    """Serialize a single value as a JSON object."""
    return json.dumps(value.to_dict(), separators=_SEPARATORS)


def from_json(text: str) -> DecimalRational:
    """
    Deserialize a single value.

    Raises:
        json.JSONDecodeError: if text is not valid JSON
        TypeError: if the payload is not a JSON object or a field is not an int
        KeyError: if a field is missing
        ValueError: if the object carries unknown fields
        ZeroDivisionError: if denominator is 0
    """
    return DecimalRational.from_dict(_as_mapping(json.loads(text)))


def dumps_many(values: Iterable[DecimalRational]) -> str:
    """Serialize a sequence of values as a JSON array of objects."""
    return json.dumps([v.to_dict() for v in values], separators=_SEPARATORS)


def loads_many(text: str) -> List[DecimalRational]:
    """
    Deserialize a JSON array produced by dumps_many().

    Same error policy as from_json(); a top-level payload that is not an
    array raises TypeError.
    """
    payload = json.loads(text)
    if not isinstance(payload, list):
        raise TypeError(f"Expected a JSON array, got {type(payload).__name__}")
    return [DecimalRational.from_dict(_as_mapping(item)) for item in payload]
