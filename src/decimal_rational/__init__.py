"""
decimal_rational — Exact Decimal-Rational Domain Primitive

An immutable value type representing significand / denominator × 10^exponent,
always kept in canonical reduced form. Addition, subtraction, multiplication
and division are exact: no operation ever rounds.

================================================================================
QUICK START
================================================================================

Basic usage:

    from decimal_rational import DecimalRational, RoundingMode

    # 2.30 + 1.20 == 3.50 (exact, no float involved)
    a = DecimalRational.create(230, -2)
    b = DecimalRational.create(120, -2)
    assert a + b == DecimalRational.create(350, -2)

    # Fractions stay exact too: 3/8 + 1/3 == 17/24
    assert (
        DecimalRational.create(3, 0, 8) + DecimalRational.create(1, 0, 3)
        == DecimalRational.create(17, 0, 24)
    )

    # Float input is rounded ONCE, at construction
    x = DecimalRational.from_number(1234.2345, 3, RoundingMode.HALF_DOWN)
    assert x == DecimalRational.create(1234234, -3)

Serialization:

    from decimal_rational.serialization import to_json, from_json

    DecimalRational.create(1, 2, 3).to_dict()
    # {'significand': 1, 'denominator': 3, 'exponent': 2}

================================================================================
"""

# Core value type
from .core import (
    DecimalRational,
    RoundingMode,
    normalize,
)

# JSON collaborator
from .serialization import (
    to_json,
    from_json,
    dumps_many,
    loads_many,
)

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    # Core
    "DecimalRational",
    "RoundingMode",
    "normalize",
    # Serialization
    "to_json",
    "from_json",
    "dumps_many",
    "loads_many",
]
