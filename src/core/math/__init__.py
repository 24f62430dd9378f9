"""
Core math modules

Рабочий decimal-домен, trait числовых представлений и rational-значения.
"""

# Numerical Safeguards (рабочий decimal-домен)
from src.core.math.numerical_safeguards import (
    # Constants
    DECIMAL_MAX_VALUE,
    DEFAULT_APPROXIMATION_EPSILON,
    DISPLAY_FRACTION_DIGITS,
    WORKING_CONTEXT,
    WORKING_PRECISION,
    # Conversion
    to_decimal,
    # Safe division & rounding
    remainder,
    round_half_even,
    safe_divide,
    truncate,
    # GCD / LCD
    gcd,
    lcd,
    # Formatting
    format_fixed,
    format_plain,
    # Hash arithmetic
    wrap_int32,
)

# Numeric Representations (trait T)
from src.core.math.representations import (
    BYTE,
    DECIMAL,
    FLOAT64,
    INT16,
    INT32,
    INT64,
    SBYTE,
    UINT16,
    UINT32,
    UINT64,
    DecimalRepresentation,
    Float64Representation,
    IntegerRepresentation,
    NumericRepresentation,
    representation_by_name,
    resolve_parser,
    resolve_try_parser,
)

# Rational values
from src.core.math.rational import (
    HASH_MULTIPLIER,
    HASH_SEED,
    RATIONAL_DELIMITER,
    RationalValue,
    SRational,
    URational,
)

__all__ = [
    # Numerical Safeguards — Constants
    "DECIMAL_MAX_VALUE",
    "DEFAULT_APPROXIMATION_EPSILON",
    "DISPLAY_FRACTION_DIGITS",
    "WORKING_CONTEXT",
    "WORKING_PRECISION",
    # Numerical Safeguards — Functions
    "to_decimal",
    "remainder",
    "round_half_even",
    "safe_divide",
    "truncate",
    "gcd",
    "lcd",
    "format_fixed",
    "format_plain",
    "wrap_int32",
    # Representations — Instances
    "BYTE",
    "DECIMAL",
    "FLOAT64",
    "INT16",
    "INT32",
    "INT64",
    "SBYTE",
    "UINT16",
    "UINT32",
    "UINT64",
    # Representations — Types
    "DecimalRepresentation",
    "Float64Representation",
    "IntegerRepresentation",
    "NumericRepresentation",
    # Representations — Functions
    "representation_by_name",
    "resolve_parser",
    "resolve_try_parser",
    # Rational — Constants
    "HASH_MULTIPLIER",
    "HASH_SEED",
    "RATIONAL_DELIMITER",
    # Rational — Types
    "RationalValue",
    "SRational",
    "URational",
]
