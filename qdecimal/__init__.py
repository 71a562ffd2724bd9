from __future__ import annotations

from .coefficient import Big, Coefficient, Exact
from .config import MAX_PREC, DecimalConfig, get_config, load_config
from .decimal import DEFAULT_PREC, ONE, ZERO, Decimal, maximum, minimum
from .errors import (
    ArithmeticOverflowError,
    ArithmeticUnderflowError,
    DecimalError,
    DivideByZeroError,
    EmptyInputError,
    ExponentTooLargeError,
    InputTooLongError,
    IntPartOverflowError,
    InvalidBinaryDataError,
    InvalidBufferError,
    InvalidFormatError,
    NegativeValueError,
    PrecisionOutOfRangeError,
    SqrtNegativeError,
    ValueOverflowError,
    ZeroPowNegativeError,
    must,
)
from .uint128 import Uint128
from .uint256 import Uint256

# polars helpers
from .frame import (
    decimal_series,
    decimal_sum,
    format_words_dataframe,
    lit,
    print_words_dataframe,
    series_to_decimals,
    series_to_words,
    word_series,
)

__version__ = "0.1.0"

__all__ = [
    "Decimal",
    "ZERO",
    "ONE",
    "DEFAULT_PREC",
    "MAX_PREC",
    "maximum",
    "minimum",
    "Uint128",
    "Uint256",
    "Coefficient",
    "Exact",
    "Big",
    "DecimalConfig",
    "get_config",
    "load_config",
    "must",
    "DecimalError",
    "ArithmeticOverflowError",
    "ArithmeticUnderflowError",
    "DivideByZeroError",
    "NegativeValueError",
    "ValueOverflowError",
    "InvalidFormatError",
    "EmptyInputError",
    "InputTooLongError",
    "PrecisionOutOfRangeError",
    "ZeroPowNegativeError",
    "ExponentTooLargeError",
    "IntPartOverflowError",
    "InvalidBinaryDataError",
    "InvalidBufferError",
    "SqrtNegativeError",
    "lit",
    "decimal_series",
    "series_to_decimals",
    "decimal_sum",
    "word_series",
    "series_to_words",
    "format_words_dataframe",
    "print_words_dataframe",
]
