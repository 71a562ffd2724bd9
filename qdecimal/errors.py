"""Exception types raised by the qdecimal engine.

Every error kind derives from :class:`DecimalError` and from the closest
builtin exception, so ``except ZeroDivisionError`` or ``except ValueError``
keep working for callers that do not know about this package.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

T = TypeVar("T")


class DecimalError(ArithmeticError):
    """Base class for all qdecimal errors."""


class ArithmeticOverflowError(DecimalError, OverflowError):
    """A checked operation produced a result that does not fit the word."""


class ArithmeticUnderflowError(DecimalError):
    """A checked unsigned subtraction went below zero."""


class DivideByZeroError(DecimalError, ZeroDivisionError):
    pass


class NegativeValueError(DecimalError, ValueError):
    """An unsigned type was given a negative value."""


class ValueOverflowError(DecimalError, OverflowError):
    """A value's magnitude exceeds the target width."""


class InvalidFormatError(DecimalError, ValueError):
    pass


class EmptyInputError(InvalidFormatError):
    pass


class InputTooLongError(InvalidFormatError):
    pass


class PrecisionOutOfRangeError(DecimalError, ValueError):
    pass


class ZeroPowNegativeError(DecimalError, ZeroDivisionError):
    pass


class ExponentTooLargeError(DecimalError, OverflowError):
    pass


class IntPartOverflowError(DecimalError, OverflowError):
    pass


class InvalidBinaryDataError(DecimalError, ValueError):
    pass


class InvalidBufferError(InvalidBinaryDataError):
    """A byte buffer is too short for the fixed-width layout."""


class SqrtNegativeError(NegativeValueError):
    pass


def must(fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Call ``fn`` and treat any :class:`DecimalError` as a programming error.

    The ``must_*`` helpers throughout the package are built on this: callers
    that have already established the preconditions get the plain value back,
    and a violated precondition surfaces as an ``AssertionError`` chained to
    the original error.
    """
    try:
        return fn(*args, **kwargs)
    except DecimalError as exc:
        raise AssertionError(f"{getattr(fn, '__qualname__', fn)}: {exc}") from exc
