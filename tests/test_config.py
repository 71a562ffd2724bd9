import dataclasses

import pytest

import qdecimal
from qdecimal import (
    DEFAULT_PREC,
    MAX_PREC,
    ArithmeticOverflowError,
    ArithmeticUnderflowError,
    DecimalConfig,
    DecimalError,
    DivideByZeroError,
    EmptyInputError,
    InvalidBufferError,
    InvalidFormatError,
    NegativeValueError,
    PrecisionOutOfRangeError,
    SqrtNegativeError,
    Uint128,
    ZeroPowNegativeError,
    get_config,
    load_config,
    must,
)
from qdecimal.config import ENV_DEFAULT_PREC, ENV_MAX_STR_LEN


def test_defaults_without_environment():
    assert load_config({}) == DecimalConfig(default_prec=19, max_str_len=200)
    assert MAX_PREC == 19


def test_environment_overrides():
    cfg = load_config({ENV_DEFAULT_PREC: "6", ENV_MAX_STR_LEN: "64"})
    assert cfg.default_prec == 6
    assert cfg.max_str_len == 64
    assert load_config({ENV_DEFAULT_PREC: "  "}).default_prec == 19


@pytest.mark.parametrize("raw", ["0", "20", "-3"])
def test_invalid_precision_from_environment(raw):
    with pytest.raises(PrecisionOutOfRangeError):
        load_config({ENV_DEFAULT_PREC: raw})


def test_invalid_values_raise():
    with pytest.raises(ValueError):
        load_config({ENV_DEFAULT_PREC: "six"})
    with pytest.raises(ValueError):
        load_config({ENV_MAX_STR_LEN: "300"})


def test_config_is_frozen_and_captured_once():
    cfg = get_config()
    assert get_config() is cfg
    assert cfg.default_prec == DEFAULT_PREC
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.default_prec = 5


def test_error_hierarchy_matches_builtins():
    assert issubclass(ArithmeticOverflowError, OverflowError)
    assert issubclass(ArithmeticUnderflowError, ArithmeticError)
    assert issubclass(DivideByZeroError, ZeroDivisionError)
    assert issubclass(ZeroPowNegativeError, ZeroDivisionError)
    assert issubclass(NegativeValueError, ValueError)
    assert issubclass(SqrtNegativeError, NegativeValueError)
    assert issubclass(EmptyInputError, InvalidFormatError)
    assert issubclass(InvalidBufferError, ValueError)
    for exc in (ArithmeticOverflowError, EmptyInputError, PrecisionOutOfRangeError):
        assert issubclass(exc, DecimalError)


def test_must_turns_errors_into_assertions():
    assert must(Uint128.from_int, 5) == Uint128(5)
    with pytest.raises(AssertionError) as info:
        must(Uint128.from_int, -1)
    assert isinstance(info.value.__cause__, NegativeValueError)


def test_public_names_exist():
    for name in qdecimal.__all__:
        assert hasattr(qdecimal, name), name
