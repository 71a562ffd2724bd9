"""Process-wide decimal configuration, captured once.

Order of resolution: explicit ``DecimalConfig`` passed by the caller ->
env ``QDECIMAL_DEFAULT_PREC`` / ``QDECIMAL_MAX_STR_LEN`` -> built-in defaults.

``get_config()`` reads the environment on first use and never again, so the
value every ``Decimal`` sees is fixed for the life of the process. Changing
the variables after a decimal has been created is unsupported.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import PrecisionOutOfRangeError

logger = logging.getLogger(__name__)

# maximum number of digits after the decimal point
MAX_PREC = 19

# 200 so the string length fits in one byte of the binary encoding
DEFAULT_MAX_STR_LEN = 200

ENV_DEFAULT_PREC = "QDECIMAL_DEFAULT_PREC"
ENV_MAX_STR_LEN = "QDECIMAL_MAX_STR_LEN"


@dataclass(frozen=True)
class DecimalConfig:
    default_prec: int = MAX_PREC
    max_str_len: int = DEFAULT_MAX_STR_LEN

    def __post_init__(self) -> None:
        if not 0 < self.default_prec <= MAX_PREC:
            raise PrecisionOutOfRangeError(
                f"default precision must be in 1..{MAX_PREC}, got {self.default_prec}"
            )
        if not 0 < self.max_str_len <= 255:
            raise ValueError(f"max_str_len must be in 1..255, got {self.max_str_len}")


def _int_from_env(env: Mapping[str, str], name: str) -> Optional[int]:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_config(env: Optional[Mapping[str, str]] = None) -> DecimalConfig:
    """Build a :class:`DecimalConfig` from environment variables."""
    if env is None:
        env = os.environ

    kwargs = {}
    prec = _int_from_env(env, ENV_DEFAULT_PREC)
    if prec is not None:
        kwargs["default_prec"] = prec
    max_len = _int_from_env(env, ENV_MAX_STR_LEN)
    if max_len is not None:
        kwargs["max_str_len"] = max_len

    config = DecimalConfig(**kwargs)
    if kwargs:
        logger.debug("decimal config from environment: %s", config)
    return config


_config: Optional[DecimalConfig] = None


def get_config() -> DecimalConfig:
    """Return the process-wide configuration, loading it on first call."""
    global _config
    if _config is None:
        _config = load_config()
    return _config
