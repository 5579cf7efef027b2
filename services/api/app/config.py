"""Environment-driven settings.

Values are read at the point of use so tests can flip them with monkeypatch.setenv.
"""

from __future__ import annotations

import os

_TRUTHY = {"1", "true", "yes", "y"}
_FALSY = {"0", "false", "no", "n"}


def env_flag(name: str, *, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default

    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"Unknown {name}={raw!r}. Expected true or false.")


def env_choice(name: str, *, default: str, choices: tuple[str, ...]) -> str:
    value = os.getenv(name, default).strip().lower() or default
    if value not in choices:
        expected = " or ".join(choices)
        raise ValueError(f"Unknown {name}={value!r}. Expected {expected}.")
    return value


def offer_discount_floor() -> str:
    """`none` keeps discounted amounts unclamped, `zero` clamps them at 0."""

    return env_choice("DAWA_OFFER_DISCOUNT_FLOOR", default="none", choices=("none", "zero"))


def allow_confirmed_transaction_reuse() -> bool:
    return env_flag("DAWA_ALLOW_CONFIRMED_TRANSACTION_REUSE", default=True)


def log_level() -> str:
    return os.getenv("DAWA_LOG_LEVEL", "INFO").strip().upper() or "INFO"
