"""Registry of channels gated behind a passcode.

The set is fixed for the lifetime of the process: it is read once from
configuration at import time and never mutated afterwards.
"""

from decimal import Decimal, InvalidOperation

from btv.app_config import get_app_environ_config

DEFAULT_PROTECTED_CHANNEL_KEYS = ("23", "24", "25", "26", "27", "28", "29")

# Exponent forms like "1e5000" are compared verbatim instead of expanded
_MAX_KEY_DIGITS = 18


def normalize_channel_key(channel_id_or_key: object) -> str:
    """Return the canonical string form of a channel identifier.

    `23`, `"23"`, `" 23 "` and `23.0` all map to `"23"`. Non-numeric values are
    returned as their stripped string form.
    """
    if isinstance(channel_id_or_key, bool):
        return str(channel_id_or_key)

    raw = str(channel_id_or_key).strip()
    try:
        number = Decimal(raw)
    except InvalidOperation:
        return raw

    if not number.is_finite() or number.adjusted() >= _MAX_KEY_DIGITS:
        return raw
    if number != number.to_integral_value():
        return raw
    return str(int(number))


def _load_protected_keys() -> tuple[str, ...]:
    configured = get_app_environ_config().PROTECTED_CHANNEL_KEYS
    if not configured:
        return DEFAULT_PROTECTED_CHANNEL_KEYS
    return tuple(dict.fromkeys(normalize_channel_key(key) for key in configured))


PROTECTED_CHANNEL_KEYS: tuple[str, ...] = _load_protected_keys()
_PROTECTED_KEY_SET = frozenset(PROTECTED_CHANNEL_KEYS)


def is_protected(channel_id_or_key: object) -> bool:
    return normalize_channel_key(channel_id_or_key) in _PROTECTED_KEY_SET


def get_protected_channel_keys() -> list[str]:
    return list(PROTECTED_CHANNEL_KEYS)
