import re

from app.core.exceptions import InvalidIdentityError

# Only ASCII digits; re's \d would also accept other Unicode decimal digits.
_NON_DIGITS = re.compile(r"[^0-9]")
MAX_KEY_DIGITS = 10


def normalize_identity(external_id: str) -> int:
    """Map an auth provider's identity string to the integer primary key of user_profiles.

    Non-digits are stripped, the first ten remaining digits are kept and parsed as base 10,
    e.g. "user_0000123abc" -> 123. Raises InvalidIdentityError when no digits remain.
    """
    if not isinstance(external_id, str) or not external_id:
        raise InvalidIdentityError(external_id)
    digits = _NON_DIGITS.sub("", external_id)[:MAX_KEY_DIGITS]
    if not digits:
        raise InvalidIdentityError(external_id)
    return int(digits, 10)
