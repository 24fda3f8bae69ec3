import re

# local@domain.tld — no whitespace, exactly one "@", at least one "." after it
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(value) -> bool:
    if not isinstance(value, str):
        return False
    return _EMAIL_RE.fullmatch(value) is not None


def normalize_email(value: str) -> str:
    return value.strip().lower()
