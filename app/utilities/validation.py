from typing import Any

from app.exceptions import ValidationError


def require_text(value: Any, message: str, field: str = "content") -> str:
    """Return ``value`` trimmed, or raise if it is not a non-blank string."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message, field=field)
    return value.strip()


def require_fields(payload: dict, *fields: str) -> None:
    missing = [name for name in fields if payload.get(name) in (None, "")]
    if missing:
        raise ValidationError(f"{' and '.join(missing)} {'is' if len(missing) == 1 else 'are'} required",
                              field=missing[0])
