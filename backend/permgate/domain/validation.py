from ..errors import ValidationError


def require_text(value: str | None, field: str) -> str:
    """Return ``value`` stripped, or fail when it is missing or blank."""
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required", details={"field": field})
    return value.strip()


def optional_text(value: str | None, field: str) -> str | None:
    """Like :func:`require_text`, but ``None`` means "not provided"."""
    if value is None:
        return None
    return require_text(value, field)


def require_id(value: int | None, field: str) -> int:
    if value is None or isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{field} must be a positive integer", details={"field": field})
    return value
