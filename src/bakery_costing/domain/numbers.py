"""Numeric parsing for values crossing the storage and API boundary."""

from decimal import Decimal, InvalidOperation


def parse_decimal(value: object, *, field: str = "value") -> Decimal | None:
    """Parse a decimal string or number, returning None for blank input."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid {field}: {value!r}")
    if isinstance(value, int | float):
        return Decimal(str(value))
    if isinstance(value, str):
        cleaned = value.strip()
        if not cleaned:
            return None
        try:
            parsed = Decimal(cleaned)
        except InvalidOperation as exc:
            raise ValueError(f"Invalid {field}: {value!r}") from exc
        if not parsed.is_finite():
            raise ValueError(f"Invalid {field}: {value!r}")
        return parsed
    raise ValueError(f"Invalid {field}: {value!r}")


def require_decimal(value: object, *, field: str = "value") -> Decimal:
    """Parse a decimal that must be present."""
    parsed = parse_decimal(value, field=field)
    if parsed is None:
        raise ValueError(f"Missing {field}")
    return parsed


def parse_portions(value: object) -> int:
    """Parse a portion count; range checks belong to the calculators."""
    parsed = require_decimal(value, field="total_portions")
    if parsed != parsed.to_integral_value():
        raise ValueError(f"Invalid total_portions: {value!r}")
    return int(parsed)
