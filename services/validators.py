"""Cross-field checks shared by the services."""

from datetime import date

from services.errors import ErrorCode, ValidationFailedError


def validate_date_range(start: date | None, end: date | None, *, field: str = "end_date") -> None:
    """Reject a range whose end precedes its start."""
    if start is not None and end is not None and start > end:
        raise ValidationFailedError(
            field,
            f"{field} must not be before the start date",
            code=ErrorCode.INVALID_DATE_RANGE,
        )
