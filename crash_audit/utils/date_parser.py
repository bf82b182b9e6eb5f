"""Date parsing and validation utilities for history scans."""

from datetime import date, datetime, timedelta

# Common date formats to try, most specific first
DATE_FORMATS = [
    "%Y-%m-%d",  # 2024-01-01
    "%Y-%m-%dT%H:%M:%SZ",  # 2024-01-01T10:00:00Z
    "%Y-%m-%dT%H:%M:%S",  # 2024-01-01T10:00:00
    "%B %d, %Y",  # January 1, 2024
    "%b %d, %Y",  # Jan 1, 2024
    "%B %d %Y",  # January 1 2024
    "%b %d %Y",  # Jan 1 2024
    "%Y/%m/%d",  # 2024/01/01
    "%m/%d/%Y",  # 01/01/2024
]


def parse_date_input(date_str: str) -> date:
    """Parse various date formats into a calendar date.

    Supports:
    - ISO dates: 2024-01-01, 2024-01-01T10:00:00Z
    - Common formats: January 1, 2024, Jan 1 2024, 2024/01/01, 01/01/2024

    Args:
        date_str: Date string to parse

    Returns:
        Parsed date (any time component is dropped)

    Raises:
        ValueError: If date format is not recognized
    """
    value = date_str.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue

    raise ValueError(
        f"Unable to parse date '{date_str}'. "
        f"Supported formats include: YYYY-MM-DD, YYYY-MM-DDTHH:MM:SSZ, "
        f"'January 1, 2024', 'Jan 1 2024', MM/DD/YYYY"
    )


def validate_date_range(start: date | None, end: date | None) -> None:
    """Validate an inclusive date range.

    Args:
        start: Start date (optional)
        end: End date (optional)

    Raises:
        ValueError: If start falls after end
    """
    if start is not None and end is not None and start > end:
        raise ValueError(
            f"Start date ({start.isoformat()}) must not be after "
            f"end date ({end.isoformat()})"
        )


def parse_date_range(
    from_date: str | None = None, to_date: str | None = None
) -> tuple[date | None, date | None]:
    """Parse and validate the --from/--to options.

    Returns:
        Tuple of (from_date, to_date), either may be None

    Raises:
        ValueError: If a date is malformed or the range is inverted
    """
    start = None
    end = None

    if from_date:
        try:
            start = parse_date_input(from_date)
        except ValueError as e:
            raise ValueError(f"Invalid --from date: {e}")

    if to_date:
        try:
            end = parse_date_input(to_date)
        except ValueError as e:
            raise ValueError(f"Invalid --to date: {e}")

    validate_date_range(start, end)
    return start, end


def format_duration(duration: timedelta) -> str:
    """Format a duration using its largest whole unit.

    Examples: "30 seconds", "1 minute", "2 hours", "3 days"
    """
    secs = max(int(duration.total_seconds()), 0)

    if secs < 60:
        value, unit = secs, "second"
    elif secs < 3600:
        value, unit = secs // 60, "minute"
    elif secs < 86400:
        value, unit = secs // 3600, "hour"
    else:
        value, unit = secs // 86400, "day"

    return f"{value} {unit}{'' if value == 1 else 's'}"
