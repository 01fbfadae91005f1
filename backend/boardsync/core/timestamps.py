"""Timestamps: parsing and formatting of the date/time text stored in cells.

Invariants:
    - format_timestamp always emits UTC with millisecond precision and a trailing Z
    - parse_timestamp never raises; unparsable or empty input returns None
    - Naive values (no offset, or date-only) are read as UTC
    - Besides ISO-8601, the date forms people type into a sheet are accepted
      (`1/15/2024`, `2024/01/15`, `Jan 15, 2024`, optionally with a time)
"""

from datetime import datetime, timezone

_SHEET_FORMATS = (
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Render as `YYYY-MM-DDTHH:MM:SS.mmmZ`, the form existing sheets already hold."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def format_date(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%d")


def parse_timestamp(text: str | None) -> datetime | None:
    """Parse ISO-8601 or a common sheet date form into an aware datetime, or None."""
    if not text:
        return None
    candidate = text.strip()
    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        parsed = _parse_sheet_date(candidate)
        if parsed is None:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_sheet_date(text: str) -> datetime | None:
    for fmt in _SHEET_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None
