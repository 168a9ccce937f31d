# timeline/utils.py
import logging
import re
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .constants import MINUTES_PER_DAY

logger = logging.getLogger(__name__)

_FRACTION_RE = re.compile(r"(\d{2}:\d{2}:\d{2})\.(\d+)")


def time_to_minutes(time_str):
    """Convert time string (HH:MM) to minutes since midnight."""
    if not time_str or ":" not in time_str:
        logger.warning(f"Invalid time format: {time_str}")
        return -1
    try:
        hours, minutes = map(int, time_str.split(":"))
        if 0 <= hours <= 23 and 0 <= minutes <= 59:
            return hours * 60 + minutes
        else:
            logger.warning(f"Time out of range: {time_str}")
            return -1
    except ValueError as e:
        logger.warning(f"Time parsing error for '{time_str}': {e}")
        return -1


def clamp(n, low, high):
    return max(low, min(high, n))


def parse_timestamp(value):
    """Parse an ISO-8601 timestamp, accepting a trailing 'Z' for UTC.

    Returns:
        datetime|None: Parsed value, or None when the string is missing or malformed
    """
    if not isinstance(value, str) or not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # fromisoformat before 3.11 only takes 3 or 6 fraction digits; Postgres trims zeros
    text = _FRACTION_RE.sub(lambda m: f"{m.group(1)}.{m.group(2)[:6]:0<6}", text, count=1)
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.warning(f"Unparseable timestamp: {value}")
        return None


def parse_date(value):
    """Parse a YYYY-MM-DD string; returns None on bad input."""
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def resolve_timezone(name):
    """Look up an IANA timezone name.

    Returns:
        tuple: (ZoneInfo|None, str|None) - (timezone, error_message). A missing
               name resolves to (None, None), meaning timestamps keep their own offset.
    """
    if name is None:
        return None, None
    if not isinstance(name, str) or not name:
        return None, "timezone must be a non-empty string."
    try:
        return ZoneInfo(name), None
    except (ZoneInfoNotFoundError, ValueError):
        return None, f"Unknown timezone: {name}"


def minutes_since_midnight(moment):
    """Minutes elapsed since the start of the moment's own calendar day."""
    return moment.hour * 60 + moment.minute


def day_minutes(moment, day):
    """Minutes since midnight of ``day`` for a moment falling on that day.

    The midnight that closes the day counts as minute 1440. Moments on any
    other day return None.
    """
    if moment.date() == day:
        return minutes_since_midnight(moment)
    if moment.date() == day + timedelta(days=1) and moment.time() == datetime.min.time():
        return MINUTES_PER_DAY
    return None


def validate_shift_window(start_time, end_time):
    """Validate the start/end times entered for a new shift.

    Args:
        start_time (str): Start time in HH:MM format
        end_time (str): End time in HH:MM format

    Returns:
        tuple: (bool, str|None) - (is_valid, error_message)
    """
    if not isinstance(start_time, str) or not isinstance(end_time, str):
        return False, "startTime and endTime must be HH:MM strings."
    start_min = time_to_minutes(start_time)
    end_min = time_to_minutes(end_time)
    if start_min < 0 or end_min < 0:
        return False, "Invalid time format (must be HH:MM)."
    if end_min <= start_min:
        return False, "End time must be later than start time."
    return True, None


def validate_interval_list(intervals):
    """Validate raw interval objects before lane assignment.

    Args:
        intervals (list): Objects with id, startMinute and endMinute

    Returns:
        tuple: (bool, str|None) - (is_valid, error_message)
    """
    if not isinstance(intervals, list):
        return False, "intervals must be a list."
    for index, item in enumerate(intervals):
        if not isinstance(item, dict):
            return False, f"Interval at index {index} must be an object."
        interval_id = item.get("id")
        if not isinstance(interval_id, str) or not interval_id:
            return False, f"Interval at index {index} is missing a string id."
        start = item.get("startMinute")
        end = item.get("endMinute")
        # bool is an int subclass; reject it explicitly
        if (
            not isinstance(start, int)
            or isinstance(start, bool)
            or not isinstance(end, int)
            or isinstance(end, bool)
        ):
            return False, f"Interval {interval_id} must have integer startMinute and endMinute."
        if not 0 <= start < MINUTES_PER_DAY:
            return False, f"Interval {interval_id} startMinute must be within [0, 1440)."
    return True, None


def validate_shift_records(shifts):
    """Validate the structure of shift records sent for a day layout.

    Returns:
        tuple: (bool, str|None) - (is_valid, error_message)
    """
    if not isinstance(shifts, list):
        return False, "shifts must be a list."
    for index, record in enumerate(shifts):
        if not isinstance(record, dict):
            return False, f"Shift at index {index} must be an object."
        record_id = record.get("id")
        if not isinstance(record_id, str) or not record_id:
            return False, f"Shift at index {index} is missing a string id."
        for field in ("starts_at", "ends_at"):
            value = record.get(field)
            if value is not None and not isinstance(value, str):
                return False, f"Shift {record_id} has a non-string {field}."
    return True, None
