# timeline/day_view.py
"""
Day view adapter: turns shift records into same-day intervals for lane
assignment, and turns lane placements back into positioned timeline blocks.
"""
import logging

from .constants import (
    DAY_HEIGHT_PX,
    DEFAULT_SHIFT_LABEL,
    MINUTES_PER_DAY,
    MIN_BLOCK_HEIGHT_PX,
    SHIFT_RECORD_TYPE,
)
from .layout import Interval, LanePlacement, assign_lanes
from .utils import clamp, day_minutes, parse_timestamp

logger = logging.getLogger(__name__)


def _to_display_time(moment, tz):
    # Naive timestamps are already wall-clock; aware ones follow the display zone.
    if tz is None or moment.tzinfo is None:
        return moment
    return moment.astimezone(tz)


def _is_shift(record):
    if record.get("deleted_at"):
        return False
    record_type = record.get("type")
    return record_type is None or record_type == SHIFT_RECORD_TYPE


def _day_window(record, day, tz):
    """Return (start, end, start_minute, end_minute) for a record on ``day``, else None."""
    if not _is_shift(record):
        return None
    starts_at = record.get("starts_at")
    ends_at = record.get("ends_at")
    if not starts_at or not ends_at:
        return None

    start = parse_timestamp(starts_at)
    end = parse_timestamp(ends_at)
    if start is None or end is None:
        logger.warning(f"Skipping shift {record.get('id')}: unparseable timestamps")
        return None

    start = _to_display_time(start, tz)
    end = _to_display_time(end, tz)
    if start.date() != day:
        return None
    start_minute = day_minutes(start, day)
    end_minute = day_minutes(end, day)
    if end_minute is None:
        logger.debug(f"Skipping shift {record.get('id')}: ends after {day}")
        return None
    return start, end, start_minute, end_minute


def collect_day_shifts(records, day, tz=None):
    """Select the shifts of ``day`` in start order.

    Args:
        records (list): Shift record dicts (id, starts_at, ends_at, ...)
        day (date): Calendar day being displayed
        tz (tzinfo|None): Display timezone; None keeps each timestamp's own offset

    Returns:
        list: (record, start, end, Interval) tuples. The interval end is
              stretched to the minimum block size for short shifts.
    """
    day_shifts = []
    for record in records:
        window = _day_window(record, day, tz)
        if window is None:
            continue
        start, end, start_minute, end_minute = window
        interval = Interval.clamped(record["id"], start_minute, end_minute)
        day_shifts.append((record, start, end, interval))
    day_shifts.sort(key=lambda item: (item[1].replace(tzinfo=None), item[3].id))
    return day_shifts


def build_day_intervals(records, day, tz=None):
    """Intervals for every shift that starts and ends on ``day``."""
    return [interval for _, _, _, interval in collect_day_shifts(records, day, tz)]


def get_shift_label(record):
    payload = record.get("payload")
    if isinstance(payload, dict) and "assignee" in payload:
        assignee = payload["assignee"]
        if isinstance(assignee, str):
            return assignee
    title = record.get("title")
    return title if title is not None else DEFAULT_SHIFT_LABEL


def compute_blocks(day_shifts, placements):
    """Position each day shift on the timeline.

    Vertical placement follows a fixed pixels-per-minute scale; horizontal
    placement splits the width evenly between the lanes of the shift's cluster.
    A shift without a placement is drawn full width.
    """
    blocks = []
    for record, start, end, interval in day_shifts:
        placement = placements.get(interval.id) or LanePlacement(0, 1)
        top_minute = clamp(interval.start_minute, 0, MINUTES_PER_DAY)
        bottom_minute = clamp(interval.end_minute, 0, MINUTES_PER_DAY)
        height = (bottom_minute - top_minute) / MINUTES_PER_DAY * DAY_HEIGHT_PX
        width_pct = 100 / placement.lanes_in_cluster

        blocks.append(
            {
                "id": interval.id,
                "label": get_shift_label(record),
                "timeLabel": f"{start:%H:%M}~{end:%H:%M}",
                "memo": record.get("content"),
                "startMinute": interval.start_minute,
                "endMinute": interval.end_minute,
                "top": top_minute / MINUTES_PER_DAY * DAY_HEIGHT_PX,
                "height": max(height, MIN_BLOCK_HEIGHT_PX),
                "lane": placement.lane,
                "lanesInCluster": placement.lanes_in_cluster,
                "leftPct": placement.lane * width_pct,
                "widthPct": width_pct,
            }
        )
    return blocks


def layout_day(records, day, tz=None):
    """Compute lane placements and timeline blocks for one day.

    Returns:
        tuple: (placements, blocks) - placements maps shift id to LanePlacement
    """
    day_shifts = collect_day_shifts(records, day, tz)
    placements = assign_lanes(interval for _, _, _, interval in day_shifts)
    blocks = compute_blocks(day_shifts, placements)
    logger.info(
        f"Laid out {len(blocks)} of {len(records)} shifts for {day.isoformat()}"
    )
    return placements, blocks
