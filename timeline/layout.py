# timeline/layout.py
import logging
from typing import NamedTuple

from .constants import MIN_BLOCK_MINUTES

logger = logging.getLogger(__name__)


class Interval(NamedTuple):
    """One shift's span within a single day, in minutes since midnight."""

    id: str
    start_minute: int
    end_minute: int

    @classmethod
    def clamped(cls, id, start_minute, end_minute):
        """Build an interval, stretching empty or inverted spans to the minimum block size."""
        return cls(id, start_minute, max(end_minute, start_minute + MIN_BLOCK_MINUTES))


class LanePlacement(NamedTuple):
    lane: int
    lanes_in_cluster: int

    def to_dict(self):
        return {"lane": self.lane, "lanesInCluster": self.lanes_in_cluster}


def _normalize(interval):
    if interval.end_minute > interval.start_minute:
        return interval
    logger.debug(
        f"Interval {interval.id} has end {interval.end_minute} <= start "
        f"{interval.start_minute}, clamping to {MIN_BLOCK_MINUTES} minutes"
    )
    return Interval.clamped(*interval)


def _sort_key(interval):
    # id only breaks exact ties so the result never depends on input order
    return (interval.start_minute, interval.end_minute, str(interval.id))


def _sweep(intervals):
    """Yield each overlap cluster as a list of (interval, lane) pairs.

    Intervals are visited by start time. An interval stays active until one
    starts at or after its end; when the active set drains, the cluster that
    was being accumulated is closed and a new one opens.
    """
    active = []
    cluster = []
    for interval in sorted((_normalize(i) for i in intervals), key=_sort_key):
        active = [
            entry for entry in active if entry[0].end_minute > interval.start_minute
        ]
        if not active and cluster:
            yield cluster
            cluster = []

        used = {lane for _, lane in active}
        lane = 0
        while lane in used:
            lane += 1

        entry = (interval, lane)
        active.append(entry)
        cluster.append(entry)

    if cluster:
        yield cluster


def place_intervals(intervals):
    """Assign every interval a horizontal lane for the day view.

    Overlapping intervals never share a lane. Each interval gets the lowest
    lane not held by an interval still running when it starts; this greedy
    choice is deterministic but not guaranteed to use the fewest lanes.

    Args:
        intervals (iterable): Interval objects for a single day, in any order

    Returns:
        tuple: (placements, cluster_count) - placements maps interval id to
               LanePlacement; ``lanes_in_cluster`` is the highest lane used in
               the interval's overlap cluster plus one. A repeated id keeps
               its last placement.
    """
    placements = {}
    cluster_count = 0
    for cluster in _sweep(intervals):
        cluster_count += 1
        lanes_in_cluster = max(lane for _, lane in cluster) + 1
        for interval, lane in cluster:
            placements[interval.id] = LanePlacement(lane, lanes_in_cluster)
    logger.debug(
        f"Placed {len(placements)} intervals in {cluster_count} overlap clusters"
    )
    return placements, cluster_count


def assign_lanes(intervals):
    """Map interval id to LanePlacement; see place_intervals."""
    placements, _ = place_intervals(intervals)
    return placements


def find_clusters(intervals):
    """Group intervals into maximal overlap clusters, ordered by start time."""
    return [[interval for interval, _ in cluster] for cluster in _sweep(intervals)]
