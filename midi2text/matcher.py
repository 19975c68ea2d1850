#!/usr/bin/env python3
"""
Pairing of start and stop events into tones.

Each start is paired with the earliest stop of the same instrument and pitch
that happens at or after it and has not already been paired. Starts are
processed in ascending (time, pitch, instrument) order, so two starts of the
same voice take their stops in time order and never cross.
"""

import logging
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Optional, Tuple

from .config import UnmatchedPolicy
from .events import Event, EventTable
from .exceptions import UnmatchedStartError
from .tones import Tone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pairing:
    """Outcome of matching one start event; stop is None when unmatched."""
    start: Event
    stop: Optional[Event] = None

    @property
    def matched(self) -> bool:
        return self.stop is not None

    def to_tone(self) -> Tone:
        if self.stop is None:
            raise UnmatchedStartError(self.start)
        return Tone.from_events(self.start, self.stop)


def _stop_queues(stops: EventTable) -> Dict[Tuple[int, int], Deque[Event]]:
    """Unpaired stops per (instrument, pitch), earliest first."""
    queues = defaultdict(deque)
    for stop in stops:
        queues[stop.voice].append(stop)
    return queues


def pair_events(starts: EventTable, stops: EventTable) -> List[Pairing]:
    """
    Pair every start event with its stop event.

    A stop is taken out of its queue once paired, so it can end at most one
    tone. Stops earlier than the start being matched are discarded as well:
    every later start of that voice is at least as late, so none of them
    could use it either.

    Args:
        starts: Start events
        stops: Stop events

    Returns:
        list: One Pairing per start event, in start order
    """
    queues = _stop_queues(stops)
    pairings = []
    stale = 0

    for start in starts:
        queue = queues.get(start.voice)
        stop = None
        if queue:
            while queue and queue[0].time < start.time:
                queue.popleft()
                stale += 1
            if queue:
                stop = queue.popleft()
        pairings.append(Pairing(start, stop))

    leftover = stale + sum(len(queue) for queue in queues.values())
    if leftover:
        logger.debug("%d stop event(s) were not paired with any start", leftover)
    return pairings


def generate_tones(starts: EventTable,
                   stops: EventTable,
                   unmatched=UnmatchedPolicy.DROP,
                   end_time: Optional[int] = None) -> List[Tone]:
    """
    Match events and build the sorted list of tones.

    Args:
        starts: Start events
        stops: Stop events
        unmatched: Policy for starts that have no stop
        end_time: Tick used to close unmatched starts under
            UnmatchedPolicy.CLOSE (defaults to the latest event time)

    Returns:
        list: Tones in ascending (start, end, pitch, instrument) order

    Raises:
        UnmatchedStartError: If a start is unmatched under UnmatchedPolicy.ERROR
    """
    unmatched = UnmatchedPolicy(unmatched)
    pairings = pair_events(starts, stops)
    orphans = [p.start for p in pairings if not p.matched]

    if orphans and unmatched is UnmatchedPolicy.ERROR:
        raise UnmatchedStartError(orphans[0], count=len(orphans))

    tones = [p.to_tone() for p in pairings if p.matched]

    if orphans:
        if unmatched is UnmatchedPolicy.CLOSE:
            if end_time is None:
                end_time = max(t for t in (starts.max_time(), stops.max_time())
                               if t is not None)
            for start in orphans:
                tones.append(Tone(start=start.time,
                                  end=max(end_time, start.time),
                                  instrument=start.instrument,
                                  pitch=start.pitch,
                                  loudness=start.loudness))
            logger.warning("Closed %d unmatched note start(s) at tick %d",
                           len(orphans), end_time)
        else:
            logger.warning("Dropped %d unmatched note start(s)", len(orphans))

    tones.sort()
    return tones
