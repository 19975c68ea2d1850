#!/usr/bin/env python3
"""
Tests for pairing start and stop events into tones.
"""

import random
import unittest

from midi2text.config import UnmatchedPolicy
from midi2text.events import Event, EventTable
from midi2text.exceptions import UnmatchedStartError
from midi2text.matcher import Pairing, generate_tones, pair_events
from midi2text.tones import Tone


def tables(starts, stops):
    return EventTable(Event(*s) for s in starts), EventTable(Event(*s) for s in stops)


class TestPairing(unittest.TestCase):
    """The earliest-available pairing rule."""

    def test_single_note(self):
        starts, stops = tables([(0, 0, 60, 100)], [(10, 0, 60, 0)])
        tones = generate_tones(starts, stops)
        self.assertEqual(tones, [Tone(0, 10, 0, 60, 100)])
        self.assertEqual(tones[0].loudness, 100)

    def test_repeated_notes_pair_in_time_order(self):
        starts, stops = tables([(0, 0, 60, 100), (5, 0, 60, 90)],
                               [(3, 0, 60, 0), (8, 0, 60, 0)])
        tones = generate_tones(starts, stops)
        self.assertEqual([(t.start, t.end) for t in tones], [(0, 3), (5, 8)])

    def test_overlapping_starts_take_earliest_stop(self):
        # both starts precede both stops: first start gets the first stop
        starts, stops = tables([(0, 0, 60, 100), (2, 0, 60, 90)],
                               [(4, 0, 60, 0), (9, 0, 60, 0)])
        tones = generate_tones(starts, stops)
        self.assertEqual([(t.start, t.end) for t in tones], [(0, 4), (2, 9)])

    def test_stop_must_match_instrument_and_pitch(self):
        starts, stops = tables([(0, 0, 60, 100), (0, 1, 60, 100), (0, 0, 62, 100)],
                               [(4, 1, 60, 0), (6, 0, 62, 0), (8, 0, 60, 0)])
        tones = generate_tones(starts, stops)
        self.assertEqual(
            {(t.instrument, t.pitch): t.end for t in tones},
            {(1, 60): 4, (0, 62): 6, (0, 60): 8})

    def test_stop_before_start_is_not_used(self):
        starts, stops = tables([(10, 0, 60, 100)],
                               [(5, 0, 60, 0), (12, 0, 60, 0)])
        tones = generate_tones(starts, stops)
        self.assertEqual([(t.start, t.end) for t in tones], [(10, 12)])

    def test_stop_at_same_time_matches(self):
        starts, stops = tables([(7, 0, 60, 100)], [(7, 0, 60, 0)])
        tones = generate_tones(starts, stops)
        self.assertEqual([(t.start, t.end) for t in tones], [(7, 7)])
        self.assertEqual(tones[0].duration, 0)

    def test_stop_at_last_stop_time_is_reachable(self):
        starts, stops = tables([(0, 0, 60, 100), (0, 0, 64, 100)],
                               [(3, 0, 64, 0), (100, 0, 60, 0)])
        tones = generate_tones(starts, stops)
        self.assertIn(Tone(0, 100, 0, 60, 100), tones)

    def test_pair_events_reports_each_start(self):
        starts, stops = tables([(0, 0, 60, 100), (5, 0, 61, 100)],
                               [(3, 0, 60, 0)])
        pairings = pair_events(starts, stops)
        self.assertEqual(len(pairings), 2)
        self.assertTrue(pairings[0].matched)
        self.assertEqual(pairings[0].stop, Event(3, 0, 60))
        self.assertFalse(pairings[1].matched)
        self.assertIsNone(pairings[1].stop)

    def test_unmatched_pairing_has_no_tone(self):
        with self.assertRaises(UnmatchedStartError):
            Pairing(Event(0, 0, 60)).to_tone()

    def test_empty_input(self):
        self.assertEqual(generate_tones(EventTable(), EventTable()), [])


class TestUnmatchedPolicy(unittest.TestCase):
    """A start without any qualifying stop."""

    def setUp(self):
        self.starts, self.stops = tables(
            [(0, 0, 60, 100), (4, 0, 67, 80)],
            [(2, 0, 60, 0), (3, 0, 67, 0)])

    def test_drop(self):
        tones = generate_tones(self.starts, self.stops, UnmatchedPolicy.DROP)
        self.assertEqual(tones, [Tone(0, 2, 0, 60, 100)])

    def test_drop_is_default_and_never_emits_zero_tone(self):
        tones = generate_tones(self.starts, self.stops)
        self.assertNotIn(Tone(0, 0, 0, 0, 0), tones)
        self.assertEqual(len(tones), 1)

    def test_close_at_end_time(self):
        tones = generate_tones(self.starts, self.stops, UnmatchedPolicy.CLOSE,
                               end_time=20)
        self.assertEqual(tones, [Tone(0, 2, 0, 60, 100), Tone(4, 20, 0, 67, 80)])

    def test_close_defaults_to_latest_event(self):
        tones = generate_tones(self.starts, self.stops, "close")
        self.assertEqual(tones[-1], Tone(4, 4, 0, 67, 80))

    def test_error(self):
        with self.assertRaises(UnmatchedStartError) as ctx:
            generate_tones(self.starts, self.stops, UnmatchedPolicy.ERROR)
        self.assertEqual(ctx.exception.event, Event(4, 0, 67))
        self.assertEqual(ctx.exception.count, 1)


class TestMatchingProperties(unittest.TestCase):
    """Properties over a random but fixed set of events."""

    def setUp(self):
        rng = random.Random(1234)
        starts, stops = [], []
        for _ in range(300):
            instrument = rng.randrange(3)
            pitch = rng.randrange(58, 64)
            start = rng.randrange(0, 500)
            starts.append((start, instrument, pitch, rng.randrange(1, 128)))
            stops.append((start + rng.randrange(0, 40), instrument, pitch, 0))
        # a few stray stops that end nothing
        stops.extend((rng.randrange(0, 600), 5, 70, 0) for _ in range(10))
        self.starts, self.stops = tables(starts, stops)

    def test_each_stop_used_at_most_once(self):
        pairings = [p for p in pair_events(self.starts, self.stops) if p.matched]
        used = [p.stop.key for p in pairings]
        self.assertEqual(len(used), len(set(used)))

    def test_each_matched_start_has_exactly_one_tone(self):
        pairings = pair_events(self.starts, self.stops)
        tones = generate_tones(self.starts, self.stops)
        for pairing in pairings:
            if not pairing.matched:
                continue
            s = pairing.start
            found = [t for t in tones
                     if (t.start, t.pitch, t.instrument) == (s.time, s.pitch, s.instrument)]
            self.assertEqual(len(found), 1)

    def test_tones_strictly_ascending(self):
        tones = generate_tones(self.starts, self.stops)
        for a, b in zip(tones, tones[1:]):
            self.assertLess(a.key, b.key)

    def test_stops_never_precede_starts(self):
        for tone in generate_tones(self.starts, self.stops):
            self.assertLessEqual(tone.start, tone.end)

    def test_deterministic(self):
        first = generate_tones(self.starts, self.stops)
        second = generate_tones(self.starts, self.stops)
        self.assertEqual([t.to_line() for t in first], [t.to_line() for t in second])

    def test_same_voice_pairs_never_cross(self):
        tones = generate_tones(self.starts, self.stops)
        by_voice = {}
        for tone in tones:
            by_voice.setdefault((tone.instrument, tone.pitch), []).append(tone)
        for voice_tones in by_voice.values():
            voice_tones.sort(key=lambda t: t.start)
            ends = [t.end for t in voice_tones]
            self.assertEqual(ends, sorted(ends))


if __name__ == '__main__':
    unittest.main()
