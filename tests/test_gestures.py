"""
Test cases for hold-to-commit tracks and the recognition session.
"""
import unittest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from signspell.config import load_config
from signspell.gestures import HoldState, HoldTrack, RecognitionSession
from signspell.rules import OPEN_PALM, FingerDirection
from signspell.types import AppendLetter, Send
from hand_fixtures import H_SHAPE, I_SHAPE, OPEN_HAND, make_hand, malformed_hand


def ticks(start, stop, step=1):
    """Frame timestamps k/10 s for k in range(start, stop)."""
    return [k / 10 for k in range(start, stop, step)]


class TestLetterTrack(unittest.TestCase):
    """Test the letter hold track."""

    def setUp(self):
        self.track = HoldTrack("letter", AppendLetter, hold_ms=800)

    def run_symbol(self, symbol, times):
        return [c for c in (self.track.update(symbol, t) for t in times) if c is not None]

    def test_exact_hold_duration_commits_once(self):
        self.assertIsNone(self.track.update("A", 0.0))
        self.assertIs(self.track.state, HoldState.TRACKING)
        self.assertIsNone(self.track.update("A", 0.4))
        self.assertAlmostEqual(self.track.progress, 50.0)
        self.assertEqual(self.track.update("A", 0.8), AppendLetter("A"))
        self.assertIs(self.track.state, HoldState.COMMITTED)
        self.assertEqual(self.track.progress, 0.0)

    def test_exact_hold_commits_from_any_start_tick(self):
        for k in range(200):
            track = HoldTrack("letter", AppendLetter, hold_ms=800)
            start = k / 10
            track.update("A", start)
            self.assertIsNone(track.update("A", start + 0.79))
            self.assertEqual(track.update("A", (k + 8) / 10), AppendLetter("A"), f"start={start}")

    def test_double_hold_commits_once(self):
        commits = self.run_symbol("A", ticks(0, 17))
        self.assertEqual(commits, [AppendLetter("A")])

    def test_interrupted_hold_commits_nothing(self):
        commits = self.run_symbol("A", ticks(0, 6))
        self.assertIsNone(self.track.update(None, 0.6))
        self.assertIs(self.track.state, HoldState.IDLE)
        self.assertEqual(self.track.progress, 0.0)
        commits += self.run_symbol("A", ticks(7, 9))
        self.assertEqual(commits, [])

    def test_symbol_change_restarts_hold(self):
        commits = self.run_symbol("A", ticks(0, 6))
        commits += self.run_symbol("B", ticks(6, 14))
        self.assertEqual(commits, [])
        self.assertEqual(self.track.tracked_symbol, "B")
        self.assertEqual(self.track.start_time, 0.6)
        self.assertEqual(self.track.update("B", 1.5), AppendLetter("B"))

    def test_same_letter_again_after_release(self):
        commits = self.run_symbol("A", ticks(0, 10))
        self.track.update(None, 1.0)
        commits += self.run_symbol("A", ticks(11, 21))
        self.assertEqual(commits, [AppendLetter("A"), AppendLetter("A")])

    def test_progress_capped(self):
        gated = HoldTrack("letter", AppendLetter, hold_ms=800, gate=lambda: False)
        for t in ticks(0, 30):
            gated.update("A", t)
        self.assertEqual(gated.progress, 100.0)

    def test_miss_tolerance_absorbs_gap(self):
        track = HoldTrack("letter", AppendLetter, hold_ms=800, miss_tolerance=1)
        track.update("A", 0.0)
        self.assertIsNone(track.update(None, 0.3))
        self.assertIs(track.state, HoldState.TRACKING)
        self.assertEqual(track.update("A", 0.8), AppendLetter("A"))

    def test_miss_tolerance_exceeded_resets(self):
        track = HoldTrack("letter", AppendLetter, hold_ms=800, miss_tolerance=1)
        track.update("A", 0.0)
        track.update(None, 0.3)
        track.update(None, 0.4)
        self.assertIs(track.state, HoldState.IDLE)
        self.assertIsNone(track.update("A", 0.8))

    def test_miss_tolerance_does_not_absorb_other_symbol(self):
        track = HoldTrack("letter", AppendLetter, hold_ms=800, miss_tolerance=3)
        track.update("A", 0.0)
        track.update("B", 0.3)
        self.assertEqual(track.tracked_symbol, "B")

    def test_reset(self):
        self.run_symbol("A", ticks(0, 5))
        self.track.reset()
        self.assertIs(self.track.state, HoldState.IDLE)
        self.assertEqual(self.track.progress, 0.0)


class TestSendTrack(unittest.TestCase):
    """Test the gated send track with cooldown."""

    def setUp(self):
        self.text = ""
        self.track = HoldTrack(
            "send", lambda _: Send(self.text), hold_ms=1200, cooldown_ms=2000,
            gate=lambda: bool(self.text.strip()),
        )

    def test_empty_text_never_fires_but_progress_advances(self):
        commits = [self.track.update(OPEN_PALM, t) for t in ticks(0, 21)]
        self.assertEqual([c for c in commits if c is not None], [])
        self.assertEqual(self.track.progress, 100.0)
        self.assertIs(self.track.state, HoldState.TRACKING)

    def test_fires_as_soon_as_text_appears(self):
        for t in ticks(0, 21):
            self.track.update(OPEN_PALM, t)
        self.text = "HI"
        self.assertEqual(self.track.update(OPEN_PALM, 2.1), Send("HI"))

    def test_fires_once_with_text(self):
        self.text = "HI"
        commits = [c for c in (self.track.update(OPEN_PALM, t) for t in ticks(0, 40)) if c is not None]
        self.assertEqual(commits, [Send("HI")])

    def test_cooldown_blocks_redetected_gesture(self):
        self.text = "HI"
        self.track.update(OPEN_PALM, 0.0)
        self.assertEqual(self.track.update(OPEN_PALM, 1.5), Send("HI"))

        self.track.update(None, 1.6)
        self.track.update(OPEN_PALM, 1.7)
        self.assertIsNone(self.track.update(OPEN_PALM, 3.0))
        self.assertIsNone(self.track.update(OPEN_PALM, 3.4))
        self.assertEqual(self.track.update(OPEN_PALM, 3.6), Send("HI"))
        self.assertIsNone(self.track.update(OPEN_PALM, 6.0))


class TestRecognitionSession(unittest.TestCase):
    """Test the full per-frame pipeline with synthetic hands."""

    def setUp(self):
        self.cfg = load_config()
        self.session = RecognitionSession(self.cfg)
        self.frame_wh = (640, 480)
        self.h_hand = make_hand(H_SHAPE, direction=FingerDirection.HORIZONTAL_RIGHT)
        self.i_hand = make_hand(I_SHAPE)
        self.palms = [make_hand(OPEN_HAND, handedness="Left"), make_hand(OPEN_HAND, handedness="Right")]

    def run_frames(self, hands, start, stop):
        commits = []
        outcomes = []
        for k in range(start, stop):
            outcome = self.session.process_frame(hands, k / 10, self.frame_wh)
            outcomes.append(outcome)
            commits.extend(outcome.commits)
        return commits, outcomes

    def test_spell_and_send(self):
        """H and I held with a gap between them, then both palms: H, I, Send("HI")."""
        commits, _ = self.run_frames([self.h_hand], 0, 12)
        gap, _ = self.run_frames([], 12, 13)
        commits += gap
        more, _ = self.run_frames([self.i_hand], 13, 26)
        commits += more
        self.assertEqual(self.session.buffer.text, "HI")
        more, outcomes = self.run_frames(self.palms, 26, 46)
        commits += more

        self.assertEqual(commits, [AppendLetter("H"), AppendLetter("I"), Send("HI")])
        self.assertEqual(self.session.buffer.text, "")
        self.assertEqual(self.session.buffer.saved[0].text, "HI")
        self.assertTrue(any(o.stable.is_special for o in outcomes))

    def test_send_without_text_fires_nothing(self):
        commits, outcomes = self.run_frames(self.palms, 0, 30)
        self.assertEqual(commits, [])
        self.assertEqual(outcomes[-1].send_progress, 100.0)

    def test_letter_progress_exposed(self):
        _, outcomes = self.run_frames([self.i_hand], 0, 8)
        progress = [o.letter_progress for o in outcomes]
        self.assertEqual(progress[0], 0.0)
        self.assertGreater(progress[-1], 0.0)
        self.assertEqual(progress, sorted(progress))
        self.assertEqual(outcomes[-1].stable.symbol, "I")
        self.assertEqual(outcomes[-1].raw.symbol, "I")

    def test_single_bad_frame_does_not_interrupt_hold(self):
        commits, _ = self.run_frames([self.i_hand], 0, 5)
        bad, outcomes = self.run_frames([malformed_hand()], 5, 6)
        commits += bad
        self.assertIsNone(outcomes[0].raw.symbol)
        self.assertEqual(outcomes[0].stable.symbol, "I")
        more, _ = self.run_frames([self.i_hand], 6, 12)
        commits += more
        self.assertEqual(commits, [AppendLetter("I")])

    def test_no_hands_resets(self):
        self.run_frames([self.i_hand], 0, 6)
        _, outcomes = self.run_frames([], 6, 7)
        self.assertIsNone(outcomes[0].stable.symbol)
        self.assertEqual(outcomes[0].hands_count, 0)
        self.assertEqual(len(self.session.smoother.history), 0)
        self.assertIs(self.session.letter_track.state, HoldState.IDLE)

    def test_reset_drops_hold(self):
        self.run_frames([self.i_hand], 0, 8)
        self.session.reset()
        commits, _ = self.run_frames([self.i_hand], 8, 10)
        self.assertEqual(commits, [])
        self.assertIs(self.session.letter_track.state, HoldState.IDLE)


if __name__ == '__main__':
    unittest.main()
