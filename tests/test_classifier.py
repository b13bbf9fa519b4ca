"""
Test cases for per-frame classification.
"""
import unittest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from signspell.classifier import FrameClassifier, to_pixel_space
from signspell.rules import OPEN_PALM, FingerDirection
from signspell.types import Keypoint
from hand_fixtures import FLAT_B, H_SHAPE, I_SHAPE, OPEN_HAND, make_hand, malformed_hand, nan_hand


class TestFrameClassifier(unittest.TestCase):
    """Test one-hand and two-hand classification."""

    def setUp(self):
        self.classifier = FrameClassifier()
        self.frame_wh = (640, 480)

    def assert_no_symbol(self, result):
        self.assertIsNone(result.symbol)
        self.assertEqual(result.confidence, 0.0)
        self.assertFalse(result.is_special)

    def test_no_hands(self):
        self.assert_no_symbol(self.classifier.classify([], self.frame_wh))

    def test_malformed_hand_is_empty_frame(self):
        """Incomplete keypoint sets are a valid empty frame, not an error."""
        self.assert_no_symbol(self.classifier.classify([malformed_hand()], self.frame_wh))
        self.assert_no_symbol(
            self.classifier.classify([make_hand(OPEN_HAND, handedness="Left"), malformed_hand(22)], self.frame_wh)
        )

    def test_non_finite_hand_is_empty_frame(self):
        self.assert_no_symbol(self.classifier.classify([nan_hand(I_SHAPE)], self.frame_wh))
        self.assert_no_symbol(
            self.classifier.classify([make_hand(I_SHAPE), nan_hand(OPEN_HAND)], self.frame_wh)
        )

    def test_single_letter(self):
        result = self.classifier.classify([make_hand(I_SHAPE)], self.frame_wh)
        self.assertEqual(result.symbol, "I")
        self.assertFalse(result.is_special)
        self.assertTrue(0.7 <= result.confidence <= 1.0)

    def test_sideways_letter(self):
        hand = make_hand(H_SHAPE, direction=FingerDirection.HORIZONTAL_RIGHT)
        result = self.classifier.classify([hand], self.frame_wh)
        self.assertEqual(result.symbol, "H")

    def test_ranked_matches_normalized_and_above_threshold(self):
        result = self.classifier.classify([make_hand(I_SHAPE)], self.frame_wh)
        self.assertEqual(result.ranked_matches[0], (result.symbol, result.confidence))
        scores = [score for _, score in result.ranked_matches]
        self.assertEqual(scores, sorted(scores, reverse=True))
        for symbol, score in result.ranked_matches:
            self.assertNotEqual(symbol, OPEN_PALM)
            self.assertTrue(0.7 <= score <= 1.0)

    def test_two_open_palms_are_send_gesture(self):
        hands = [make_hand(OPEN_HAND, handedness="Left"), make_hand(OPEN_HAND, handedness="Right")]
        result = self.classifier.classify(hands, self.frame_wh)
        self.assertTrue(result.is_special)
        self.assertIsNone(result.symbol)
        self.assertAlmostEqual(result.confidence, 1.0)

    def test_single_open_palm_reads_as_b(self):
        """The send template only applies to two hands; one flat palm is still B."""
        result = self.classifier.classify([make_hand(OPEN_HAND)], self.frame_wh)
        self.assertFalse(result.is_special)
        self.assertEqual(result.symbol, "B")

    def test_flat_b_hand(self):
        result = self.classifier.classify([make_hand(FLAT_B)], self.frame_wh)
        self.assertEqual(result.symbol, "B")

    def test_two_hands_not_both_open_prefers_right(self):
        hands = [
            make_hand(OPEN_HAND, handedness="Left"),
            make_hand(H_SHAPE, direction=FingerDirection.HORIZONTAL_RIGHT, handedness="Right"),
        ]
        result = self.classifier.classify(hands, self.frame_wh)
        self.assertFalse(result.is_special)
        self.assertEqual(result.symbol, "H")

    def test_two_hands_without_right_uses_first(self):
        hands = [make_hand(I_SHAPE, handedness="Left"), make_hand(OPEN_HAND, handedness="Left")]
        self.assertEqual(self.classifier.classify(hands, self.frame_wh).symbol, "I")

    def test_below_threshold_is_no_symbol(self):
        strict = FrameClassifier(min_score=9.5)
        self.assert_no_symbol(strict.classify([make_hand(OPEN_HAND)], self.frame_wh))

    def test_invalid_threshold(self):
        with self.assertRaises(ValueError):
            FrameClassifier(min_score=11.0)

    def test_extra_hands_ignored(self):
        hands = [make_hand(OPEN_HAND, handedness="Left"), make_hand(OPEN_HAND, handedness="Right"), malformed_hand()]
        self.assertTrue(self.classifier.classify(hands, self.frame_wh).is_special)


class TestPixelSpace(unittest.TestCase):

    def test_scales_depth_like_x(self):
        hand = make_hand(OPEN_HAND)
        scaled = to_pixel_space(hand, (640, 480))
        self.assertEqual(scaled.keypoints[0], Keypoint(hand.keypoints[0].x * 640,
                                                       hand.keypoints[0].y * 480,
                                                       hand.keypoints[0].z * 640))
        self.assertEqual(scaled.handedness, hand.handedness)

    def test_none_keeps_coordinates(self):
        hand = make_hand(OPEN_HAND)
        self.assertIs(to_pixel_space(hand, None), hand)


if __name__ == '__main__':
    unittest.main()
