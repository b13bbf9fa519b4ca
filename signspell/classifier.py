"""
Per-frame classification: turns the hands seen in one frame into at most one symbol.
"""
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from .errors import InvalidObservation
from .estimator import MAX_SCORE, estimate
from .rules import LETTER_RULES, OPEN_PALM, OPEN_PALM_RULE, GestureRule
from .types import ClassificationResult, HandObservation, Keypoint

logger = logging.getLogger(__name__)

DEFAULT_MIN_SCORE = 7.0


def to_pixel_space(hand: HandObservation, frame_wh: Optional[Tuple[int, int]]) -> HandObservation:
    """
    Scale normalized keypoints to pixels. Depth is scaled like x.

    Args:
        hand: Observation with coordinates in [0..1]
        frame_wh: Frame dimensions (width, height), or None to keep coordinates as-is

    Returns:
        Observation in pixel space
    """
    if frame_wh is None:
        return hand
    width, height = frame_wh
    keypoints = tuple(Keypoint(kp.x * width, kp.y * height, kp.z * width) for kp in hand.keypoints)
    return HandObservation(keypoints=keypoints, handedness=hand.handedness, timestamp=hand.timestamp)


class FrameClassifier:
    """
    Emits one ClassificationResult per frame.

    Two hands that both pass the open-palm rule form the send gesture, and that
    check runs first: when it holds, no letter is classified for the frame.
    Otherwise a single hand (the right one, if two are present) is classified
    against the letter rules only, so one flat palm still reads as B.
    """

    def __init__(self, min_score: float = DEFAULT_MIN_SCORE,
                 letter_rules: Sequence[GestureRule] = LETTER_RULES,
                 special_rule: GestureRule = OPEN_PALM_RULE):
        if not 0.0 <= min_score <= MAX_SCORE:
            raise ValueError(f"min_score must be within 0..{MAX_SCORE}, got {min_score}")
        self.min_score = min_score
        self.letter_rules = tuple(letter_rules)
        self.special_rule = special_rule

    def classify(self, hands: Iterable[HandObservation],
                 frame_wh: Optional[Tuple[int, int]] = None) -> ClassificationResult:
        """
        Classify the hands present in one frame.

        Args:
            hands: Zero, one or two observations (extra hands are ignored)
            frame_wh: Frame dimensions used to scale normalized keypoints

        Returns:
            The frame result; "no symbol" for absent or malformed input
        """
        hands = list(hands)[:2]
        if not hands:
            return ClassificationResult.empty()

        try:
            for hand in hands:
                hand.validate()
        except InvalidObservation as e:
            logger.debug(f"Skipping malformed observation: {e}")
            return ClassificationResult.empty()

        scaled = [to_pixel_space(hand, frame_wh) for hand in hands]

        if len(scaled) == 2:
            special = self._special_confidence(scaled)
            if special is not None:
                return ClassificationResult(
                    symbol=None,
                    confidence=special,
                    ranked_matches=[(OPEN_PALM, special)],
                    is_special=True,
                )

        hand = self._pick_hand(scaled)
        ranked = [
            (symbol, min(1.0, score / MAX_SCORE))
            for symbol, score in estimate(hand, self.letter_rules)
            if score >= self.min_score
        ]
        if not ranked:
            return ClassificationResult.empty()

        symbol, confidence = ranked[0]
        return ClassificationResult(symbol=symbol, confidence=confidence, ranked_matches=ranked)

    def _special_confidence(self, hands: List[HandObservation]) -> Optional[float]:
        """Mean normalized open-palm score if both hands pass it, else None."""
        scores = []
        for hand in hands:
            (_, score), = estimate(hand, (self.special_rule,))
            if score < self.min_score:
                return None
            scores.append(min(1.0, score / MAX_SCORE))
        return sum(scores) / len(scores)

    @staticmethod
    def _pick_hand(hands: List[HandObservation]) -> HandObservation:
        for hand in hands:
            if hand.handedness == "Right":
                return hand
        return hands[0]
