"""
Majority-vote smoothing over the most recent frame results.
"""
import math
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Tuple

from .rules import OPEN_PALM
from .types import ClassificationResult, SmoothedResult

MIN_WINDOW = 3
MAX_WINDOW = 5


class TemporalSmoother:
    """
    Fixed-capacity FIFO window with a majority vote.

    The majority threshold is ceil(N/2) of the window capacity, not of the
    frames seen so far, so a freshly reset window needs that many agreeing
    frames before anything becomes stable. "No symbol" frames occupy slots
    but never vote.

    Send-gesture votes are counted before letter votes and win outright when
    they reach the threshold, so a window mixing letter and send frames never
    yields a letter while the send gesture holds the majority.
    """

    def __init__(self, window: int = MAX_WINDOW):
        if not MIN_WINDOW <= window <= MAX_WINDOW:
            raise ValueError(f"window must be within {MIN_WINDOW}..{MAX_WINDOW}, got {window}")
        self.window = window
        self.majority = math.ceil(window / 2)
        self.history: Deque[ClassificationResult] = deque(maxlen=window)

    def add_result(self, result: ClassificationResult) -> SmoothedResult:
        """Push one frame result and return the stable result for the window."""
        self.history.append(result)

        special_votes: Dict[str, List[Any]] = {}
        letter_votes: Dict[str, List[Any]] = {}
        for r in self.history:
            if r.is_special:
                _tally(special_votes, OPEN_PALM, r.confidence)
            elif r.symbol is not None:
                _tally(letter_votes, r.symbol, r.confidence)

        winner = self._winner(special_votes)
        if winner is not None:
            _, confidence = winner
            return SmoothedResult(
                symbol=None,
                confidence=confidence,
                ranked_matches=result.ranked_matches,
                is_special=True,
            )

        winner = self._winner(letter_votes)
        if winner is not None:
            symbol, confidence = winner
            return SmoothedResult(symbol=symbol, confidence=confidence, ranked_matches=result.ranked_matches)

        return SmoothedResult.empty()

    def reset(self) -> None:
        """Drop the whole window, e.g. when no hand is in frame."""
        self.history.clear()

    def _winner(self, votes: Dict[str, List[Any]]) -> Optional[Tuple[str, float]]:
        best: Optional[str] = None
        best_count = 0
        best_total = 0.0
        for symbol, (count, total) in votes.items():
            if count > best_count or (count == best_count and total > best_total):
                best, best_count, best_total = symbol, count, total
        if best is None or best_count < self.majority:
            return None
        return best, best_total / best_count


def _tally(votes: Dict[str, List[Any]], symbol: str, confidence: float) -> None:
    """Add one vote to `votes`, which maps symbol -> [count, total confidence]."""
    entry = votes.setdefault(symbol, [0, 0.0])
    entry[0] += 1
    entry[1] += confidence
