"""
Hold-to-commit tracks that turn stable symbols into one-shot commits.
"""
import logging
from enum import Enum
from typing import Callable, Iterable, List, Optional, Tuple

from .classifier import FrameClassifier
from .config import Cfg, HoldConfig
from .rules import OPEN_PALM
from .smoother import TemporalSmoother
from .transcript import TextBuffer
from .types import AppendLetter, Commit, FrameOutcome, HandObservation, Send, SmoothedResult

logger = logging.getLogger(__name__)

TIME_EPSILON_MS = 1e-6


class HoldState(Enum):
    IDLE = "idle"
    TRACKING = "tracking"
    COMMITTED = "committed"


class HoldTrack:
    """
    Fires a commit once a stable symbol has been held for `hold_ms`.

    Features:
    - At most one commit per continuous run of the same symbol
    - Any change of symbol, including to none, restarts the hold
    - Optional gate that must pass at the moment of firing; while it fails the
      hold keeps advancing, so the commit fires as soon as the gate opens
    - Cooldown after a commit during which a new run cannot fire
    - Up to `miss_tolerance` consecutive no-symbol frames absorbed mid-hold
    """

    def __init__(self, name: str, make_commit: Callable[[str], Commit], hold_ms: int,
                 cooldown_ms: int = 0, miss_tolerance: int = 0,
                 gate: Optional[Callable[[], bool]] = None):
        self.name = name
        self.make_commit = make_commit
        self.hold_ms = hold_ms
        self.cooldown_ms = cooldown_ms
        self.miss_tolerance = miss_tolerance
        self.gate = gate

        self.tracked_symbol: Optional[str] = None
        self.start_time: float = 0.0
        self.committed = False
        self.progress = 0.0  # 0..100
        self.misses = 0
        self.cooldown_until: float = float("-inf")

    @classmethod
    def from_config(cls, name: str, make_commit: Callable[[str], Commit], cfg: HoldConfig,
                    gate: Optional[Callable[[], bool]] = None) -> "HoldTrack":
        return cls(name, make_commit, hold_ms=cfg.hold_ms, cooldown_ms=cfg.cooldown_ms,
                   miss_tolerance=cfg.miss_tolerance, gate=gate)

    @property
    def state(self) -> HoldState:
        if self.tracked_symbol is None:
            return HoldState.IDLE
        return HoldState.COMMITTED if self.committed else HoldState.TRACKING

    def update(self, symbol: Optional[str], t_now: float) -> Optional[Commit]:
        """
        Advance the track with the latest stable symbol.

        Args:
            symbol: Stable symbol for this track, or None
            t_now: Current timestamp in seconds

        Returns:
            The commit if one fires on this frame, None otherwise
        """
        if symbol is None and self.tracked_symbol is not None and self.misses < self.miss_tolerance:
            self.misses += 1
            return None

        if symbol != self.tracked_symbol:
            self._restart(symbol, t_now)
            return None

        self.misses = 0
        if symbol is None or self.committed:
            return None

        # absorbs float error in timestamp subtraction
        elapsed_ms = (t_now - self.start_time) * 1000.0 + TIME_EPSILON_MS
        self.progress = min(100.0, elapsed_ms / self.hold_ms * 100.0)
        if elapsed_ms < self.hold_ms:
            return None
        if t_now < self.cooldown_until:
            return None
        if self.gate is not None and not self.gate():
            return None

        self.committed = True
        self.progress = 0.0
        if self.cooldown_ms:
            self.cooldown_until = t_now + self.cooldown_ms / 1000.0
        commit = self.make_commit(symbol)
        logger.info(f"✅ {self.name} commit: {commit}")
        return commit

    def reset(self) -> None:
        """Return to IDLE and forget any cooldown."""
        self._restart(None, 0.0)
        self.cooldown_until = float("-inf")

    def _restart(self, symbol: Optional[str], t_now: float) -> None:
        self.tracked_symbol = symbol
        self.start_time = t_now
        self.committed = False
        self.progress = 0.0
        self.misses = 0


class RecognitionSession:
    """
    Main processor that coordinates classification, smoothing and both hold tracks.

    The letter track appends characters to the text buffer. The send track
    flushes it, and only fires while the buffer holds text. While the send
    gesture is the stable result the letter track sees no symbol.
    """

    def __init__(self, cfg: Cfg, classifier: Optional[FrameClassifier] = None,
                 buffer: Optional[TextBuffer] = None):
        """Initialize the session with configuration."""
        self.cfg = cfg
        self.classifier = classifier or FrameClassifier(min_score=cfg.recognition.min_score)
        self.smoother = TemporalSmoother(cfg.recognition.smoothing_window)
        self.buffer = buffer if buffer is not None else TextBuffer()

        self.letter_track = HoldTrack.from_config("letter", AppendLetter, cfg.letter_track)
        self.send_track = HoldTrack.from_config(
            "send", lambda _: Send(self.buffer.text.strip()), cfg.send_track,
            gate=lambda: not self.buffer.is_empty,
        )

    def process_frame(self, hands: Iterable[HandObservation], t_now: float,
                      frame_wh: Optional[Tuple[int, int]] = None) -> FrameOutcome:
        """
        Process one frame.

        Args:
            hands: Hands detected in the frame (empty if none)
            t_now: Current timestamp in seconds
            frame_wh: Frame dimensions (width, height)

        Returns:
            Raw and stable results, hold progress and any commits that fired
        """
        hands = list(hands)
        raw = self.classifier.classify(hands, frame_wh)

        if hands:
            stable = self.smoother.add_result(raw)
        else:
            self.smoother.reset()
            stable = SmoothedResult.empty()

        letter_symbol = None if stable.is_special else stable.symbol
        send_symbol = OPEN_PALM if stable.is_special else None

        commits: List[Commit] = []
        for track, symbol in ((self.letter_track, letter_symbol), (self.send_track, send_symbol)):
            commit = track.update(symbol, t_now)
            if commit is not None:
                self._apply(commit)
                commits.append(commit)

        logger.debug(f"raw={raw.symbol or ('SEND' if raw.is_special else '-')} "
                     f"stable={stable.symbol or ('SEND' if stable.is_special else '-')}")

        return FrameOutcome(
            t_now=t_now,
            hands_count=len(hands),
            raw=raw,
            stable=stable,
            letter_progress=self.letter_track.progress,
            send_progress=self.send_track.progress,
            commits=commits,
            text=self.buffer.text,
            hands=hands,
        )

    def reset(self) -> None:
        """Drop the smoothing window and any in-progress holds."""
        self.smoother.reset()
        self.letter_track.reset()
        self.send_track.reset()

    def _apply(self, commit: Commit) -> None:
        if isinstance(commit, AppendLetter):
            self.buffer.append(commit.letter)
        elif isinstance(commit, Send):
            self.buffer.flush()
