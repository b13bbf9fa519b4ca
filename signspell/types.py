"""
Type definitions for the fingerspelling recognition core.
"""
import math
from dataclasses import dataclass, field
from typing import Any, List, Literal, Optional, Protocol, Tuple, Union, runtime_checkable

from .errors import InvalidObservation

NUM_KEYPOINTS = 21

Handedness = Literal["Left", "Right"]
Match = Tuple[str, float]  # (symbol, score)


@dataclass(frozen=True)
class Keypoint:
    """A single hand joint position. x/y normalized or pixel-scaled, z relative depth."""
    x: float
    y: float
    z: float = 0.0


@dataclass(frozen=True)
class HandObservation:
    """One detected hand in one frame."""
    keypoints: Tuple[Keypoint, ...]
    handedness: Optional[Handedness] = None
    timestamp: float = 0.0

    @property
    def is_valid(self) -> bool:
        if len(self.keypoints) != NUM_KEYPOINTS:
            return False
        return all(math.isfinite(v) for kp in self.keypoints for v in (kp.x, kp.y, kp.z))

    def validate(self) -> None:
        """Raise InvalidObservation unless the hand carries exactly 21 finite keypoints."""
        if len(self.keypoints) != NUM_KEYPOINTS:
            raise InvalidObservation(
                f"expected {NUM_KEYPOINTS} keypoints, got {len(self.keypoints)}"
            )
        if not self.is_valid:
            raise InvalidObservation("keypoint coordinates must be finite")


@dataclass(frozen=True)
class ClassificationResult:
    """Per-frame result of the frame classifier."""
    symbol: Optional[str]
    confidence: float
    ranked_matches: List[Match] = field(default_factory=list)
    is_special: bool = False

    @classmethod
    def empty(cls) -> "ClassificationResult":
        return cls(symbol=None, confidence=0.0)


@dataclass(frozen=True)
class SmoothedResult:
    """Stable result over the smoothing window. confidence is the mean of the winning votes."""
    symbol: Optional[str]
    confidence: float
    ranked_matches: List[Match] = field(default_factory=list)
    is_special: bool = False

    @classmethod
    def empty(cls) -> "SmoothedResult":
        return cls(symbol=None, confidence=0.0)


@dataclass(frozen=True)
class AppendLetter:
    """Commit: append one character to the accumulated text."""
    letter: str


@dataclass(frozen=True)
class Send:
    """Commit: flush the accumulated text to the voice collaborator."""
    text: str


Commit = Union[AppendLetter, Send]


@dataclass
class FrameOutcome:
    """Everything one processed frame exposes to consumers."""
    t_now: float
    hands_count: int
    raw: ClassificationResult
    stable: SmoothedResult
    letter_progress: float  # 0..100
    send_progress: float  # 0..100
    commits: List[Commit] = field(default_factory=list)
    text: str = ""
    hands: List[HandObservation] = field(default_factory=list)


@runtime_checkable
class HandEstimatorProto(Protocol):
    """External pose-estimation capability producing up to two hands per frame."""

    async def load(self) -> None:
        """Initialize the backend. Failure here is fatal to the session."""
        ...

    async def estimate_hands(self, frame: Any) -> List[HandObservation]:
        """Return the hands detected in one frame."""
        ...


@runtime_checkable
class DeliveryProto(Protocol):
    """External capability that receives flushed text."""

    async def deliver(self, text: str) -> None:
        """Deliver the text. Raises on failure."""
        ...
