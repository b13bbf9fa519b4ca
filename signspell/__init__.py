"""
Fingerspelling Recognition Core

Turns a stream of 21-keypoint hand observations into debounced letters and a
two-hand send gesture, using rule-based pose scoring, majority-vote smoothing
and hold-to-commit tracks.
"""

__version__ = "0.1.0"

from .types import (
    Keypoint,
    HandObservation,
    ClassificationResult,
    SmoothedResult,
    AppendLetter,
    Send,
    FrameOutcome,
    HandEstimatorProto,
    DeliveryProto,
)
from .errors import InvalidObservation, BackendUnavailable, TransientEstimationError
from .config import load_config, Cfg
from .rules import RULES, LETTER_RULES, OPEN_PALM, OPEN_PALM_RULE, SUPPORTED_LETTERS
from .estimator import estimate
from .classifier import FrameClassifier
from .smoother import TemporalSmoother
from .gestures import HoldTrack, HoldState, RecognitionSession
from .transcript import TextBuffer, SavedMessage
from .loop import RecognitionLoop

__all__ = [
    "Keypoint",
    "HandObservation",
    "ClassificationResult",
    "SmoothedResult",
    "AppendLetter",
    "Send",
    "FrameOutcome",
    "HandEstimatorProto",
    "DeliveryProto",
    "InvalidObservation",
    "BackendUnavailable",
    "TransientEstimationError",
    "load_config",
    "Cfg",
    "RULES",
    "LETTER_RULES",
    "OPEN_PALM",
    "OPEN_PALM_RULE",
    "SUPPORTED_LETTERS",
    "estimate",
    "FrameClassifier",
    "TemporalSmoother",
    "HoldTrack",
    "HoldState",
    "RecognitionSession",
    "TextBuffer",
    "SavedMessage",
    "RecognitionLoop",
]
