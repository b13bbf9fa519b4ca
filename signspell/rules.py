"""
Static fingerspelling rule set.

Every letter is a weighted template over the five fingers: a target curl per
finger and, for some fingers, acceptable pointing directions. Templates are
scored, never matched exactly, so natural variation in a hand still lands on
the right letter.

J and Z are traced in the air and cannot be read from a single pose, so they
have no rule.

The two-hand send gesture uses OPEN_PALM, which is nearly the same template as
the letter B (flat hand, fingers extended). The two never compete: OPEN_PALM is
only evaluated when exactly two hands are in frame and both pass it, while B is
only evaluated through ordinary one-hand classification. A single flat palm is
therefore always free to read as B.
"""
from dataclasses import dataclass
from enum import Enum, IntEnum
from types import MappingProxyType
from typing import Dict, Mapping, Tuple


class Finger(IntEnum):
    THUMB = 0
    INDEX = 1
    MIDDLE = 2
    RING = 3
    PINKY = 4


class FingerCurl(Enum):
    NO_CURL = "NoCurl"
    HALF_CURL = "HalfCurl"
    FULL_CURL = "FullCurl"


class FingerDirection(Enum):
    """Pointing direction bins. The value is the bin center in degrees, y axis up."""
    HORIZONTAL_RIGHT = 0
    DIAGONAL_UP_RIGHT = 45
    VERTICAL_UP = 90
    DIAGONAL_UP_LEFT = 135
    HORIZONTAL_LEFT = 180
    DIAGONAL_DOWN_LEFT = 225
    VERTICAL_DOWN = 270
    DIAGONAL_DOWN_RIGHT = 315


CurlTarget = Tuple[FingerCurl, float]  # (curl, weight)
DirectionTarget = Tuple[Finger, FingerDirection, float]  # (finger, direction, weight)


@dataclass(frozen=True)
class GestureRule:
    """Scoring template for one symbol."""
    symbol: str
    curls: Tuple[CurlTarget, CurlTarget, CurlTarget, CurlTarget, CurlTarget]
    directions: Tuple[DirectionTarget, ...] = ()

    def direction_targets(self) -> Dict[Finger, Tuple[Tuple[FingerDirection, float], ...]]:
        """Group direction targets by finger."""
        grouped: Dict[Finger, Tuple[Tuple[FingerDirection, float], ...]] = {}
        for finger, direction, weight in self.directions:
            grouped[finger] = grouped.get(finger, ()) + ((direction, weight),)
        return grouped


NO = FingerCurl.NO_CURL
HALF = FingerCurl.HALF_CURL
FULL = FingerCurl.FULL_CURL

UP = FingerDirection.VERTICAL_UP
LEFT = FingerDirection.HORIZONTAL_LEFT
RIGHT = FingerDirection.HORIZONTAL_RIGHT
UP_LEFT = FingerDirection.DIAGONAL_UP_LEFT
UP_RIGHT = FingerDirection.DIAGONAL_UP_RIGHT
DOWN_LEFT = FingerDirection.DIAGONAL_DOWN_LEFT
DOWN_RIGHT = FingerDirection.DIAGONAL_DOWN_RIGHT

T, I, M, R, P = Finger

OPEN_PALM = "OPEN_PALM"

# symbol: (thumb, index, middle, ring, pinky), directions
_LETTER_TABLE = (
    # fist, thumb alongside
    ("A", ((NO, 1.0), (FULL, 1.0), (FULL, 1.0), (FULL, 1.0), (FULL, 1.0)), ()),
    # flat hand, thumb across palm
    ("B", ((HALF, 1.0), (NO, 1.0), (NO, 1.0), (NO, 1.0), (NO, 1.0)),
     ((I, UP, 0.7), (M, UP, 0.7))),
    ("C", ((NO, 1.0), (HALF, 1.0), (HALF, 1.0), (HALF, 1.0), (HALF, 1.0)), ()),
    ("D", ((HALF, 0.8), (NO, 1.0), (FULL, 1.0), (FULL, 1.0), (FULL, 1.0)),
     ((I, UP, 0.7),)),
    ("E", ((HALF, 1.0), (FULL, 1.0), (FULL, 1.0), (FULL, 1.0), (FULL, 1.0)), ()),
    # thumb and index circle, three fingers up
    ("F", ((HALF, 0.8), (FULL, 1.0), (NO, 1.0), (NO, 1.0), (NO, 1.0)), ()),
    ("G", ((NO, 1.0), (NO, 1.0), (FULL, 1.0), (FULL, 1.0), (FULL, 1.0)),
     ((I, LEFT, 0.7), (I, RIGHT, 0.7))),
    ("H", ((HALF, 0.8), (NO, 1.0), (NO, 1.0), (FULL, 1.0), (FULL, 1.0)),
     ((I, LEFT, 0.7), (I, RIGHT, 0.7))),
    ("I", ((HALF, 0.8), (FULL, 1.0), (FULL, 1.0), (FULL, 1.0), (NO, 1.0)),
     ((P, UP, 0.7),)),
    ("K", ((NO, 0.8), (NO, 1.0), (NO, 1.0), (FULL, 1.0), (FULL, 1.0)),
     ((I, UP_LEFT, 0.7), (I, UP_RIGHT, 0.7))),
    ("L", ((NO, 1.0), (NO, 1.0), (FULL, 1.0), (FULL, 1.0), (FULL, 1.0)),
     ((I, UP, 0.7),)),
    ("M", ((HALF, 0.8), (FULL, 1.0), (FULL, 1.0), (FULL, 1.0), (FULL, 1.0)), ()),
    ("N", ((HALF, 0.8), (FULL, 1.0), (FULL, 1.0), (FULL, 1.0), (FULL, 1.0)), ()),
    ("O", ((HALF, 0.8), (HALF, 1.0), (HALF, 1.0), (HALF, 1.0), (HALF, 1.0)), ()),
    # K pointing down
    ("P", ((NO, 0.8), (NO, 1.0), (NO, 1.0), (FULL, 1.0), (FULL, 1.0)),
     ((I, DOWN_LEFT, 0.7), (I, DOWN_RIGHT, 0.7))),
    # G pointing down
    ("Q", ((NO, 1.0), (NO, 1.0), (FULL, 1.0), (FULL, 1.0), (FULL, 1.0)),
     ((I, DOWN_LEFT, 0.7), (I, DOWN_RIGHT, 0.7))),
    ("R", ((HALF, 0.8), (NO, 1.0), (NO, 1.0), (FULL, 1.0), (FULL, 1.0)),
     ((I, UP, 0.7),)),
    ("S", ((HALF, 1.0), (FULL, 1.0), (FULL, 1.0), (FULL, 1.0), (FULL, 1.0)), ()),
    ("T", ((HALF, 1.0), (FULL, 1.0), (FULL, 1.0), (FULL, 1.0), (FULL, 1.0)), ()),
    ("U", ((HALF, 0.8), (NO, 1.0), (NO, 1.0), (FULL, 1.0), (FULL, 1.0)),
     ((I, UP, 0.7), (M, UP, 0.7))),
    ("V", ((HALF, 0.8), (NO, 1.0), (NO, 1.0), (FULL, 1.0), (FULL, 1.0)),
     ((I, UP_LEFT, 0.7), (I, UP_RIGHT, 0.7))),
    ("W", ((HALF, 0.8), (NO, 1.0), (NO, 1.0), (NO, 1.0), (FULL, 1.0)),
     ((I, UP, 0.7),)),
    # hooked index
    ("X", ((HALF, 0.8), (HALF, 1.0), (FULL, 1.0), (FULL, 1.0), (FULL, 1.0)), ()),
    ("Y", ((NO, 1.0), (FULL, 1.0), (FULL, 1.0), (FULL, 1.0), (NO, 1.0)), ()),
)

LETTER_RULES: Tuple[GestureRule, ...] = tuple(
    GestureRule(symbol=symbol, curls=curls, directions=directions)
    for symbol, curls, directions in _LETTER_TABLE
)

OPEN_PALM_RULE = GestureRule(
    symbol=OPEN_PALM,
    curls=((NO, 1.0), (NO, 1.0), (NO, 1.0), (NO, 1.0), (NO, 1.0)),
)

SUPPORTED_LETTERS: Tuple[str, ...] = tuple(rule.symbol for rule in LETTER_RULES)

RULES: Mapping[str, GestureRule] = MappingProxyType(
    {rule.symbol: rule for rule in LETTER_RULES + (OPEN_PALM_RULE,)}
)
