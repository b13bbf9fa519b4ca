"""
Scores one hand against the rule set.

The estimator is a pure function of the keypoints: it measures how curled each
finger is and where it points, then compares that pose with every rule
template and returns all rules ranked by score (0-10).
"""
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .rules import RULES, Finger, FingerCurl, FingerDirection, GestureRule
from .types import HandObservation, Keypoint, Match

MAX_SCORE = 10.0

# Angle at the middle joint, in degrees
NO_CURL_START_LIMIT = 130.0
HALF_CURL_START_LIMIT = 60.0

ADJACENT_DIRECTION_MATCH = 0.5

# (chain start, middle joint, tip)
CURL_JOINTS = {
    Finger.THUMB: (1, 3, 4),
    Finger.INDEX: (0, 6, 8),
    Finger.MIDDLE: (0, 10, 12),
    Finger.RING: (0, 14, 16),
    Finger.PINKY: (0, 18, 20),
}

# (base, tip)
DIRECTION_JOINTS = {
    Finger.THUMB: (2, 4),
    Finger.INDEX: (5, 8),
    Finger.MIDDLE: (9, 12),
    Finger.RING: (13, 16),
    Finger.PINKY: (17, 20),
}

_DIRECTION_BINS = sorted(FingerDirection, key=lambda d: d.value)


@dataclass(frozen=True)
class HandPose:
    """Measured curl and direction of each finger, indexed by Finger."""
    curls: Tuple[FingerCurl, ...]
    directions: Tuple[FingerDirection, ...]
    curl_angles: Tuple[float, ...]


def keypoints_to_array(keypoints: Sequence[Keypoint]) -> np.ndarray:
    return np.array([[kp.x, kp.y, kp.z] for kp in keypoints], dtype=float)


def joint_angle(start: np.ndarray, mid: np.ndarray, end: np.ndarray) -> float:
    """Angle at `mid` between the segments to `start` and `end`, in degrees."""
    a = start - mid
    b = end - mid
    norms = np.linalg.norm(a) * np.linalg.norm(b)
    if norms == 0:
        # Degenerate chain, read as straight
        return 180.0
    cos_angle = float(np.clip(np.dot(a, b) / norms, -1.0, 1.0))
    return math.degrees(math.acos(cos_angle))


def curl_from_angle(angle: float) -> FingerCurl:
    if angle > NO_CURL_START_LIMIT:
        return FingerCurl.NO_CURL
    if angle > HALF_CURL_START_LIMIT:
        return FingerCurl.HALF_CURL
    return FingerCurl.FULL_CURL


def direction_from_vector(vector: np.ndarray) -> FingerDirection:
    """
    Bin a base->tip vector into one of eight 45 degree directions.

    Image coordinates have y pointing down, so y is flipped before the angle
    is taken. Depth does not affect the bin.
    """
    angle = math.degrees(math.atan2(-vector[1], vector[0])) % 360.0
    index = int(((angle + 22.5) % 360.0) // 45.0)
    return _DIRECTION_BINS[index]


def direction_match(detected: FingerDirection, target: FingerDirection) -> float:
    diff = abs(detected.value - target.value) % 360
    diff = min(diff, 360 - diff)
    if diff == 0:
        return 1.0
    if diff == 45:
        return ADJACENT_DIRECTION_MATCH
    return 0.0


def measure_pose(points: np.ndarray) -> HandPose:
    """Measure a (21, 3) keypoint array."""
    angles = []
    directions = []
    for finger in Finger:
        start, mid, tip = CURL_JOINTS[finger]
        angles.append(joint_angle(points[start], points[mid], points[tip]))
        base, end = DIRECTION_JOINTS[finger]
        directions.append(direction_from_vector(points[end] - points[base]))
    return HandPose(
        curls=tuple(curl_from_angle(a) for a in angles),
        directions=tuple(directions),
        curl_angles=tuple(angles),
    )


def score_rule(pose: HandPose, rule: GestureRule) -> float:
    """Weighted template match on a 0-10 scale."""
    total = 0.0
    parameters = 0

    for finger in Finger:
        target_curl, weight = rule.curls[finger]
        parameters += 1
        if pose.curls[finger] is target_curl:
            total += weight

    for finger, targets in rule.direction_targets().items():
        parameters += 1
        detected = pose.directions[finger]
        total += max(weight * direction_match(detected, direction) for direction, weight in targets)

    if parameters == 0:
        return 0.0
    return total / parameters * MAX_SCORE


def estimate(hand: HandObservation, rules: Optional[Iterable[GestureRule]] = None) -> List[Match]:
    """
    Score one hand against every rule.

    Args:
        hand: Observation with 21 keypoints (pixel-scaled for direction fidelity)
        rules: Rules to score; defaults to the full rule set

    Returns:
        (symbol, score) pairs sorted by score, highest first. Ties keep rule order.
    """
    hand.validate()
    if rules is None:
        rules = RULES.values()
    pose = measure_pose(keypoints_to_array(hand.keypoints))
    scores = [(rule.symbol, score_rule(pose, rule)) for rule in rules]
    return sorted(scores, key=lambda match: match[1], reverse=True)
