"""
Hand landmark detection using MediaPipe.
"""
import asyncio
import time
from typing import Any, List, Optional, Tuple

import cv2
import numpy as np

from .types import HandObservation, Keypoint

HAND_CONNECTIONS: List[Tuple[int, int]] = [
    (0, 1), (1, 2), (2, 3), (3, 4),  # thumb
    (0, 5), (5, 6), (6, 7), (7, 8),  # index
    (0, 9), (9, 10), (10, 11), (11, 12),  # middle
    (0, 13), (13, 14), (14, 15), (15, 16),  # ring
    (0, 17), (17, 18), (18, 19), (19, 20),  # pinky
    (5, 9), (9, 13), (13, 17),  # palm
]


class MediaPipeHandEstimator:
    """Hand landmark estimator using MediaPipe Hands."""

    def __init__(self, max_num_hands: int = 2, min_detection_conf: float = 0.6, min_tracking_conf: float = 0.6):
        """
        Configure the estimator. The model is created by load().

        Args:
            max_num_hands: Maximum number of hands to detect
            min_detection_conf: Minimum confidence for hand detection
            min_tracking_conf: Minimum confidence for hand tracking
        """
        self.max_num_hands = max_num_hands
        self.min_detection_conf = min_detection_conf
        self.min_tracking_conf = min_tracking_conf
        self.hands = None

    async def load(self) -> None:
        """Create the MediaPipe Hands model."""
        import mediapipe as mp  # type: ignore

        self.hands = mp.solutions.hands.Hands(
            static_image_mode=False,
            max_num_hands=self.max_num_hands,
            min_detection_confidence=self.min_detection_conf,
            min_tracking_confidence=self.min_tracking_conf
        )

    def close(self) -> None:
        if self.hands is not None:
            self.hands.close()
            self.hands = None

    async def estimate_hands(self, frame: Any) -> List[HandObservation]:
        """
        Detect hands in a BGR frame.

        Returns:
            One observation per detected hand with keypoints in [0..1] range
        """
        if frame is None:
            return []
        if self.hands is None:
            raise RuntimeError("MediaPipeHandEstimator.load() has not been called")
        return await asyncio.to_thread(self._process, frame)

    def _process(self, frame_bgr: np.ndarray) -> List[HandObservation]:
        # MediaPipe expects RGB
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        results = self.hands.process(frame_rgb)
        if not results.multi_hand_landmarks:
            return []

        timestamp = time.time()
        handedness_list = results.multi_handedness or []
        observations = []
        for i, hand_landmarks in enumerate(results.multi_hand_landmarks):
            label: Optional[str] = None
            if i < len(handedness_list) and handedness_list[i].classification:
                label = getattr(handedness_list[i].classification[0], "label", None)
            keypoints = tuple(
                Keypoint(float(lm.x), float(lm.y), float(getattr(lm, "z", 0.0)))
                for lm in hand_landmarks.landmark
            )
            observations.append(HandObservation(keypoints=keypoints, handedness=label, timestamp=timestamp))
        return observations


def draw_landmarks(frame: np.ndarray, hands: List[HandObservation]) -> np.ndarray:
    """
    Draw hand skeletons on the frame.

    Args:
        frame: Input frame
        hands: Observations with keypoints in [0..1] range

    Returns:
        Frame with landmarks drawn
    """
    height, width = frame.shape[:2]
    for hand in hands:
        points = [(int(kp.x * width), int(kp.y * height)) for kp in hand.keypoints]
        for a, b in HAND_CONNECTIONS:
            if a < len(points) and b < len(points):
                cv2.line(frame, points[a], points[b], (0, 255, 0), 2)
        for px, py in points:
            cv2.circle(frame, (px, py), 3, (0, 0, 255), -1)
    return frame
