"""
Webcam fingerspelling application.
"""
import argparse
import asyncio
import logging
from typing import Optional

import cv2
import numpy as np

from .config import load_config
from .delivery import ElevenLabsDelivery, MockDelivery
from .errors import BackendUnavailable
from .gestures import RecognitionSession
from .landmarks import MediaPipeHandEstimator, draw_landmarks
from .loop import RecognitionLoop
from .types import FrameOutcome

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DISPLAY_INTERVAL_S = 0.03


class SignSpellApp:
    """Main application class for fingerspelling recognition."""

    def __init__(self, config_path: Optional[str] = None, speak: bool = False):
        """Initialize the application with configuration."""
        self.config = load_config(config_path)
        self.estimator = MediaPipeHandEstimator(
            max_num_hands=self.config.mediapipe.max_num_hands,
            min_detection_conf=self.config.mediapipe.min_detection_confidence,
            min_tracking_conf=self.config.mediapipe.min_tracking_confidence
        )

        if speak:
            delivery = ElevenLabsDelivery(self.config.voice)
            logger.info("🔊 Using ElevenLabs voice delivery")
        else:
            delivery = MockDelivery()

        self.session = RecognitionSession(self.config)

        self.cap = cv2.VideoCapture(self.config.camera.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.camera.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.camera.height)
        if not self.cap.isOpened():
            raise RuntimeError(f"Failed to open camera {self.config.camera.index}")

        self.frame: Optional[np.ndarray] = None
        self.loop = RecognitionLoop(
            self.session,
            self.estimator,
            frame_source=self._read_frame,
            delivery=delivery,
            frame_interval_ms=self.config.recognition.frame_interval_ms,
            frame_wh=(self.config.camera.width, self.config.camera.height),
            on_frame=self._on_frame,
        )

    def _read_frame(self) -> Optional[np.ndarray]:
        ret, frame = self.cap.read()
        if not ret:
            logger.warning("Failed to read frame from camera")
            return None
        self.frame = frame
        self.loop.frame_wh = (frame.shape[1], frame.shape[0])
        return frame

    def _on_frame(self, outcome: FrameOutcome) -> None:
        for commit in outcome.commits:
            logger.info(f"✍️  {commit} | text: {outcome.text!r}")

    async def run(self):
        """Run the display loop while recognition runs in the background."""
        logger.info(f"Starting {self.config.display.window_name}")
        logger.info("  - Hold a letter for %.1fs to add it", self.config.letter_track.hold_ms / 1000)
        logger.info("  - Hold both palms open for %.1fs to send", self.config.send_track.hold_ms / 1000)
        logger.info("  - space = add space, backspace = delete, c = clear, q = quit")

        try:
            await self.loop.start()
        except BackendUnavailable as e:
            logger.error(f"Recognition unavailable: {e}")
            return

        try:
            while True:
                await asyncio.sleep(DISPLAY_INTERVAL_S)
                if self.frame is not None:
                    cv2.imshow(self.config.display.window_name, self._render(self.frame.copy()))

                key = cv2.waitKey(1) & 0xFF
                if key == ord('q'):
                    break
                if key == ord(' '):
                    self.session.buffer.add_space()
                elif key == 8:
                    self.session.buffer.backspace()
                elif key == ord('c'):
                    self.session.buffer.clear()
        finally:
            await self.loop.stop()
            await self.loop.drain()
            self.estimator.close()
            self.cap.release()
            cv2.destroyAllWindows()

    def _render(self, frame: np.ndarray) -> np.ndarray:
        outcome = self.loop.last_outcome
        status_text = "No hand detected"
        progress_text = ""

        if outcome is not None and self.config.display.show_landmarks:
            frame = draw_landmarks(frame, outcome.hands)

        if outcome is not None and outcome.hands_count:
            if outcome.stable.is_special:
                status_text = "SEND gesture"
                progress_text = f"send {outcome.send_progress:.0f}%"
            elif outcome.stable.symbol:
                status_text = f"{outcome.stable.symbol} ({outcome.stable.confidence:.2f})"
                progress_text = f"hold {outcome.letter_progress:.0f}%"
            else:
                status_text = f"{outcome.hands_count} hand(s), no letter"

        text = self.session.buffer.text
        if self.loop.is_sending:
            progress_text += " | sending..."

        cv2.putText(frame, status_text, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)
        cv2.putText(frame, progress_text, (10, 60), cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
        cv2.putText(frame, f"Text: {text}", (10, frame.shape[0] - 20), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 255, 0), 2)
        return frame


async def main():
    """Entry point for the application."""
    parser = argparse.ArgumentParser(description="Fingerspelling recognizer.")
    parser.add_argument("--config", help="Path to a YAML config overriding the defaults")
    parser.add_argument("--speak", action="store_true", help="Speak sent messages with ElevenLabs")
    args = parser.parse_args()

    try:
        app = SignSpellApp(config_path=args.config, speak=args.speak)
        await app.run()
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
