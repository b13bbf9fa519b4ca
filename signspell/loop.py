"""
Cooperative recognition loop: one classification pass per tick, never overlapping.
"""
import asyncio
import logging
import time
from typing import Any, Callable, Optional, Set, Tuple

from .errors import BackendUnavailable, TransientEstimationError
from .gestures import RecognitionSession
from .types import DeliveryProto, FrameOutcome, HandEstimatorProto, Send

logger = logging.getLogger(__name__)

FrameCallback = Callable[[FrameOutcome], Any]


class RecognitionLoop:
    """
    Drives a RecognitionSession from an asynchronous hand estimator.

    Each iteration grabs one frame, awaits one estimate, feeds the result
    through the session and then waits out the rest of `frame_interval_ms`,
    measured from the start of the iteration. The next iteration never begins
    before the current one finishes.

    The frame callback is looked up at dispatch time, so swapping it with
    set_callback() takes effect on the next processed frame without a restart.
    """

    def __init__(self, session: RecognitionSession, estimator: HandEstimatorProto,
                 frame_source: Callable[[], Any], delivery: Optional[DeliveryProto] = None,
                 frame_interval_ms: int = 100, frame_wh: Optional[Tuple[int, int]] = None,
                 on_frame: Optional[FrameCallback] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.session = session
        self.estimator = estimator
        self.frame_source = frame_source
        self.delivery = delivery
        self.frame_interval_ms = frame_interval_ms
        self.frame_wh = frame_wh
        self.clock = clock

        self._callback: Optional[FrameCallback] = on_frame
        self._task: Optional[asyncio.Task] = None
        self._loaded = False
        self._deliveries: Set[asyncio.Task] = set()
        self.last_outcome: Optional[FrameOutcome] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def is_sending(self) -> bool:
        return any(not task.done() for task in self._deliveries)

    def set_callback(self, callback: Optional[FrameCallback]) -> None:
        self._callback = callback

    async def start(self) -> None:
        """
        Load the backend (once) and start scheduling iterations.

        Raises:
            BackendUnavailable: if the estimator fails to load
        """
        if self.is_running:
            return
        if not self._loaded:
            try:
                await self.estimator.load()
            except Exception as e:
                logger.error(f"❌ Hand estimation backend failed to load: {e}")
                raise BackendUnavailable(str(e)) from e
            self._loaded = True
            logger.info("✅ Hand estimation backend ready")

        self._task = asyncio.create_task(self._run())
        logger.info("🚀 Recognition loop started")

    async def stop(self) -> None:
        """Stop scheduling iterations and drop in-progress holds. No commit fires."""
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            logger.info("🛑 Recognition loop stopped")
        self.session.reset()

    async def pause(self) -> None:
        await self.stop()

    async def resume(self) -> None:
        await self.start()

    async def drain(self) -> None:
        """Wait for in-flight deliveries to finish."""
        if self._deliveries:
            await asyncio.gather(*list(self._deliveries), return_exceptions=True)

    async def run_once(self) -> Optional[FrameOutcome]:
        """
        Run a single classification pass.

        Returns:
            The frame outcome, or None if the frame was skipped
        """
        try:
            frame = self.frame_source()
            hands = await self.estimator.estimate_hands(frame)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            error = TransientEstimationError(str(e))
            logger.warning(f"⚠️ Skipping frame: {error}")
            return None

        try:
            outcome = self.session.process_frame(hands, self.clock(), self.frame_wh)
        except Exception:
            logger.exception("Frame processing failed, skipping frame")
            return None
        self.last_outcome = outcome

        for commit in outcome.commits:
            if isinstance(commit, Send):
                self._start_delivery(commit.text)

        callback = self._callback
        if callback is not None:
            try:
                callback(outcome)
            except Exception:
                logger.exception("Frame callback failed")

        return outcome

    async def _run(self) -> None:
        interval_s = self.frame_interval_ms / 1000.0
        while True:
            started = self.clock()
            await self.run_once()
            remaining = interval_s - (self.clock() - started)
            await asyncio.sleep(max(0.0, remaining))

    def _start_delivery(self, text: str) -> None:
        if self.delivery is None:
            logger.info(f"📝 Message ready (no delivery configured): {text}")
            return
        task = asyncio.create_task(self._deliver(text))
        self._deliveries.add(task)
        task.add_done_callback(self._deliveries.discard)

    async def _deliver(self, text: str) -> None:
        logger.info(f"📤 Sending: {text}")
        try:
            await self.delivery.deliver(text)
            logger.info("✅ Message delivered")
        except Exception as e:
            logger.warning(f"⚠️ Delivery failed: {e}")
