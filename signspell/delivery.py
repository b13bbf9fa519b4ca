"""
Delivery targets for flushed text.
"""
import asyncio
import logging
import os
from typing import List, Optional

from dotenv import load_dotenv
from elevenlabs.client import ElevenLabs
from elevenlabs.play import play

from .config import VoiceConfig

logger = logging.getLogger(__name__)


class MockDelivery:
    """Mock delivery that logs messages instead of speaking them."""

    def __init__(self):
        """Initialize the mock delivery."""
        self.delivered: List[str] = []

    async def deliver(self, text: str) -> None:
        """Record the message instead of delivering it."""
        self.delivered.append(text)
        logger.info(f"[MockDelivery] Deliver: {text!r} (call #{len(self.delivered)})")

    def reset(self) -> None:
        """Forget recorded messages."""
        self.delivered.clear()


class ElevenLabsDelivery:
    """Speaks flushed text with ElevenLabs text-to-speech."""

    def __init__(self, cfg: VoiceConfig, api_key: Optional[str] = None):
        load_dotenv()
        api_key = api_key or os.getenv("ELEVEN_LABS_API_KEY")
        if not api_key:
            raise ValueError("ELEVEN_LABS_API_KEY not found in environment variables")
        self.cfg = cfg
        self.client = ElevenLabs(api_key=api_key)

    async def deliver(self, text: str) -> None:
        """Generate speech for the text and play it. Raises on failure."""
        await asyncio.to_thread(self._speak, text)

    def _speak(self, text: str) -> None:
        logger.info("🔊 Generating speech...")
        audio_generator = self.client.text_to_speech.convert(
            text=text,
            voice_id=self.cfg.voice_id,
            model_id=self.cfg.model_id,
            output_format=self.cfg.output_format,
        )
        audio_bytes = b"".join(audio_generator)
        logger.info(f"🎵 Playing audio ({len(audio_bytes)} bytes)...")
        play(audio_bytes)
