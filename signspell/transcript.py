"""
Accumulated text and the in-memory history of sent messages.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class SavedMessage:
    """A flushed message, kept for the current session only."""
    id: str
    text: str
    timestamp: datetime


class TextBuffer:
    """Letters committed so far, plus the messages already sent."""

    def __init__(self):
        self._text = ""
        self.saved: List[SavedMessage] = []  # newest first

    @property
    def text(self) -> str:
        return self._text

    @property
    def is_empty(self) -> bool:
        """Whitespace-only text counts as empty."""
        return not self._text.strip()

    def append(self, letter: str) -> None:
        self._text += letter

    def add_space(self) -> None:
        self._text += " "

    def backspace(self) -> None:
        self._text = self._text[:-1]

    def clear(self) -> None:
        self._text = ""

    def flush(self, now: Optional[datetime] = None) -> Optional[SavedMessage]:
        """
        Move the trimmed text into the saved history and clear the buffer.

        Returns:
            The saved message, or None if there was nothing to send
        """
        text = self._text.strip()
        if not text:
            return None
        message = SavedMessage(id=uuid.uuid4().hex[:12], text=text, timestamp=now or datetime.now())
        self.saved.insert(0, message)
        self._text = ""
        return message

    def delete(self, message_id: str) -> bool:
        """Remove a saved message. Returns False if the id is unknown."""
        for i, message in enumerate(self.saved):
            if message.id == message_id:
                del self.saved[i]
                return True
        return False
