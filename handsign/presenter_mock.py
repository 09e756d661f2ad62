"""
Mock presenter that logs recognized signs instead of showing them.
"""
import logging

from .types import GestureKind

logger = logging.getLogger(__name__)


class MockPresenter:
    """Mock presenter that logs letters and gestures instead of rendering them."""

    def __init__(self):
        """Initialize the mock presenter."""
        self.letter_count = 0
        self.gesture_count = 0
        self.last_text = ""

    async def show_letter(self, letter: str, text: str) -> None:
        """Log a committed letter."""
        self.letter_count += 1
        self.last_text = text
        logger.info("[MockPresenter] Letter: %s text=%r (call #%d)", letter, text, self.letter_count)

    async def show_gesture(self, gesture: GestureKind, confidence: float) -> None:
        """Log an emitted gesture."""
        self.gesture_count += 1
        logger.info("[MockPresenter] Gesture: %s (%.2f) (call #%d)", gesture, confidence, self.gesture_count)

    def reset_counters(self) -> None:
        """Reset counters for testing."""
        self.letter_count = 0
        self.gesture_count = 0
        self.last_text = ""
