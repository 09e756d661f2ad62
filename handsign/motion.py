"""
Bounded window of recent motion frames.
"""
from collections import deque
from typing import Deque, List

from .types import MotionFrame

DEFAULT_CAPACITY = 20  # ~1 s at 20 fps


class MotionBuffer:
    """FIFO buffer of MotionFrame snapshots; the oldest frame is dropped first."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"Buffer capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._frames: Deque[MotionFrame] = deque(maxlen=capacity)

    def append(self, frame: MotionFrame) -> None:
        self._frames.append(frame)

    def clear(self) -> None:
        self._frames.clear()

    def last(self, k: int) -> List[MotionFrame]:
        """
        Return the most recent ``k`` frames, oldest first.

        Fewer frames are returned if the buffer holds less than ``k``.
        """
        if k <= 0:
            return []
        return self.snapshot()[-k:]

    def snapshot(self) -> List[MotionFrame]:
        """All buffered frames, oldest first."""
        return list(self._frames)

    def __len__(self) -> int:
        return len(self._frames)
