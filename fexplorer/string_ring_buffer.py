from collections import deque
from typing import Deque, Iterator


class StringRingBuffer:
    """Fixed-capacity FIFO of display strings; the oldest entry is dropped on overflow."""

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._buffer: Deque[str] = deque(maxlen=capacity)

    def push(self, text: str) -> None:
        self._buffer.append(text)

    def __len__(self) -> int:
        return len(self._buffer)

    def __iter__(self) -> Iterator[str]:
        return iter(self._buffer)
