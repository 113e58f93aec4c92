from collections import deque
from typing import Deque, Optional

from terrain_wfc.wave import WaveState


class Backtracker:
    """
    Stack of wave snapshots taken before each collapse.

    Each snapshot is an independent copy of the domain grid. With a
    max_depth, the oldest snapshot is dropped once the stack is full.
    """

    def __init__(self, max_depth: Optional[int] = None) -> None:
        self.max_depth = max_depth
        self._stack: Deque[WaveState] = deque(maxlen=max_depth)
        self.pushes = 0
        self.pops = 0
        self.max_size = 0

    def push(self, wave: WaveState) -> None:
        if self.max_depth == 0:
            return
        self._stack.append(wave.copy())
        self.pushes += 1
        self.max_size = max(self.max_size, len(self._stack))

    def pop(self) -> Optional[WaveState]:
        """Most recent snapshot, or None when the stack is empty"""
        if not self._stack:
            return None
        self.pops += 1
        return self._stack.pop()

    def clear(self) -> None:
        self._stack.clear()

    def __len__(self) -> int:
        return len(self._stack)

    def __bool__(self) -> bool:
        return bool(self._stack)
