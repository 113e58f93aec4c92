from collections import deque
from typing import Deque, Tuple

import numpy as np

from terrain_wfc.patterns import DIRECTIONS_X, DIRECTIONS_Y
from terrain_wfc.wave import WaveState


class Propagator:
    """
    Propagator class to propagate constraints

    Runs a full arc-consistency sweep: a cell goes back on the queue every
    time its domain shrinks, so a cell can be visited many times per call.
    """
    def __init__(self, compatibility: np.ndarray) -> None:
        """
        Initialize the propagator

        Args:
            compatibility: Adjacency rules [pattern, direction, pattern] = compatible
        """
        self.compatibility = compatibility
        # Number of effective domain shrinks made by the last propagate() call
        self.steps = 0

    def propagate(self, wave: WaveState) -> bool:
        """
        Propagate constraints outward from every collapsed cell.

        Returns:
            bool: True if the wave is still consistent, False if some cell
                  ended up with an empty domain (contradiction)
        """
        self.steps = 0
        entropies = wave.entropies()
        queue: Deque[Tuple[int, int]] = deque(
            (int(x), int(y)) for y, x in np.argwhere(entropies == 1)
        )
        queued = set(queue)

        while queue:
            x, y = queue.popleft()
            queued.discard((x, y))
            current = wave.data[y, x]

            for direction in range(4):
                nx = x + int(DIRECTIONS_X[direction])
                ny = y + int(DIRECTIONS_Y[direction])
                if nx < 0 or nx >= wave.width or ny < 0 or ny >= wave.height:
                    continue

                # Union of patterns allowed next to any pattern still possible here
                allowed = (current[:, None] & self.compatibility[:, direction, :]).any(axis=0)
                neighbor = wave.data[ny, nx]
                narrowed = neighbor & allowed

                if not np.any(narrowed):
                    wave.data[ny, nx] = narrowed
                    return False

                if np.any(narrowed != neighbor):
                    wave.data[ny, nx] = narrowed
                    self.steps += 1
                    if (nx, ny) not in queued:
                        queue.append((nx, ny))
                        queued.add((nx, ny))

        return True
