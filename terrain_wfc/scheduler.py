from typing import NamedTuple, Optional, Tuple

import numpy as np

from terrain_wfc.wave import WaveState


class Choice(NamedTuple):
    x: int
    y: int
    pattern_id: int


# Find the cell with the lowest entropy (fewest possibilities)
def find_lowest_entropy_cell(wave: WaveState) -> Optional[Tuple[int, int]]:
    """
    Returns (x, y) of the first uncollapsed cell, in row-major order, whose
    domain is smallest, or None when no cell has more than one possibility.
    Ties never consult the RNG.
    """
    n_possibilities = wave.entropies().astype(np.float64)
    n_possibilities = np.where(n_possibilities < 2, np.inf, n_possibilities)  # Ignore cells with 0 or 1 possibility
    if not np.any(np.isfinite(n_possibilities)):
        return None
    # argmin returns the first minimum of the row-major flattening
    y, x = np.unravel_index(np.argmin(n_possibilities), n_possibilities.shape)
    return int(x), int(y)


def choose_pattern(wave: WaveState, x: int, y: int, rng: np.random.Generator) -> int:
    """Draw one pattern ID uniformly from the domain of (x, y)"""
    possible_patterns = np.flatnonzero(wave.data[y, x])
    return int(possible_patterns[rng.integers(len(possible_patterns))])


def step(wave: WaveState, rng: np.random.Generator) -> Optional[Choice]:
    """Pick the next cell to collapse and the pattern to collapse it to"""
    cell = find_lowest_entropy_cell(wave)
    if cell is None:
        return None
    x, y = cell
    return Choice(x, y, choose_pattern(wave, x, y, rng))
