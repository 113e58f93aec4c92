from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from terrain_wfc.backtrack import Backtracker
from terrain_wfc.config import WfcConfig
from terrain_wfc.grid import Algorithm, Grid, Tile
from terrain_wfc.patterns import PatternCatalog
from terrain_wfc.propagator import Propagator
from terrain_wfc.scheduler import Choice, step
from terrain_wfc.wave import WaveState

# Walled rooms joined by corridors, used by Wfc.generate() when no catalog is given
DEFAULT_SAMPLE = [
    "############",
    "#....#######",
    "#....#######",
    "#..........#",
    "#....####..#",
    "######..#..#",
    "######..#..#",
    "#.......#..#",
    "#.......####",
    "############",
]


class SearchState(Enum):
    PROPAGATING = "propagating"
    SELECTING = "selecting"
    COLLAPSING = "collapsing"
    CONTRADICTION = "contradiction"
    SUCCESS = "success"
    ABANDONED = "abandoned"


@dataclass
class WfcStats:
    state: SearchState = SearchState.PROPAGATING
    num_patterns: int = 0
    collapses: int = 0
    contradictions: int = 0
    backtracks: int = 0
    max_stack_depth: int = 0
    # Effective domain shrinks, summed over the run and for the largest single sweep
    propagation_steps: int = 0
    max_propagation_steps: int = 0

    @property
    def succeeded(self) -> bool:
        return self.state is SearchState.SUCCESS


def default_catalog(pattern_size: int) -> PatternCatalog:
    return PatternCatalog.extract(Grid.from_strings(DEFAULT_SAMPLE), pattern_size)


def materialize(wave: WaveState, catalog: PatternCatalog, grid: Grid) -> None:
    """
    Write the wave into the output grid.

    Collapsed cells take the center tile of their pattern. Cells that are
    still undecided or empty (only after an abandoned search) are set to wall.
    """
    entropies = wave.entropies()
    for y in range(min(wave.height, grid.height)):
        for x in range(min(wave.width, grid.width)):
            if entropies[y, x] == 1:
                pattern_id = int(np.argmax(wave.data[y, x]))
                grid.set(x, y, catalog[pattern_id].center())
            else:
                grid.set(x, y, Tile.WALL)


def search(width: int, height: int, catalog: PatternCatalog, seed: int,
           config: Optional[WfcConfig] = None) -> Tuple[WaveState, WfcStats]:
    """
    Run the collapse loop on a fresh wave.

    Starts by restricting the outer ring to all-wall patterns (when the
    catalog has any), then alternates propagation, cell selection and
    collapse. A contradiction restores the latest snapshot when
    backtracking is enabled, otherwise the search is abandoned.

    Args:
        width: Wave width
        height: Wave height
        catalog: Patterns and their adjacency rules
        seed: Random seed
        config: Generator options, defaults if None

    Returns:
        Tuple[WaveState, WfcStats]: final wave and search counters
    """
    config = config if config is not None else WfcConfig()
    rng = np.random.default_rng(seed)
    wave = WaveState(width, height, len(catalog))
    propagator = Propagator(catalog.compatibility)
    backtracker = Backtracker(config.max_backtrack_depth)
    stats = WfcStats(num_patterns=len(catalog))

    if config.verbose:
        print(f"WFC: {width}x{height}, {len(catalog)} patterns, seed {seed}, "
              f"backtracking {'on' if config.enable_backtracking else 'off'}")

    wave.seed_border(catalog.wall_pattern_ids())

    state = SearchState.PROPAGATING
    choice: Optional[Choice] = None
    while state not in (SearchState.SUCCESS, SearchState.ABANDONED):
        if state is SearchState.PROPAGATING:
            consistent = propagator.propagate(wave)
            stats.propagation_steps += propagator.steps
            stats.max_propagation_steps = max(stats.max_propagation_steps, propagator.steps)
            state = SearchState.SELECTING if consistent else SearchState.CONTRADICTION

        elif state is SearchState.SELECTING:
            choice = step(wave, rng)
            state = SearchState.SUCCESS if choice is None else SearchState.COLLAPSING

        elif state is SearchState.COLLAPSING:
            if config.enable_backtracking:
                backtracker.push(wave)
            wave.collapse(choice.x, choice.y, choice.pattern_id)
            stats.collapses += 1
            state = SearchState.PROPAGATING

        elif state is SearchState.CONTRADICTION:
            stats.contradictions += 1
            snapshot = None
            if config.enable_backtracking and not _budget_spent(stats, config):
                snapshot = backtracker.pop()
            if snapshot is None:
                state = SearchState.ABANDONED
            else:
                wave = snapshot
                stats.backtracks += 1
                if config.verbose:
                    print(f"WFC: contradiction, backtracking (depth {len(backtracker)})")
                state = SearchState.PROPAGATING

    stats.max_stack_depth = backtracker.max_size
    stats.state = state
    backtracker.clear()

    if config.verbose:
        print(f"WFC: {state.value} after {stats.collapses} collapses, "
              f"{stats.backtracks} backtracks, max stack depth {stats.max_stack_depth}")

    return wave, stats


def _budget_spent(stats: WfcStats, config: WfcConfig) -> bool:
    return config.max_backtracks is not None and stats.backtracks >= config.max_backtracks


class Wfc(Algorithm):
    """
    Wave Function Collapse algorithm implementation

    Learns nothing by itself: patterns come from a PatternCatalog, either
    passed in or extracted from DEFAULT_SAMPLE. Every call owns its own wave
    and snapshot stack, so one instance can be shared between callers.
    """

    def __init__(self, config: Optional[WfcConfig] = None) -> None:
        self.config = config if config is not None else WfcConfig()

    def name(self) -> str:
        return "WFC"

    def generate(self, grid: Grid, seed: int) -> WfcStats:
        """Fill the grid using the built-in sample patterns"""
        return self.generate_with_patterns(grid, default_catalog(self.config.pattern_size), seed)

    def generate_with_patterns(self, grid: Grid, catalog: PatternCatalog, seed: int) -> WfcStats:
        """
        Fill the grid with patterns from the catalog.

        The grid is written whether the search succeeds or is abandoned.
        """
        wave, stats = search(grid.width, grid.height, catalog, seed, self.config)
        materialize(wave, catalog, grid)
        return stats
