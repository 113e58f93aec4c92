from terrain_wfc.backtrack import Backtracker
from terrain_wfc.config import WfcConfig, load_config, save_config
from terrain_wfc.grid import Algorithm, Grid, Tile
from terrain_wfc.patterns import (
    Pattern,
    PatternCatalog,
    build_compatibility,
    compatible,
    get_opposite_direction,
)
from terrain_wfc.propagator import Propagator
from terrain_wfc.scheduler import choose_pattern, find_lowest_entropy_cell, step
from terrain_wfc.wave import WaveState
from terrain_wfc.wfc import SearchState, Wfc, WfcStats, default_catalog, materialize, search

__version__ = "0.1.0"
