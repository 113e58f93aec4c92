import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np

from terrain_wfc import (
    Grid,
    PatternCatalog,
    SearchState,
    Tile,
    Wfc,
    WfcConfig,
    materialize,
    search,
)

ROOM_SAMPLE = [
    "#####",
    "#...#",
    "#...#",
    "#...#",
    "#####",
]

FLOOR = [[1, 1, 1], [1, 1, 1], [1, 1, 1]]
PILLAR = [[1, 1, 1], [1, 0, 1], [1, 1, 1]]


def room_catalog():
    return PatternCatalog.extract(Grid.from_strings(ROOM_SAMPLE), 3)


def free_catalog():
    # Identical edges, so any arrangement is valid
    return PatternCatalog.from_patterns([FLOOR, PILLAR])


def dead_end_catalog():
    # Neither pattern can have anything to its right
    return PatternCatalog.from_patterns([
        [[0, 1], [0, 1]],
        [[0, 1], [1, 1]],
    ])


def test_generate_is_deterministic():
    catalog = room_catalog()
    wfc = Wfc(WfcConfig(max_backtracks=500))

    grid_a = Grid(9, 9)
    grid_b = Grid(9, 9)
    stats_a = wfc.generate_with_patterns(grid_a, catalog, 1)
    stats_b = wfc.generate_with_patterns(grid_b, catalog, 1)

    assert grid_a == grid_b
    assert stats_a == stats_b


def test_end_to_end_room_sample():
    catalog = room_catalog()
    assert len(catalog) >= 2

    grid = Grid(9, 9)
    stats = Wfc(WfcConfig(max_backtracks=500)).generate_with_patterns(grid, catalog, 1)

    assert stats.state in (SearchState.SUCCESS, SearchState.ABANDONED)
    assert stats.num_patterns == len(catalog)
    assert stats.max_propagation_steps <= 9 * 9 * len(catalog)


def test_success_collapses_every_cell():
    catalog = free_catalog()
    wave, stats = search(5, 4, catalog, 3, WfcConfig())

    assert stats.state is SearchState.SUCCESS
    assert stats.succeeded
    assert wave.is_fully_collapsed()
    assert np.all(wave.entropies() == 1)
    assert stats.collapses == 20
    assert stats.contradictions == 0
    assert stats.backtracks == 0
    assert stats.max_stack_depth == 20


def test_materialize_writes_pattern_centers():
    catalog = free_catalog()
    wave, _ = search(5, 4, catalog, 11)
    grid = Grid(5, 4, fill=Tile.FLOOR)
    materialize(wave, catalog, grid)

    for x, y, tile in grid.iter():
        (pattern_id,) = wave.domain(x, y)
        assert tile == catalog[pattern_id].center()


def test_generate_with_patterns_matches_search():
    catalog = free_catalog()
    grid = Grid(6, 6)
    Wfc().generate_with_patterns(grid, catalog, 5)
    wave, _ = search(6, 6, catalog, 5)
    expected = Grid(6, 6)
    materialize(wave, catalog, expected)
    assert grid == expected


def test_different_seeds_can_differ():
    catalog = free_catalog()
    grids = []
    for seed in range(5):
        grid = Grid(8, 8)
        Wfc().generate_with_patterns(grid, catalog, seed)
        grids.append(str(grid))
    assert len(set(grids)) > 1


def test_no_backtracking_abandons_on_first_contradiction():
    catalog = dead_end_catalog()
    grid = Grid(2, 1, fill=Tile.FLOOR)
    stats = Wfc(WfcConfig(enable_backtracking=False)).generate_with_patterns(grid, catalog, 0)

    assert stats.state is SearchState.ABANDONED
    assert stats.contradictions == 1
    assert stats.collapses == 1
    assert stats.backtracks == 0
    assert stats.max_stack_depth == 0
    # The emptied cell falls back to wall; the collapsed one keeps its center
    assert grid.get(1, 0) == Tile.WALL
    assert grid.get(0, 0) == Tile.FLOOR


def test_backtracking_retries_until_budget_is_spent():
    catalog = dead_end_catalog()
    wave, stats = search(2, 1, catalog, 0, WfcConfig(max_backtracks=3))

    assert stats.state is SearchState.ABANDONED
    assert stats.backtracks == 3
    assert stats.contradictions == 4
    assert stats.collapses == 4
    assert stats.max_stack_depth == 1
    assert wave.has_contradiction()


def test_contradiction_with_empty_stack_abandons():
    # A single pattern that cannot sit next to itself fails before any collapse
    catalog = PatternCatalog.from_patterns([[[0, 1], [0, 1]]])
    grid = Grid(2, 1)
    stats = Wfc(WfcConfig(enable_backtracking=True)).generate_with_patterns(grid, catalog, 0)

    assert stats.state is SearchState.ABANDONED
    assert stats.collapses == 0
    assert stats.backtracks == 0
    assert grid.get(1, 0) == Tile.WALL


def test_generate_walls_the_border():
    size = 15
    grid = Grid(size, size)
    stats = Wfc(WfcConfig(max_backtracks=300)).generate(grid, 12345)

    assert stats.state in (SearchState.SUCCESS, SearchState.ABANDONED)
    for i in range(size):
        assert grid.get(i, 0) == Tile.WALL
        assert grid.get(i, size - 1) == Tile.WALL
        assert grid.get(0, i) == Tile.WALL
        assert grid.get(size - 1, i) == Tile.WALL


def test_border_seeding_with_wall_pattern():
    catalog = PatternCatalog.from_patterns([
        [[0, 0, 0], [0, 0, 0], [0, 0, 0]],
        FLOOR,
    ])
    grid = Grid(6, 5, fill=Tile.FLOOR)
    stats = Wfc().generate_with_patterns(grid, catalog, 9)

    # Wall only touches wall, so the seeded ring fills the whole grid
    assert stats.state is SearchState.SUCCESS
    assert stats.collapses == 0
    assert grid.count(lambda t: t.is_wall()) == 30


def test_catalog_size_wins_over_config():
    catalog = PatternCatalog.from_patterns([[[1]]])
    grid = Grid(3, 3)
    stats = Wfc(WfcConfig(pattern_size=3)).generate_with_patterns(grid, catalog, 0)
    assert stats.state is SearchState.SUCCESS
    assert grid.count(lambda t: t.is_floor()) == 9


def test_empty_grid():
    grid = Grid(0, 0)
    stats = Wfc().generate_with_patterns(grid, free_catalog(), 0)
    assert stats.state is SearchState.SUCCESS


def test_verbose_output(capsys):
    Wfc(WfcConfig(verbose=True)).generate_with_patterns(Grid(3, 3), free_catalog(), 0)
    out = capsys.readouterr().out
    assert "success" in out

    Wfc().generate_with_patterns(Grid(3, 3), free_catalog(), 0)
    assert capsys.readouterr().out == ""
