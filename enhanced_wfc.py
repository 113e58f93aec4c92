import argparse
import sys
from dataclasses import replace

from tqdm import tqdm

from terrain_wfc import Grid, PatternCatalog, Wfc, WfcConfig, load_config
from terrain_wfc.wfc import DEFAULT_SAMPLE


def print_grid(grid: Grid, title: str, max_rows: int = 8) -> None:
    print(f"   {title}:")
    rows = grid.to_strings()
    for row in rows[:max_rows]:
        print(f"     {row}")
    if len(rows) > max_rows:
        print(f"     ... ({len(rows) - max_rows} more rows)")


def floor_percentage(grid: Grid) -> float:
    total = grid.width * grid.height
    return 100.0 * grid.count(lambda t: t.is_floor()) / total if total > 0 else 0.0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Learn patterns from a sample map and generate with WFC")
    parser.add_argument("--config", type=str, default=None, help="YAML file with WFC settings.")
    parser.add_argument("--width", type=int, default=25)
    parser.add_argument("--height", type=int, default=20)
    parser.add_argument("--seed", type=int, default=12345)
    parser.add_argument("--sizes", type=int, nargs="+", default=[2, 3, 4], help="Pattern sizes to compare.")
    parser.add_argument("--max-backtracks", type=int, default=None,
                        help="Give up after this many backtracks (default: from config, else 5000).")
    args = parser.parse_args(argv)

    config = WfcConfig()
    if args.config:
        print(f"Loading config from: {args.config}")
        try:
            config = load_config(args.config)
        except FileNotFoundError:
            print(f"Error: Config file not found: {args.config}")
            return 1

    if args.max_backtracks is not None:
        config = replace(config, max_backtracks=args.max_backtracks)
    elif config.max_backtracks is None:
        config = replace(config, max_backtracks=5000)

    print("=== Enhanced Wave Function Collapse Demo ===\n")

    sample = Grid.from_strings(DEFAULT_SAMPLE)
    print("1. Sample Map for Pattern Learning:")
    print_grid(sample, "Sample", max_rows=len(DEFAULT_SAMPLE))

    print("\n2. Extracting Patterns from Sample:")
    catalog = PatternCatalog.extract(sample, config.pattern_size)
    print(f"   Extracted {len(catalog)} unique patterns of size {catalog.pattern_size}")

    print("\n3. Generation without / with Backtracking:")
    results = {}
    for enabled in (False, True):
        grid = Grid(args.width, args.height)
        stats = Wfc(replace(config, enable_backtracking=enabled)).generate_with_patterns(grid, catalog, args.seed)
        label = "With Backtracking" if enabled else "Without Backtracking"
        print_grid(grid, f"{label} ({stats.state.value})")
        results[label] = (grid, stats)

    print("\n4. Comparison:")
    for label, (grid, stats) in results.items():
        print(f"   {label}: {floor_percentage(grid):.1f}% floor, "
              f"{stats.collapses} collapses, {stats.backtracks} backtracks")

    print("\n5. Pattern Size Comparison:")
    for size in tqdm(args.sizes, desc="Pattern sizes"):
        size_catalog = PatternCatalog.extract(sample, size)
        grid = Grid(15, 12)
        stats = Wfc(replace(config, pattern_size=size)).generate_with_patterns(grid, size_catalog, args.seed)
        tqdm.write(f"   Pattern size {size}: {len(size_catalog)} patterns, "
                   f"{floor_percentage(grid):.1f}% floor, {stats.state.value}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
