"""
Simple probe benchmark runner for the fixed-size hash table.

Usage examples:
    python -m src.benchmark.simple_runner
    python simple_runner.py --size 101 --load-factors 0.25,0.5,0.75,0.95 --no-plots
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.append(str(project_root))

# Import after path setup
from src.benchmark import OPERATIONS, BenchmarkConfig, create_probe_benchmark  # noqa: E402


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Benchmark the fixed-size hash table")
    parser.add_argument(
        "--size", type=int, default=53, help="Number of buckets (must be prime)"
    )
    parser.add_argument(
        "--operations",
        default=",".join(OPERATIONS),
        help="Comma-separated list of operations to test",
    )
    parser.add_argument(
        "--load-factors",
        default="0.1,0.25,0.5,0.75,0.9,0.98",
        help="Comma-separated list of load factors",
    )
    parser.add_argument(
        "--tombstone-ratio",
        type=float,
        default=0.0,
        help="Share of entries deleted and replaced before measuring",
    )
    parser.add_argument("--seed", type=int, default=42, help="Key generator seed")
    parser.add_argument(
        "--output-prefix", default="fixed-hash-table", help="Prefix for output plot files"
    )
    parser.add_argument("--no-plots", action="store_true", help="Skip generating plots")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    colors = ["blue", "green", "red", "orange", "purple", "brown"]

    try:
        operations = [op.strip() for op in args.operations.split(",")]
        load_factors = [float(lf.strip()) for lf in args.load_factors.split(",")]

        config = BenchmarkConfig(
            x_vals=load_factors,
            line_vals=operations,
            styles=[(colors[i % len(colors)], "-") for i in range(len(operations))],
            plot_name=args.output_prefix,
            table_size=args.size,
            tombstone_ratio=args.tombstone_ratio,
            seed=args.seed,
        )

        benchmark = create_probe_benchmark(config)
        benchmark(show_plots=False, print_data=True, save_plot=not args.no_plots)
        print("[OK] Probe benchmark completed")

        if not args.no_plots:
            print(f"\nPlots saved as {args.output_prefix}*.png")

    except (ValueError, RuntimeError) as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
