import statistics
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

import matplotlib.pyplot as plt

from data.generate import KeyValueGenerator
from src.data_structures.fixed_hash_table import FixedHashTable

OPERATIONS = ["search_hit", "search_miss", "insert", "delete"]


@dataclass
class BenchmarkConfig:
    """Configuration for a probe benchmark run"""

    x_vals: List[float]
    line_vals: List[str] = field(default_factory=lambda: list(OPERATIONS))
    line_names: List[str] = field(default_factory=list)
    styles: List[Tuple[str, str]] = field(default_factory=list)
    plot_name: str = "fixed-hash-table"
    x_name: str = "Load factor"
    table_size: int = FixedHashTable.DEFAULT_SIZE
    tombstone_ratio: float = 0.0
    seed: Optional[int] = 42
    warmup_runs: int = 3
    measure_runs: int = 10
    min_runtime_ms: float = 1.0

    def __post_init__(self):
        unknown = [v for v in self.line_vals if v not in OPERATIONS]
        if unknown:
            raise ValueError(f"Unknown operations: {', '.join(unknown)}")
        if any(not (0 <= x < 1) for x in self.x_vals):
            raise ValueError("Load factors must be in [0, 1)")
        if not (0 <= self.tombstone_ratio < 1):
            raise ValueError("Tombstone ratio must be in [0, 1)")
        if not self.line_names:
            self.line_names = [v.replace("_", " ").title() for v in self.line_vals]


@dataclass
class BenchmarkResult:
    """Result of a single benchmark measurement"""

    value: float
    std_dev: float
    measurements: List[float]
    config_name: str
    x_value: float
    avg_probes: float = 0.0
    entries: int = 0
    tombstones: int = 0


class BenchmarkRunner:
    """Fills tables to each load factor and measures time and probe counts"""

    def __init__(self, config: BenchmarkConfig):
        self.config = config
        self.results: Dict[str, List[BenchmarkResult]] = {}
        self._samples: Dict[float, Tuple] = {}

    def do_bench(
        self, fn: Callable[..., Any], setup: Optional[Callable[[], Any]] = None
    ) -> Tuple[float, float, List[float]]:
        """
        Time a function call multiple times and return statistics.

        When setup is given it runs untimed before every call and its result
        is passed to fn.
        """

        def timed_call() -> float:
            args = (setup(),) if setup is not None else ()
            start = time.perf_counter()
            fn(*args)
            end = time.perf_counter()
            return (end - start) * 1000

        for _ in range(self.config.warmup_runs):
            timed_call()

        times: List[float] = []
        total_runtime = 0.0

        while (
            len(times) < self.config.measure_runs
            or total_runtime < self.config.min_runtime_ms
        ):
            runtime_ms = timed_call()
            times.append(runtime_ms)
            total_runtime += runtime_ms

        mean_time = statistics.mean(times)
        std_dev = statistics.stdev(times) if len(times) > 1 else 0.0

        return mean_time, std_dev, times

    def _sample(self, load_factor: float):
        """Generated pairs and absent keys for a load factor, cached per run."""
        if load_factor not in self._samples:
            target = int(load_factor * self.config.table_size)
            extra = int(target * self.config.tombstone_ratio)

            generator = KeyValueGenerator(seed=self.config.seed)
            pairs = list(generator.generate_pairs(target + extra))
            present = {key for key, _ in pairs[extra:]}
            absent = list(generator.generate_missing_keys(max(1, target), present))
            self._samples[load_factor] = (pairs, target, extra, absent)
        return self._samples[load_factor]

    def build_table(self, load_factor: float):
        """
        Build a table filled to load_factor.

        A tombstone_ratio share of the inserted keys is deleted again, then
        the table is topped back up so the live load factor matches. The same
        load factor always yields an identical table.

        Returns:
            Tuple of (table, present keys, absent keys)
        """
        pairs, target, extra, absent = self._sample(load_factor)

        table = FixedHashTable(self.config.table_size)
        for key, value in pairs[:target]:
            table.insert(key, value)
        for key, _ in pairs[:extra]:
            table.delete(key)
        for key, value in pairs[target:]:
            table.insert(key, value)

        present = [key for key, _ in pairs[extra:]]
        table.reset_statistics()
        return table, present, list(absent)

    def _operation(self, name: str, table: FixedHashTable, present, absent):
        """
        Keys and per-key action for an operation.

        Inserts use absent keys, capped at the free slots so none fails.
        """
        if name == "search_hit":
            return present, lambda t, k: t.search(k)
        if name == "search_miss":
            return absent, lambda t, k: t.search(k)
        if name == "insert":
            return absent[: table.size - table.count], lambda t, k: t.insert(k, "v")
        return present, lambda t, k: t.delete(k)

    def run_benchmark(self) -> None:
        """Run every operation at every load factor"""
        total_steps = len(self.config.line_vals) * len(self.config.x_vals)
        step = 0

        print(f"\nStarting benchmark: {self.config.plot_name}")
        print(
            f"Testing {len(self.config.line_vals)} operations on "
            f"{len(self.config.x_vals)} load factors (size={self.config.table_size})"
        )
        print(f"Started at {datetime.now().strftime('%H:%M:%S')}")
        print("=" * 80)

        for i, line_val in enumerate(self.config.line_vals):
            print(f"\n[{i + 1}/{len(self.config.line_vals)}] {self.config.line_names[i]}")
            print("-" * 60)
            line_results = []

            for x_val in self.config.x_vals:
                step += 1
                table, present, absent = self.build_table(x_val)
                stats = table.get_stats()
                keys, action = self._operation(line_val, table, present, absent)
                table.close()

                probe_counts: List[float] = []

                # every run gets a fresh table, so its probe total covers
                # only the measured operation
                def run_once(fresh: FixedHashTable):
                    for k in keys:
                        action(fresh, k)
                    probe_counts.append(fresh.total_probes / len(keys))

                if not keys:
                    mean, std, times = 0.0, 0.0, []
                    avg_probes = 0.0
                else:
                    mean, std, times = self.do_bench(
                        run_once, setup=lambda: self.build_table(x_val)[0]
                    )
                    avg_probes = statistics.mean(probe_counts)

                line_results.append(
                    BenchmarkResult(
                        value=mean,
                        std_dev=std,
                        measurements=times,
                        config_name=line_val,
                        x_value=x_val,
                        avg_probes=avg_probes,
                        entries=stats["count"],
                        tombstones=stats["tombstones"],
                    )
                )

                progress = (step / total_steps) * 100
                print(
                    f"[{step:2d}/{total_steps}] load={x_val:.2f} ({progress:5.1f}%) "
                    f"{mean:.4f}ms, {avg_probes:.2f} probes"
                )

            self.results[line_val] = line_results

        print("=" * 80)
        print(f"[OK] Benchmark finished at {datetime.now().strftime('%H:%M:%S')}")

    def generate_plot(self, show_plots: bool = True, save_plot: bool = True) -> None:
        """Generate time and probe-count plots"""
        self._generate_single_plot(
            "Operation Time",
            "Time (ms)",
            lambda r: r.value,
            lambda r: r.std_dev,
            show_plots,
            save_plot,
        )
        self._generate_single_plot(
            "Probe Count",
            "Average probes per operation",
            lambda r: r.avg_probes,
            lambda r: 0,
            show_plots,
            save_plot,
            suffix="-probes",
        )

    def _generate_single_plot(
        self,
        title_suffix: str,
        ylabel: str,
        value_fn: Callable,
        error_fn: Callable,
        show_plots: bool,
        save_plot: bool,
        suffix: str = "",
    ) -> Optional[str]:
        """Generate a single plot"""
        plt.figure(figsize=(12, 8))

        for i, line_val in enumerate(self.config.line_vals):
            if line_val not in self.results:
                continue

            results = self.results[line_val]
            color, style = (
                self.config.styles[i] if i < len(self.config.styles) else (None, "-")
            )

            plt.errorbar(
                [r.x_value for r in results],
                [value_fn(r) for r in results],
                yerr=[error_fn(r) for r in results],
                color=color,
                linestyle=style,
                marker="o",
                label=self.config.line_names[i],
                capsize=5,
                capthick=2,
            )

        plt.xlabel(self.config.x_name)
        plt.ylabel(ylabel)
        plt.title(f"{self.config.plot_name} - {title_suffix}")
        plt.legend()
        plt.grid(True, alpha=0.3)
        plt.tight_layout()

        filename = None
        if save_plot:
            filename = f"{self.config.plot_name}{suffix}.png"
            plt.savefig(filename, dpi=150, bbox_inches="tight")

        if show_plots:
            plt.show()
        else:
            plt.close()
        return filename

    def print_data(self) -> None:
        """Print detailed benchmark results"""
        print(f"\n{self.config.plot_name} Benchmark Results")
        print("=" * 80)

        for i, line_val in enumerate(self.config.line_vals):
            if line_val not in self.results:
                continue

            print(f"\n{self.config.line_names[i]} ({line_val}):")
            header = (
                f"{'Load':<8} {'Entries':<8} {'Tombs':<6} "
                f"{'Time (ms)':<12} {'Std Dev':<10} {'Probes':<8}"
            )
            print(header)
            print("-" * len(header))

            for result in self.results[line_val]:
                print(
                    f"{result.x_value:<8.2f} {result.entries:<8} {result.tombstones:<6} "
                    f"{result.value:<12.4f} {result.std_dev:<10.4f} "
                    f"{result.avg_probes:<8.2f}"
                )


def create_probe_benchmark(config: BenchmarkConfig):
    """Return a run function bound to config, similar to triton.testing.perf_report"""

    def run(show_plots: bool = True, print_data: bool = True, save_plot: bool = True):
        runner = BenchmarkRunner(config)
        runner.run_benchmark()

        if print_data:
            runner.print_data()
        if show_plots or save_plot:
            runner.generate_plot(show_plots=show_plots, save_plot=save_plot)

        return runner

    return run
