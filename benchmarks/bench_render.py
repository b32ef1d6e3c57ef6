#!/usr/bin/env python3
"""
docquery Printer Benchmarks

Measures render time for generated expression trees of growing size.
Run with: python benchmarks/bench_render.py

Results are printed as a table and saved to benchmarks/results.json
"""

import json
import random
import statistics
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List

# Run from a checkout without installing
sys.path.insert(0, str(Path(__file__).parent.parent))

from docquery import render  # noqa: E402
from docquery.expr import query as q  # noqa: E402


@dataclass
class Measurement:
    """Timings of one benchmark, one sample per iteration."""

    name: str
    nodes: int
    samples_ms: List[float] = field(default_factory=list)

    @property
    def median_ms(self) -> float:
        return statistics.median(self.samples_ms) if self.samples_ms else 0.0

    @property
    def nodes_per_sec(self) -> float:
        median = self.median_ms
        return self.nodes / median * 1000 if median > 0 else 0.0

    def to_dict(self):
        return {
            "name": self.name,
            "nodes": self.nodes,
            "median_ms": round(self.median_ms, 3),
            "min_ms": round(min(self.samples_ms), 3),
            "nodes_per_sec": round(self.nodes_per_sec),
        }


def sample_ms(fn: Callable[[], Any]) -> float:
    """Run fn once and return the wall time in milliseconds."""
    start = time.perf_counter_ns()
    fn()
    return (time.perf_counter_ns() - start) / 1e6


def count_nodes(tree: Any) -> int:
    """Count raw tree nodes, looking through Expr wrappers."""
    raw = getattr(tree, "raw", tree)
    if isinstance(raw, dict):
        return 1 + sum(count_nodes(v) for v in raw.values())
    if isinstance(raw, (list, tuple)):
        return 1 + sum(count_nodes(v) for v in raw)
    return 1


def generate_wide_tree(width: int) -> Any:
    """A Do block of many small Let/Map expressions."""
    random.seed(42)
    steps = []
    for i in range(width):
        steps.append(
            q.let(
                {"n": random.randint(1, 1000), "name": f"item-{i}"},
                q.map_(
                    q.var("xs"),
                    lambda x: q.if_(q.gt(x, q.var("n")), q.var("name"), None),
                ),
            )
        )
    return q.do(*steps)


def generate_deep_tree(depth: int) -> Any:
    """Nested Add calls, one per level."""
    tree: Any = q.var("x")
    for i in range(depth):
        tree = q.add(tree, i)
    return tree


class Benchmarks:
    def __init__(self, iterations: int = 5):
        self.iterations = iterations
        self.results: List[Measurement] = []

    def measure(self, name: str, tree: Any, **options: Any) -> Measurement:
        """Render tree once to warm caches, then once per iteration."""
        render(tree, **options)
        result = Measurement(name, count_nodes(tree))
        for _ in range(self.iterations):
            result.samples_ms.append(sample_ms(lambda: render(tree, **options)))
        self.results.append(result)
        return result

    def bench_wide(self, width: int, compact: bool) -> Measurement:
        label = "compact" if compact else "expanded"
        return self.measure(
            f"wide_{label}_{width}", generate_wide_tree(width), compact=compact
        )

    def bench_deep(self, depth: int) -> Measurement:
        return self.measure(f"deep_{depth}", generate_deep_tree(depth))

    def bench_map_hook(self, width: int) -> Measurement:
        def hook(text, path):
            return text

        return self.measure(
            f"wide_map_hook_{width}", generate_wide_tree(width), map=hook
        )


def print_results(results: List[Measurement]) -> None:
    """Print results as a formatted table."""
    print("\n" + "=" * 72)
    print(f"{'Benchmark':<28} {'Nodes':>9} {'Median ms':>10} {'Min ms':>9} {'Nodes/sec':>12}")
    print("-" * 72)
    for r in results:
        print(
            f"{r.name:<28} {r.nodes:>9,} {r.median_ms:>10.3f} "
            f"{min(r.samples_ms):>9.3f} {r.nodes_per_sec:>12,.0f}"
        )
    print("=" * 72)


def save_results(results: List[Measurement], path: Path) -> None:
    payload = {
        "generated": time.strftime("%Y-%m-%dT%H:%M:%S"),
        "results": [r.to_dict() for r in results],
    }
    path.write_text(json.dumps(payload, indent=2))
    print(f"\nResults saved to {path}")


def main():
    """Run all benchmarks."""
    print("docquery Printer Benchmarks")
    print("=" * 70)

    bench = Benchmarks()

    print("\n[1/3] Running wide tree benchmarks...")
    for width in (10, 100, 1000):
        bench.bench_wide(width, compact=False)
        bench.bench_wide(width, compact=True)

    print("[2/3] Running deep tree benchmarks...")
    # Stay well under the default recursion limit
    for depth in (10, 50, 100):
        bench.bench_deep(depth)

    print("[3/3] Running map hook benchmarks...")
    bench.bench_map_hook(100)
    bench.bench_map_hook(1000)

    print_results(bench.results)

    results_path = Path(__file__).parent / "results.json"
    save_results(bench.results, results_path)


if __name__ == "__main__":
    main()
