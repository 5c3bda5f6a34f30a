#!/usr/bin/env python3
"""
EventStream Performance Benchmarks

Measures how quickly values travel through composed pipelines and how much a
subscription costs to set up, then prints a summary table.

Usage:
    python scripts/benchmark.py              # Run all benchmarks
    python scripts/benchmark.py --values N   # Values pushed per benchmark
    python scripts/benchmark.py --depth N    # Combinators per chain

Configuration:
    Adjust the constants at the top of the file to change the defaults.
"""

import argparse
import sys
import time
from dataclasses import dataclass
from typing import Callable, List

# Add the project root to the Python path
sys.path.insert(0, ".")

from rich.console import Console
from rich.table import Table, box

from eventstream import Emitter, EventStream, VirtualClock, from_iterable

# Configuration
DEFAULT_VALUES = 100_000
DEFAULT_DEPTH = 10


@dataclass
class BenchmarkResult:
    name: str
    operations: int
    seconds: float

    @property
    def per_second(self) -> float:
        return self.operations / self.seconds if self.seconds else float("inf")

    @property
    def microseconds_per_op(self) -> float:
        return self.seconds / self.operations * 1e6 if self.operations else 0.0


def _timed(name: str, operations: int, run: Callable[[], None]) -> BenchmarkResult:
    start = time.perf_counter()
    run()
    return BenchmarkResult(name, operations, time.perf_counter() - start)


def _map_chain(stream: EventStream, depth: int) -> EventStream:
    for _ in range(depth):
        stream = stream.map(lambda x: x + 1)
    return stream


def bench_chain_throughput(values: int, depth: int) -> BenchmarkResult:
    """Push values through `depth` chained maps."""
    received: List[int] = []
    chain = _map_chain(from_iterable(range(values)), depth)
    return _timed(
        f"Chain throughput (depth {depth})",
        values,
        lambda: chain.subscribe(received.append),
    )


def bench_subscribe_cost(subscriptions: int, depth: int) -> BenchmarkResult:
    """Subscribe and unsubscribe repeatedly to a pre-built chain."""
    emitter = Emitter()
    chain = _map_chain(emitter.stream, depth).scan(0, lambda a, b: a + b)

    def run() -> None:
        for _ in range(subscriptions):
            chain.subscribe(lambda v: None)()

    return _timed(f"Subscribe/unsubscribe (depth {depth})", subscriptions, run)


def bench_merge_throughput(values: int) -> BenchmarkResult:
    """Alternate pushes between the two sides of a merge."""
    left, right = Emitter("left"), Emitter("right")
    count = 0

    def on_next(_) -> None:
        nonlocal count
        count += 1

    left.stream.merge(right.stream).subscribe(on_next)

    def run() -> None:
        for i in range(values // 2):
            left.emit(i)
            right.emit(i)

    return _timed("Merge throughput", values, run)


def bench_flat_map_latest(values: int) -> BenchmarkResult:
    """Spawn and replace one child stream per value."""
    emitter = Emitter()
    emitter.stream.flat_map_latest(lambda n: from_iterable((n, n + 1))).subscribe(
        lambda v: None
    )

    def run() -> None:
        for i in range(values):
            emitter.emit(i)

    return _timed("flat_map_latest child churn", values, run)


def bench_delay(values: int) -> BenchmarkResult:
    """Schedule and fire one timer per value on a virtual clock."""
    clock = VirtualClock()
    emitter = Emitter()
    emitter.stream.delay(1, timers=clock).subscribe(lambda v: None)

    def run() -> None:
        for i in range(values):
            emitter.emit(i)
        clock.advance(1)

    return _timed("delay() timers", values, run)


def run_benchmarks(values: int, depth: int) -> List[BenchmarkResult]:
    return [
        bench_chain_throughput(values, depth),
        bench_subscribe_cost(max(values // 10, 1), depth),
        bench_merge_throughput(values),
        bench_flat_map_latest(max(values // 10, 1)),
        bench_delay(values),
    ]


def display_results(console: Console, results: List[BenchmarkResult]) -> None:
    table = Table(title="EventStream Benchmarks", box=box.SIMPLE_HEAVY)
    table.add_column("Benchmark", style="cyan")
    table.add_column("Operations", justify="right")
    table.add_column("Ops/sec", justify="right", style="green")
    table.add_column("µs/op", justify="right")

    for result in results:
        table.add_row(
            result.name,
            f"{result.operations:,}",
            f"{result.per_second:,.0f}",
            f"{result.microseconds_per_op:.2f}",
        )

    console.print(table)


def main() -> None:
    parser = argparse.ArgumentParser(description="EventStream performance benchmarks")
    parser.add_argument("--values", type=int, default=DEFAULT_VALUES)
    parser.add_argument("--depth", type=int, default=DEFAULT_DEPTH)
    args = parser.parse_args()

    console = Console()
    console.print(
        f"[yellow]Running benchmarks with {args.values:,} values, depth {args.depth}...[/yellow]"
    )
    start = time.perf_counter()
    results = run_benchmarks(args.values, args.depth)
    display_results(console, results)
    console.print(
        f"[dim]Benchmark completed in {time.perf_counter() - start:.2f} seconds[/dim]"
    )


if __name__ == "__main__":
    main()
