"""Smoke test for the benchmark script."""

import io

import pytest
from rich.console import Console

from scripts.benchmark import display_results, run_benchmarks


@pytest.mark.integration
def test_benchmarks_run_and_render():
    """Every benchmark completes on a tiny workload and renders a table."""
    results = run_benchmarks(values=20, depth=3)
    output = io.StringIO()

    display_results(Console(file=output, width=120), results)

    assert len(results) == 5
    assert all(result.operations > 0 for result in results)
    assert "Chain throughput" in output.getvalue()
