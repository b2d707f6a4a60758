#!/usr/bin/env python3

# This file performs multiple runs of floor generation, collecting and reporting metrics.
# Used for testing both performance of the generator and the shape of the resulting room graphs.

from __future__ import annotations

import argparse
import datetime
from dataclasses import dataclass
import json
import logging
import math
import os
import random
import statistics
import time
from typing import Any, Callable, Dict, List

import networkx as nx

from dungeon_config import FloorConfig
from dungeon_generator import FloorGenerator
from room_graph import RoomGraph

DEFAULT_CYCLE_COUNT_THRESHOLD = 1

PERCENTILES = [1.0, 5.0] + [float(value) for value in range(10, 100, 5)] + [99.0]


def build_config(seed: int) -> FloorConfig:
    return FloorConfig(random_seed=seed, collect_metrics=True)


@dataclass
class GenerationRunResult:
    seed: int
    duration: float
    rooms_kept: int
    rooms_dropped: int
    live_corridors: int
    dropped_corridors: int
    cycle_count: int
    cycle_lengths: List[int]
    component_count: int
    single_component: bool
    graph_diameter: int
    step_metrics: Dict[str, Dict[str, float | int]]


def percentile(values: List[float], pct: float) -> float:
    if not values:
        return float("nan")
    if pct <= 0:
        return min(values)
    if pct >= 100:
        return max(values)
    ordered = sorted(values)
    rank = (len(ordered) - 1) * (pct / 100.0)
    lower = math.floor(rank)
    upper = math.ceil(rank)
    if lower == upper:
        return ordered[int(rank)]
    lower_value = ordered[lower]
    upper_value = ordered[upper]
    fraction = rank - lower
    return lower_value + (upper_value - lower_value) * fraction


def fraction_at_least(values: List[float], threshold: float) -> float:
    if not values:
        return float("nan")
    return sum(1 for value in values if value >= threshold) / len(values)


def format_fraction(value: float) -> str:
    if math.isnan(value):
        return "nan"
    return f"{value:.1%}"


def format_value(value: float, formatter: Callable[[float], str] | None = None) -> str:
    numeric = float(value)
    if math.isnan(numeric):
        return "nan"
    if formatter is None:
        return f"{numeric:.3f}"
    return formatter(numeric)


def json_safe_number(value: float | int | None) -> float | int | None:
    if value is None:
        return None
    numeric = float(value)
    if math.isnan(numeric) or math.isinf(numeric):
        return None
    if isinstance(value, int):
        return value
    return numeric


def compute_basic_stats(values: List[float]) -> Dict[str, float]:
    return {
        "mean": statistics.mean(values),
        "median": statistics.median(values),
        "min": min(values),
        "max": max(values),
        "stdev": statistics.stdev(values) if len(values) > 1 else float("nan"),
    }


def percentile_label(pct: float) -> str:
    return f"p{int(pct)}" if float(pct).is_integer() else f"p{pct:g}"


@dataclass
class MetricDefinition:
    key: str
    name: str
    values: List[float]
    value_formatter: Callable[[float], str] | None = None
    success_threshold: float | None = None


def report_metric(definition: MetricDefinition) -> None:
    values = definition.values
    print(definition.name + ":")
    if not values:
        print("  (no data)")
        return

    stats = compute_basic_stats(values)
    print(
        "  Count {count}, mean {mean}, median {median}, min {min}, max {max}, stdev {stdev}".format(
            count=len(values),
            mean=format_value(stats["mean"], definition.value_formatter),
            median=format_value(stats["median"], definition.value_formatter),
            min=format_value(stats["min"], definition.value_formatter),
            max=format_value(stats["max"], definition.value_formatter),
            stdev=format_value(stats["stdev"], definition.value_formatter),
        )
    )

    percentile_parts = [
        f"{percentile_label(pct)}={format_value(percentile(values, pct), definition.value_formatter)}"
        for pct in PERCENTILES
    ]
    print("  Percentiles: " + ", ".join(percentile_parts))

    if definition.success_threshold is not None:
        success_rate = fraction_at_least(values, definition.success_threshold)
        label = ">= " + format_value(definition.success_threshold, definition.value_formatter)
        print(f"  Success rate {format_fraction(success_rate)} ({label})")


def summarize_metric_for_json(definition: MetricDefinition) -> Dict[str, Any]:
    values = definition.values
    summary: Dict[str, Any] = {"count": len(values)}

    if values:
        stats = compute_basic_stats(values)
        summary.update({key: json_safe_number(value) for key, value in stats.items()})
    else:
        summary.update({"mean": None, "median": None, "min": None, "max": None, "stdev": None})

    summary["percentiles"] = {
        percentile_label(pct): json_safe_number(percentile(values, pct)) if values else None
        for pct in PERCENTILES
    }

    if definition.success_threshold is not None:
        success_rate = fraction_at_least(values, definition.success_threshold) if values else float("nan")
        summary["success_rate"] = json_safe_number(success_rate)
        summary["success_threshold"] = json_safe_number(definition.success_threshold)

    return summary


def build_room_graph(graph: RoomGraph) -> nx.Graph:
    """Live-corridor graph over every cell that is kept or still routes a corridor."""
    room_graph = nx.Graph()
    for room in graph.rooms:
        if room.is_connected or graph.live_corridors_at(room.index):
            room_graph.add_node(room.index)
    room_graph.add_edges_from(graph.edges())
    return room_graph


def run_single_generation(seed: int) -> GenerationRunResult:
    """Run one floor generation with the provided seed and collect metrics."""
    config = build_config(seed)
    generator = FloorGenerator(config)

    start = time.perf_counter()
    floor = generator.generate()
    end = time.perf_counter()

    graph = floor.graph
    room_graph = build_room_graph(graph)
    basis = nx.cycle_basis(room_graph)
    cycle_lengths = [len(cycle) for cycle in basis]

    components = list(nx.connected_components(room_graph))
    graph_diameter = 0
    if components:
        largest = max(components, key=len)
        if len(largest) >= 2:
            graph_diameter = int(nx.diameter(room_graph.subgraph(largest)))

    live = graph.live_corridors()
    return GenerationRunResult(
        seed=seed,
        duration=end - start,
        rooms_kept=len(graph.connected_rooms()),
        rooms_dropped=sum(1 for room in graph.rooms if room.is_dropped),
        live_corridors=len(live),
        dropped_corridors=len(graph.corridors) - len(live),
        cycle_count=len(cycle_lengths),
        cycle_lengths=cycle_lengths,
        component_count=len(components),
        single_component=len(components) <= 1,
        graph_diameter=graph_diameter,
        step_metrics=generator.metrics.snapshot() if generator.metrics else {},
    )


def run_benchmark(num_runs: int, seed: int | None) -> List[GenerationRunResult]:
    """Run the generator multiple times and collect run-level metrics."""
    rng = random.Random(seed)
    return [run_single_generation(rng.randint(0, 1_000_000)) for _ in range(num_runs)]


def format_seconds(value: float) -> str:
    if value >= 1.0:
        return f"{value:.3f}s"
    return f"{value * 1000:.1f}ms"


def aggregate_step_metrics(results: List[GenerationRunResult]) -> Dict[str, Dict[str, float]]:
    totals: Dict[str, Dict[str, float]] = {}
    for result in results:
        for name, metrics in result.step_metrics.items():
            aggregate = totals.setdefault(
                name,
                {"invocations": 0.0, "total_time": 0.0, "total_corridors_added": 0.0},
            )
            aggregate["invocations"] += float(metrics.get("invocations", 0))
            aggregate["total_time"] += float(metrics.get("total_time", 0.0))
            aggregate["total_corridors_added"] += float(metrics.get("total_corridors_added", 0))

    for aggregate in totals.values():
        invocations = aggregate["invocations"]
        aggregate["average_time"] = aggregate["total_time"] / invocations if invocations else 0.0
        aggregate["average_corridors_added"] = (
            aggregate["total_corridors_added"] / invocations if invocations else 0.0
        )
    return totals


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run the floor generator multiple times and report timing and graph statistics."
    )
    parser.add_argument(
        "-n",
        "--runs",
        type=int,
        default=100,
        help="Number of floor generations to execute (default: 100)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Optional seed for the benchmark harness RNG; keeps run seeds reproducible",
    )
    parser.add_argument(
        "--cycle-count-threshold",
        type=float,
        default=DEFAULT_CYCLE_COUNT_THRESHOLD,
        help="Minimum cycle count in the room graph for success evaluation",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Also write the results to a timestamped JSON file under benchmarks/",
    )
    parser.add_argument("--verbose", action="store_true", help="Print a line for every run")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    if args.runs <= 0:
        raise SystemExit("Number of runs must be a positive integer")
    if args.cycle_count_threshold < 0.0:
        raise SystemExit("Cycle count threshold must be non-negative")
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    results = run_benchmark(args.runs, args.seed)

    durations = [result.duration for result in results]
    worst_duration = max(durations)
    worst_index = durations.index(worst_duration)
    worst_seed = results[worst_index].seed

    results_json: List[Dict[str, Any]] = []
    for idx, result in enumerate(results, start=1):
        if args.verbose:
            print(
                "Run {idx:03d}: {time} (seed {seed}) | rooms {kept} kept, {dropped} dropped"
                " | corridors {live} live, {dead} dropped | cycles {cycles} | components {components}".format(
                    idx=idx,
                    time=format_seconds(result.duration),
                    seed=result.seed,
                    kept=result.rooms_kept,
                    dropped=result.rooms_dropped,
                    live=result.live_corridors,
                    dead=result.dropped_corridors,
                    cycles=result.cycle_count,
                    components=result.component_count,
                )
            )
        results_json.append(
            {
                "run_id": idx,
                "seed": result.seed,
                "total_time_seconds": result.duration,
                "step_times": {
                    name: float(metrics.get("total_time", 0.0))
                    for name, metrics in sorted(result.step_metrics.items())
                },
                "quality_metrics": {
                    "rooms_kept": result.rooms_kept,
                    "rooms_dropped": result.rooms_dropped,
                    "live_corridors": result.live_corridors,
                    "dropped_corridors": result.dropped_corridors,
                    "num_cycles": result.cycle_count,
                    "num_components": result.component_count,
                    "graph_diameter": result.graph_diameter,
                },
            }
        )

    single_component_rate = sum(1 for result in results if result.single_component) / len(results)

    print(f"Config runs: {args.runs}")
    print(f"Worst-case generation time: {format_seconds(worst_duration)} (seed {worst_seed})")
    print(f"Single-component floors: {format_fraction(single_component_rate)}")

    def count_formatter(value: float) -> str:
        return f"{value:.1f}"

    metrics_to_report = [
        MetricDefinition(
            key="generation_time",
            name="Generation time",
            values=durations,
            value_formatter=lambda value: f"{value * 1000:.3f}ms",
        ),
        MetricDefinition(
            key="live_corridors",
            name="Live corridors",
            values=[float(result.live_corridors) for result in results],
            value_formatter=count_formatter,
        ),
        MetricDefinition(
            key="dropped_corridors",
            name="Dropped corridors",
            values=[float(result.dropped_corridors) for result in results],
            value_formatter=count_formatter,
        ),
        MetricDefinition(
            key="graph_diameter",
            name="Graph diameter",
            values=[float(result.graph_diameter) for result in results],
            value_formatter=count_formatter,
        ),
        MetricDefinition(
            key="cycle_count",
            name="Cycle count",
            values=[float(result.cycle_count) for result in results],
            value_formatter=count_formatter,
            success_threshold=args.cycle_count_threshold,
        ),
    ]

    aggregated_results_json: Dict[str, Any] = {}
    for metric in metrics_to_report:
        print()
        report_metric(metric)
        aggregated_results_json[metric.key] = summarize_metric_for_json(metric)

    step_totals = aggregate_step_metrics(results)
    if step_totals:
        print()
        print("Step performance summary:")
        for name, metrics in sorted(step_totals.items(), key=lambda item: item[1]["total_time"], reverse=True):
            print(
                "  {name}: invocations={invocations}, total_time={total_time},"
                " avg_time={avg_time}, avg_corridors={avg_corridors:.2f}".format(
                    name=name,
                    invocations=int(metrics["invocations"]),
                    total_time=format_seconds(metrics["total_time"]),
                    avg_time=format_seconds(metrics["average_time"]),
                    avg_corridors=metrics["average_corridors_added"],
                )
            )

    if not args.json:
        return

    aggregated_results_json["single_component_rate"] = json_safe_number(single_component_rate)
    aggregated_results_json["worst_case_run"] = {
        "duration_seconds": json_safe_number(worst_duration),
        "seed": worst_seed,
        "run_id": worst_index + 1,
    }

    timestamp = datetime.datetime.now(datetime.timezone.utc)
    iso_timestamp = timestamp.replace(microsecond=0, tzinfo=None).isoformat() + "Z"
    filename_stamp = timestamp.strftime("%Y%m%dT%H%M%SZ")
    script_dir = os.path.dirname(os.path.abspath(__file__))
    benchmarks_dir = os.path.abspath(os.path.join(script_dir, "..", "benchmarks"))
    os.makedirs(benchmarks_dir, exist_ok=True)
    output_path = os.path.join(benchmarks_dir, f"benchmark-{filename_stamp}.json")

    benchmark_data = {
        "benchmark_run_info": {
            "timestamp": iso_timestamp,
            "num_iterations": args.runs,
            "parameters": {"seed": args.seed, "cycle_count_threshold": args.cycle_count_threshold},
        },
        "aggregated_results": aggregated_results_json,
        "results": results_json,
        "step_summary": {
            name: {key: json_safe_number(value) for key, value in metrics.items()}
            for name, metrics in sorted(step_totals.items())
        },
    }

    with open(output_path, "w", encoding="utf-8") as handle:
        json.dump(benchmark_data, handle, indent=2, sort_keys=True)
        handle.write("\n")

    print(f"\nSaved benchmark results to {os.path.relpath(output_path)}")


if __name__ == "__main__":
    main()
