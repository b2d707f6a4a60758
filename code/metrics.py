"""Helpers for collecting instrumentation data during floor generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass
class StepMetrics:
    """Aggregated metrics for a single generation step across invocations."""

    name: str
    invocations: int = 0
    total_time: float = 0.0
    total_corridors_added: int = 0
    total_rooms_connected: int = 0

    def record(self, duration: float, corridors_delta: int, rooms_delta: int) -> None:
        self.invocations += 1
        self.total_time += duration
        self.total_corridors_added += corridors_delta
        self.total_rooms_connected += rooms_delta

    def to_dict(self) -> Dict[str, float | int]:
        average_time = self.total_time / self.invocations if self.invocations else 0.0
        return {
            "invocations": self.invocations,
            "total_time": self.total_time,
            "average_time": average_time,
            "total_corridors_added": self.total_corridors_added,
            "total_rooms_connected": self.total_rooms_connected,
        }


@dataclass
class GenerationMetrics:
    """Container for step metrics recorded during generation runs."""

    steps: Dict[str, StepMetrics] = field(default_factory=dict)

    def record_step_run(
        self,
        name: str,
        duration: float,
        corridors_delta: int,
        rooms_delta: int,
    ) -> None:
        metrics = self.steps.get(name)
        if metrics is None:
            metrics = StepMetrics(name=name)
            self.steps[name] = metrics
        metrics.record(duration, corridors_delta, rooms_delta)

    def snapshot(self) -> Dict[str, Dict[str, float | int]]:
        return {name: metrics.to_dict() for name, metrics in self.steps.items()}
