"""Result models for the scheduling pipeline.

All of these are derived views over one validated TaskGraph. They are frozen
and serialize deterministically, so the same input always renders the same
JSON bytes.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from atomizer.decomposition.models import ProjectInfo, Task

# =============================================================================
# CRITICAL PATH
# =============================================================================


class CriticalPath(BaseModel):
    """Longest duration-weighted chain through the graph."""

    model_config = ConfigDict(frozen=True)

    path: tuple[str, ...] = Field(description="Task ids from source to sink")
    length: int = Field(ge=0, description="Path duration in minutes")
    finish_times: dict[str, int] = Field(
        default_factory=dict,
        description="Earliest finish per task, in minutes from project start",
    )
    durations: dict[str, int] = Field(
        default_factory=dict,
        description="Normalized duration per task in minutes",
    )

    def earliest_start(self, task_id: str) -> int:
        """Earliest start of a task in minutes from project start."""
        return self.finish_times[task_id] - self.durations[task_id]

    def __contains__(self, task_id: object) -> bool:
        return task_id in self.path


# =============================================================================
# COST ESTIMATE
# =============================================================================


class CostBreakdown(BaseModel):
    """Aggregate of one category or complexity bucket."""

    model_config = ConfigDict(frozen=True)

    count: int = Field(default=0, ge=0)
    time: int = Field(default=0, ge=0, description="Summed duration in minutes")
    cost: Decimal = Field(default=Decimal("0"), ge=0)


class CostEstimate(BaseModel):
    """Project-level time and cost totals."""

    model_config = ConfigDict(frozen=True)

    sequential_time: int = Field(ge=0, description="Sum of all durations")
    parallel_time: int = Field(ge=0, description="Sum of per-group maxima")
    total_cost: Decimal = Field(ge=0, description="Sum of all task costs")
    task_count: int = Field(ge=0)
    by_category: dict[str, CostBreakdown] = Field(default_factory=dict)
    by_complexity: dict[str, CostBreakdown] = Field(default_factory=dict)

    @property
    def sequential_cost(self) -> Decimal:
        return self.total_cost

    @property
    def parallel_cost(self) -> Decimal:
        """Concurrency shortens wall-clock time, never cost."""
        return self.total_cost

    @property
    def speedup(self) -> float:
        """Sequential over parallel time (1.0 when nothing takes time)."""
        if self.parallel_time == 0:
            return 1.0
        return self.sequential_time / self.parallel_time

    @property
    def efficiency(self) -> float:
        """Speedup per task."""
        if self.task_count == 0:
            return 0.0
        return self.speedup / self.task_count


# =============================================================================
# EXECUTION PLAN
# =============================================================================


class ExecutionPlan(BaseModel):
    """Complete scheduling result for one atomization request.

    Example:
        >>> plan = ExecutionPlanner().plan(tasks, edges)
        >>> plan.to_contract()["parallelGroups"]
        [['A'], ['B', 'C']]
    """

    model_config = ConfigDict(frozen=True)

    project: ProjectInfo | None = None
    tasks: tuple[Task, ...] = ()
    execution_order: tuple[str, ...]
    parallel_groups: tuple[tuple[str, ...], ...]
    critical_path: CriticalPath
    cost: CostEstimate

    @property
    def total_groups(self) -> int:
        return len(self.parallel_groups)

    def get_task(self, task_id: str) -> Task | None:
        return next((task for task in self.tasks if task.id == task_id), None)

    def group_of(self, task_id: str) -> int:
        """Index of the parallel group containing a task."""
        for i, group in enumerate(self.parallel_groups):
            if task_id in group:
                return i
        raise KeyError(task_id)

    def to_contract(self) -> dict[str, Any]:
        """Render the execution contract consumed by the runner."""
        return {
            "executionOrder": list(self.execution_order),
            "parallelGroups": [list(group) for group in self.parallel_groups],
            "criticalPath": list(self.critical_path.path),
            "criticalPathLength": self.critical_path.length,
            "sequentialTime": self.cost.sequential_time,
            "parallelTime": self.cost.parallel_time,
            "totalCost": str(self.cost.total_cost),
        }
