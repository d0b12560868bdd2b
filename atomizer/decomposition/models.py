"""Pydantic models for atomization payloads.

This module defines the validated record schema that every task set passes
through before any graph is built: tasks, dependency edges, the project
header, and the payload that bundles them. Field names follow the camelCase
wire format emitted by the generation step, with snake_case accepted too.
"""

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# =============================================================================
# ENUMS
# =============================================================================


class Complexity(str, Enum):
    """Task complexity level."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


RECORD_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
)


# =============================================================================
# TASKS
# =============================================================================


class Task(BaseModel):
    """Atomic unit of work produced by an atomization run.

    Example:
        >>> task = Task(
        ...     id="task_1",
        ...     title="Initialize project",
        ...     estimatedTime="30min",
        ...     estimatedCost="$0.10",
        ... )
        >>> task.estimated_cost
        Decimal('0.10')
    """

    model_config = RECORD_CONFIG

    id: str = Field(
        ...,
        min_length=1,
        description="Unique task identifier",
    )
    title: str = Field(
        ...,
        min_length=1,
        description="Task title",
    )
    description: str = Field(
        default="",
        description="What the task does",
    )
    # bool stays a bool so duration parsing rejects it
    estimated_time: str | bool | int | float = Field(
        ...,
        description="Free-form duration such as '30min', '1hour' or '1-2days'",
    )
    estimated_cost: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Estimated monetary cost",
    )
    complexity: Complexity = Field(
        default=Complexity.MEDIUM,
        description="Task complexity",
    )
    category: str = Field(
        default="development",
        min_length=1,
        description="Free category label",
    )

    # Execution metadata, carried through for the runner
    docker_command: str | None = Field(
        default=None,
        description="Command executed inside the task container",
    )
    required_files: tuple[str, ...] = Field(
        default=(),
        description="Files the task needs",
    )
    output_files: tuple[str, ...] = Field(
        default=(),
        description="Files the task produces",
    )

    @field_validator("id", "title", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        """Trim surrounding whitespace from identifiers."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("estimated_cost", mode="before")
    @classmethod
    def parse_cost(cls, v: Any) -> Any:
        """Accept '$0.50', '0.5' and plain numbers."""
        if v is None:
            return Decimal("0")
        if isinstance(v, bool):
            raise ValueError("cost must be a number")
        if isinstance(v, (int, float)):
            v = str(v)
        if isinstance(v, str):
            text = v.strip().lstrip("$").strip()
            try:
                return Decimal(text)
            except InvalidOperation:
                raise ValueError(f"invalid cost: {v!r}") from None
        return v

    @field_validator("complexity", "category", mode="before")
    @classmethod
    def normalize_label(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v


class DependencyEdge(BaseModel):
    """Dependency of one task on a list of others.

    The reason is documentation only and never affects scheduling.
    """

    model_config = RECORD_CONFIG

    task_id: str = Field(
        ...,
        min_length=1,
        description="ID of the dependent task",
    )
    depends_on: tuple[str, ...] = Field(
        default=(),
        description="IDs of the tasks this one waits for, in priority order",
    )
    reason: str = Field(
        default="",
        description="Why the dependency exists",
    )

    @field_validator("task_id", mode="before")
    @classmethod
    def strip_task_id(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("depends_on", mode="before")
    @classmethod
    def dedupe_dependencies(cls, v: Any) -> Any:
        """Drop repeated ids, keeping the first occurrence."""
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (list, tuple)):
            seen: set[str] = set()
            unique = []
            for dep in v:
                key = dep.strip() if isinstance(dep, str) else dep
                if key in seen:
                    continue
                seen.add(key)
                unique.append(key)
            return tuple(unique)
        return v


# =============================================================================
# PAYLOAD
# =============================================================================


class ProjectInfo(BaseModel):
    """Project header emitted alongside the task list."""

    model_config = RECORD_CONFIG

    title: str = Field(default="", description="Project name")
    complexity: Complexity | None = Field(default=None, description="Overall complexity")
    estimated_duration: str | None = Field(
        default=None,
        description="Generator's own duration guess, informational only",
    )
    tech_stack: tuple[str, ...] = Field(
        default=(),
        description="Technologies detected by the generator",
    )

    @field_validator("complexity", mode="before")
    @classmethod
    def normalize_complexity(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().lower()
            return v or None
        return v


class AtomizationPayload(BaseModel):
    """Validated output of one atomization request."""

    model_config = RECORD_CONFIG

    project: ProjectInfo | None = Field(default=None)
    tasks: tuple[Task, ...] = Field(default=())
    dependencies: tuple[DependencyEdge, ...] = Field(default=())

    @field_validator("dependencies", mode="before")
    @classmethod
    def allow_null_dependencies(cls, v: Any) -> Any:
        return () if v is None else v

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dict in wire format."""
        return self.model_dump(mode="json", by_alias=True)
