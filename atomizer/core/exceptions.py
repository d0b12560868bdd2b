"""Exception hierarchy for the atomizer.

Structural validation failures derive from SchedulingError and are never
recovered internally: they abort the whole atomization result.
"""

# =============================================================================
# BASE
# =============================================================================


class AtomizerError(Exception):
    """Base exception for atomizer errors."""

    pass


class SchedulingError(AtomizerError):
    """Task set failed structural validation."""

    pass


# =============================================================================
# STRUCTURAL VALIDATION
# =============================================================================


class EmptyTaskSetError(SchedulingError):
    """No tasks were supplied."""

    def __init__(self) -> None:
        super().__init__("Task set is empty")


class DuplicateTaskIdError(SchedulingError):
    """Two tasks share the same id."""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Duplicate task id: {task_id}")


class UnknownTaskReference(SchedulingError):
    """A dependency edge points to a task id that does not exist."""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Dependency references unknown task: {task_id}")


class CyclicDependencyError(SchedulingError):
    """The dependency relation contains a cycle."""

    def __init__(self, cycle: list[str] | tuple[str, ...]) -> None:
        self.cycle = tuple(cycle)
        path = " -> ".join([*self.cycle, self.cycle[0]]) if self.cycle else ""
        super().__init__(f"Circular dependency detected: {path}")


class DurationParseError(SchedulingError):
    """An estimated time string matches no known duration grammar."""

    def __init__(self, raw: object) -> None:
        self.raw = raw
        super().__init__(f"Cannot parse duration: {raw!r}")


# =============================================================================
# INPUT BOUNDARY
# =============================================================================


class MalformedPayloadError(AtomizerError):
    """Generation output is not a valid atomization payload."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid atomization payload: {reason}")


class GenerationError(AtomizerError):
    """The external generation step failed."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Task atomization failed: {reason}")
