"""Task decomposition - the input boundary of an atomization run.

This module provides:
- Record schema (tasks, dependency edges, project header)
- Prompt rendering and generation backends (free text -> raw response)
- Response parsing (raw response -> validated payload)
"""

from atomizer.decomposition.generator import (
    ClaudeCLIBackend,
    GenerationBackend,
    GenerationResult,
    build_atomization_prompt,
)
from atomizer.decomposition.models import (
    AtomizationPayload,
    Complexity,
    DependencyEdge,
    ProjectInfo,
    Task,
)
from atomizer.decomposition.parser import ResponseParser

__all__ = [
    # Models
    "AtomizationPayload",
    "Complexity",
    "DependencyEdge",
    "ProjectInfo",
    "Task",
    # Generation
    "GenerationBackend",
    "GenerationResult",
    "ClaudeCLIBackend",
    "build_atomization_prompt",
    # Parsing
    "ResponseParser",
]
