"""Core module - configuration and the exception hierarchy."""

from atomizer.core.config import Settings, get_settings
from atomizer.core.exceptions import (
    AtomizerError,
    CyclicDependencyError,
    DuplicateTaskIdError,
    DurationParseError,
    EmptyTaskSetError,
    GenerationError,
    MalformedPayloadError,
    SchedulingError,
    UnknownTaskReference,
)

__all__ = [
    "Settings",
    "get_settings",
    "AtomizerError",
    "SchedulingError",
    "CyclicDependencyError",
    "DuplicateTaskIdError",
    "DurationParseError",
    "EmptyTaskSetError",
    "GenerationError",
    "MalformedPayloadError",
    "UnknownTaskReference",
]
