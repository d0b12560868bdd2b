"""Generation backends - the external step that atomizes free text.

A backend receives the rendered prompt and returns a GenerationResult. The
raw output is never used directly: it goes through the ResponseParser first.
"""

import asyncio
import contextlib
import shutil
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass

from loguru import logger

from atomizer.core.exceptions import GenerationError

# =============================================================================
# PROMPT
# =============================================================================


ATOMIZATION_PROMPT = """You are an expert at decomposing software projects into atomic, executable tasks.

GOAL: Break the project below into independent tasks that autonomous Docker agents can run.

RULES:
1. Every task must be executable on its own
2. At most {max_tasks} tasks in total
3. Dependencies must be explicit, minimal and justified
4. Prefer tasks that can run in parallel
5. Never create tasks that need human interaction

TARGET COMPLEXITY: {complexity}
TECH STACK: {tech_stack}

PROJECT:
{description}

Respond with ONLY this JSON structure:
{{
  "project": {{
    "title": "Project name",
    "complexity": "low|medium|high",
    "estimatedDuration": "1-2 hours|1-2 days|1-2 weeks",
    "techStack": ["detected", "technologies"]
  }},
  "tasks": [
    {{
      "id": "task_1",
      "title": "Descriptive task title",
      "description": "What exactly to do",
      "dockerCommand": "command to run inside the container",
      "requiredFiles": ["input.js"],
      "outputFiles": ["build/app.js"],
      "estimatedTime": "15min|30min|1hour|2hours",
      "estimatedCost": "0.001|0.01|0.1|1.0",
      "complexity": "low|medium|high",
      "category": "setup|development|testing|deployment|documentation"
    }}
  ],
  "dependencies": [
    {{
      "taskId": "task_2",
      "dependsOn": ["task_1"],
      "reason": "Needs the files generated by task_1"
    }}
  ]
}}"""


def build_atomization_prompt(
    description: str,
    max_tasks: int = 20,
    complexity: str = "medium",
    tech_stack: str = "auto-detect",
) -> str:
    """
    Render the prompt sent to the generation step.

    Args:
        description: Free-text project description.
        max_tasks: Upper bound on generated tasks.
        complexity: Target complexity hint.
        tech_stack: Tech stack hint.

    Returns:
        Prompt text.
    """
    return ATOMIZATION_PROMPT.format(
        description=description.strip(),
        max_tasks=max_tasks,
        complexity=complexity,
        tech_stack=tech_stack,
    )


# =============================================================================
# RESULTS
# =============================================================================


@dataclass
class GenerationResult:
    """Outcome of one generation call."""

    success: bool
    output: str = ""
    error: str | None = None
    duration_seconds: float = 0.0

    def raise_for_error(self) -> str:
        """Return the output, or raise GenerationError on failure."""
        if not self.success:
            raise GenerationError(self.error or "unknown error")
        if not self.output.strip():
            raise GenerationError("empty response")
        return self.output


# =============================================================================
# BACKENDS
# =============================================================================


class GenerationBackend(ABC):
    """Abstract external generation call."""

    @abstractmethod
    async def generate(self, prompt: str) -> GenerationResult:
        """Run the generation step for ``prompt``."""


class ClaudeCLIBackend(GenerationBackend):
    """
    Run the ``claude`` CLI in non-interactive print mode.

    The prompt is written to stdin; stdout is the raw response.

    Example:
        >>> backend = ClaudeCLIBackend(timeout_seconds=120)
        >>> result = await backend.generate(prompt)
        >>> result.success
        True
    """

    def __init__(
        self,
        command: str = "claude",
        timeout_seconds: float = 120,
        extra_args: tuple[str, ...] = (),
    ) -> None:
        self.command = command
        self.timeout_seconds = timeout_seconds
        self.extra_args = extra_args

    async def generate(self, prompt: str) -> GenerationResult:
        executable = shutil.which(self.command)
        if executable is None:
            return GenerationResult(
                success=False,
                error=f"'{self.command}' executable not found",
            )

        started = time.monotonic()
        logger.info("Executing generation CLI for atomization")

        process = await asyncio.create_subprocess_exec(
            executable,
            "--print",
            *self.extra_args,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(prompt.encode()),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Generation CLI timed out after {self.timeout_seconds}s")
            return GenerationResult(
                success=False,
                error=f"timed out after {self.timeout_seconds} seconds",
                duration_seconds=time.monotonic() - started,
            )
        finally:
            if process.returncode is None:
                with contextlib.suppress(ProcessLookupError):
                    process.kill()
                await process.wait()

        elapsed = time.monotonic() - started
        if stderr:
            logger.warning(f"Generation CLI stderr: {stderr.decode(errors='replace')[:500]}")

        if process.returncode != 0:
            return GenerationResult(
                success=False,
                output=stdout.decode(errors="replace"),
                error=f"exited with code {process.returncode}",
                duration_seconds=elapsed,
            )

        logger.info(f"Generation CLI completed in {elapsed:.1f}s")
        return GenerationResult(
            success=True,
            output=stdout.decode(errors="replace"),
            duration_seconds=elapsed,
        )
