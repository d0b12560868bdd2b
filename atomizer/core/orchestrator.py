"""
Atomizer - from free-text project description to execution plan.

Wires the generation backend, the response parser and the scheduling
pipeline together, and owns the logging setup and the callback token cache.
"""

import sys
from pathlib import Path
from typing import Any

from loguru import logger

from atomizer.core.config import Settings, get_settings
from atomizer.decomposition.generator import (
    ClaudeCLIBackend,
    GenerationBackend,
    build_atomization_prompt,
)
from atomizer.decomposition.parser import ResponseParser
from atomizer.optimization.cache import CallbackTokenCache
from atomizer.scheduling.models import ExecutionPlan
from atomizer.scheduling.planner import ExecutionPlanner

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


class Atomizer:
    """
    Main atomizer entry point.

    Pipeline:
    1. Render the atomization prompt
    2. Run the generation backend
    3. Parse and validate the response
    4. Build the execution plan

    Example:
        >>> atomizer = Atomizer()
        >>> plan = await atomizer.atomize("Build a todo REST API with JWT auth")
        >>> plan.to_contract()["parallelGroups"]
        [['task_1'], ['task_2', 'task_3'], ['task_4']]
    """

    def __init__(
        self,
        settings: Settings | None = None,
        backend: GenerationBackend | None = None,
        planner: ExecutionPlanner | None = None,
        token_cache: CallbackTokenCache | None = None,
        configure_logging: bool = True,
    ) -> None:
        """
        Initialize the atomizer.

        Args:
            settings: Settings to use (loaded from environment if omitted).
            backend: Generation backend (the claude CLI if omitted).
            planner: Scheduling pipeline.
            token_cache: Callback token cache owned by this instance.
            configure_logging: Install loguru sinks from settings.
        """
        self.settings = settings or get_settings()
        self.backend = backend or ClaudeCLIBackend(
            command=self.settings.claude_command,
            timeout_seconds=self.settings.generation_timeout,
        )
        self.parser = ResponseParser(max_tasks=self.settings.max_tasks)
        self.planner = planner or ExecutionPlanner()
        self.token_cache = token_cache or CallbackTokenCache(
            max_size=self.settings.token_cache_size,
            ttl_seconds=self.settings.token_cache_ttl,
        )

        if configure_logging:
            self._configure_logging()

    def _configure_logging(self) -> None:
        """Configure loguru based on settings."""
        logger.remove()  # Remove default handler

        logs_dir = Path(self.settings.log_dir)
        logs_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            str(logs_dir / "atomizer_{time:YYYY-MM-DD}.log"),
            rotation="1 day",
            retention="7 days",
            level=self.settings.log_level,
            format=LOG_FORMAT,
        )

        logger.add(
            sys.stderr,
            level="DEBUG" if self.settings.debug else self.settings.log_level,
            format=LOG_FORMAT,
            colorize=True,
        )

    # =========================================================================
    # PRIMARY INTERFACE
    # =========================================================================

    def build_prompt(
        self,
        description: str,
        complexity: str = "medium",
        tech_stack: str = "auto-detect",
    ) -> str:
        """Render the atomization prompt for a project description."""
        return build_atomization_prompt(
            description,
            max_tasks=self.settings.max_tasks,
            complexity=complexity,
            tech_stack=tech_stack,
        )

    async def atomize(
        self,
        description: str,
        complexity: str = "medium",
        tech_stack: str = "auto-detect",
    ) -> ExecutionPlan:
        """
        Atomize a project description into an execution plan.

        Raises:
            GenerationError: If the backend fails or returns nothing.
            MalformedPayloadError: If the response is not a valid payload.
            SchedulingError: If the task set fails structural validation.
        """
        logger.info(f"Atomizing project: {description[:80]}")

        prompt = self.build_prompt(description, complexity, tech_stack)
        result = await self.backend.generate(prompt)
        output = result.raise_for_error()

        return self.plan_from_text(output)

    def plan_from_text(self, text: str) -> ExecutionPlan:
        """Parse a raw generation response and plan it."""
        payload = self.parser.parse(text)
        return self.planner.plan_payload(payload)

    def plan_from_dict(self, data: dict[str, Any]) -> ExecutionPlan:
        """Validate a decoded payload and plan it."""
        payload = self.parser.parse_dict(data)
        return self.planner.plan_payload(payload)

    # =========================================================================
    # CALLBACK TOKENS
    # =========================================================================

    def callback_token(self, identifier: str) -> str:
        """Short token for a long identifier, for use in chat callbacks."""
        return self.token_cache.encode(identifier)

    def resolve_callback(self, token: str) -> str | None:
        """Identifier behind a callback token, or None once expired."""
        return self.token_cache.resolve(token)
