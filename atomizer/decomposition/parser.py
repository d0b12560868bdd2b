"""Response parser - turns generation output into a validated payload.

The generation step answers in free text that should contain one JSON
object, sometimes wrapped in a markdown code fence or surrounded by prose.
Nothing from that text is trusted until it has passed the record schema.
"""

import json
import re
from typing import Any

from loguru import logger
from pydantic import ValidationError

from atomizer.core.exceptions import MalformedPayloadError
from atomizer.decomposition.models import AtomizationPayload

FENCE_PATTERN = re.compile(r"^```(?:json)?\s*\n?(?P<body>.*?)\n?```\s*$", re.DOTALL)


class ResponseParser:
    """
    Parse generation output into an AtomizationPayload.

    Example:
        >>> parser = ResponseParser(max_tasks=20)
        >>> payload = parser.parse('```json\\n{"tasks": [...]}\\n```')
        >>> len(payload.tasks)
        3
    """

    def __init__(self, max_tasks: int | None = None) -> None:
        """
        Initialize the parser.

        Args:
            max_tasks: Reject payloads with more tasks than this.
        """
        self.max_tasks = max_tasks

    def parse(self, text: str) -> AtomizationPayload:
        """
        Extract, decode and validate the JSON payload in ``text``.

        Raises:
            MalformedPayloadError: If no valid payload can be recovered.
        """
        data = self.extract_json(text)
        return self.parse_dict(data)

    def parse_dict(self, data: Any) -> AtomizationPayload:
        """
        Validate an already-decoded payload.

        Raises:
            MalformedPayloadError: If the data fails the record schema.
        """
        if not isinstance(data, dict):
            raise MalformedPayloadError("payload must be a JSON object")

        try:
            payload = AtomizationPayload.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Payload failed validation with {e.error_count()} errors")
            raise MalformedPayloadError(self._summarize(e)) from e

        if self.max_tasks is not None and len(payload.tasks) > self.max_tasks:
            raise MalformedPayloadError(
                f"{len(payload.tasks)} tasks exceed the limit of {self.max_tasks}"
            )

        logger.debug(
            f"Parsed payload with {len(payload.tasks)} tasks and "
            f"{len(payload.dependencies)} dependency edges"
        )
        return payload

    @staticmethod
    def extract_json(text: str) -> Any:
        """
        Pull the outermost JSON object out of free text.

        Raises:
            MalformedPayloadError: If no decodable object is present.
        """
        content = text.strip()

        fenced = FENCE_PATTERN.match(content)
        if fenced:
            content = fenced.group("body").strip()

        start = content.find("{")
        end = content.rfind("}")
        if start == -1 or end < start:
            raise MalformedPayloadError("no JSON object found in response")

        try:
            return json.loads(content[start:end + 1])
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to decode response: {content[:200]}")
            raise MalformedPayloadError(f"invalid JSON: {e.msg}") from e

    @staticmethod
    def _summarize(error: ValidationError) -> str:
        first = error.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        return f"{location}: {first['msg']}"
