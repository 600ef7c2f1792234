"""Tool invocation layer: validation, dispatch and result formatting."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel

from .executors import RequestDispatcher
from .logging import redact_payload
from .models import OperationSpec
from .schemas import build_input_model, validate_arguments
from .tool_registry import OperationRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolOutcome:
    is_error: bool
    text: str
    structured_content: Optional[Dict[str, Any]] = None


class ToolInvoker:
    """
    Binds registry operations to the request dispatcher.

    Every failure raised while handling a call is turned into an error
    outcome here, so callers on the transport side only ever see outcomes.
    """

    def __init__(self, registry: OperationRegistry, dispatcher: RequestDispatcher) -> None:
        self.registry = registry
        self.dispatcher = dispatcher
        self._input_models: Dict[str, type[BaseModel]] = {
            operation.tool_name: build_input_model(operation) for operation in registry
        }

    def input_model(self, operation: OperationSpec) -> type[BaseModel]:
        model = self._input_models.get(operation.tool_name)
        if model is None:
            model = build_input_model(operation)
        return model

    async def invoke(
        self, operation: OperationSpec, arguments: Optional[Dict[str, Any]]
    ) -> ToolOutcome:
        payload = arguments if isinstance(arguments, dict) else {}
        logger.info("Executing tool=%s payload=%s", operation.tool_name, redact_payload(payload))

        try:
            args = validate_arguments(self.input_model(operation), payload)
            result = await self.dispatcher.call(operation, args)
        except Exception as exc:
            logger.error("Tool execution failed: tool=%s error=%s", operation.tool_name, exc)
            return self._format_error(str(exc) or "Unknown server error")

        if not result.ok:
            logger.warning(
                "Splitwise returned %s for tool=%s", result.status, operation.tool_name
            )
        structured = result.to_dict()
        return ToolOutcome(
            is_error=not result.ok,
            text=json.dumps(structured, indent=2),
            structured_content=structured,
        )

    def list_operations(self) -> ToolOutcome:
        summaries = [summary.to_dict() for summary in self.registry.summaries()]
        listing = {"count": len(summaries), "operations": summaries}
        return ToolOutcome(
            is_error=False,
            text=json.dumps(listing, indent=2),
            structured_content=listing,
        )

    def _format_error(self, message: str) -> ToolOutcome:
        return ToolOutcome(is_error=True, text=message)
