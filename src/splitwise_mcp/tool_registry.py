"""Operation registry for the Splitwise MCP server."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional

from .config import Settings
from .models import OperationSpec, OperationSummary
from .openapi import SpecLoader


logger = logging.getLogger(__name__)


class DuplicateToolNameError(Exception):
    pass


class OperationRegistry:
    """Read-only set of operations keyed by tool name, listed in name order."""

    def __init__(self, operations: Iterable[OperationSpec]) -> None:
        by_name: Dict[str, OperationSpec] = {}
        for operation in operations:
            if operation.tool_name in by_name:
                raise DuplicateToolNameError(
                    f"Duplicate tool name: {operation.tool_name}"
                )
            by_name[operation.tool_name] = operation

        self._operations = tuple(sorted(by_name.values(), key=lambda op: op.tool_name))
        self._by_name = by_name

    def __len__(self) -> int:
        return len(self._operations)

    def __iter__(self) -> Iterator[OperationSpec]:
        return iter(self._operations)

    def get(self, tool_name: str) -> Optional[OperationSpec]:
        return self._by_name.get(tool_name)

    def tool_names(self) -> List[str]:
        return [operation.tool_name for operation in self._operations]

    def summaries(self) -> List[OperationSummary]:
        return [OperationSummary.from_operation(operation) for operation in self._operations]


def load_registry(settings: Settings) -> OperationRegistry:
    loader = SpecLoader(settings.splitwise_spec_dir)
    registry = OperationRegistry(loader.extract_operations())
    logger.info("Operation registry ready: %s tools", len(registry))
    return registry
