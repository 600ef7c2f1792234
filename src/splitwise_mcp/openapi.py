"""Path-document spec loader and operation parser."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .models import HTTP_METHODS, OperationSpec, ParameterSpec
from .naming import assign_tool_names


logger = logging.getLogger(__name__)

INDEX_FILE = "index.yaml"

_LOCATIONS = {"path", "query"}


class SpecLoadError(Exception):
    pass


class SpecLoader:
    def __init__(self, spec_dir: Path) -> None:
        self.spec_dir = Path(spec_dir)

    @property
    def index_path(self) -> Path:
        return self.spec_dir / INDEX_FILE

    def load_index(self) -> Dict[str, Any]:
        try:
            index = yaml.safe_load(self.index_path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise SpecLoadError(f"Cannot read spec index {self.index_path}: {exc}") from exc

        if not isinstance(index, dict):
            raise SpecLoadError(f"{self.index_path} is not a valid YAML object.")
        return index

    def load_path_document(self, ref: str) -> Optional[Dict[str, Any]]:
        name = ref[2:] if ref.startswith("./") else ref
        document_path = self.spec_dir / name
        try:
            document = yaml.safe_load(document_path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Skipping unreadable path document %s: %s", document_path, exc)
            return None

        if not isinstance(document, dict):
            logger.warning("Skipping path document %s: not a YAML object", document_path)
            return None
        return document

    def extract_operations(self) -> List[OperationSpec]:
        """Load every path document and return its operations in discovery order."""
        drafts: List[Tuple[str, str, Dict[str, Any], List[ParameterSpec]]] = []

        for api_path, entry in self.load_index().items():
            if not isinstance(entry, dict) or not isinstance(entry.get("$ref"), str):
                continue
            document = self.load_path_document(entry["$ref"])
            if document is None:
                continue

            shared_parameters = normalize_parameters(document.get("parameters"))
            for method in HTTP_METHODS:
                operation = document.get(method)
                if not isinstance(operation, dict):
                    continue
                parameters = [
                    *shared_parameters,
                    *normalize_parameters(operation.get("parameters")),
                ]
                drafts.append((str(api_path), method, operation, parameters))

        tool_names = assign_tool_names((path, method) for path, method, _, _ in drafts)
        operations = [
            self._build_operation(tool_name, path, method, operation, parameters)
            for tool_name, (path, method, operation, parameters) in zip(tool_names, drafts)
        ]
        logger.info("Loaded %s operations from %s", len(operations), self.spec_dir)
        return operations

    def _build_operation(
        self,
        tool_name: str,
        api_path: str,
        method: str,
        operation: Dict[str, Any],
        parameters: List[ParameterSpec],
    ) -> OperationSpec:
        request_body = operation.get("requestBody")
        body_meta = request_body if isinstance(request_body, dict) else {}
        summary = operation.get("summary")

        return OperationSpec(
            tool_name=tool_name,
            method=method,
            api_path=api_path,
            summary=summary if isinstance(summary, str) else f"{method.upper()} {api_path}",
            description=_optional_str(operation.get("description")),
            path_parameters=tuple(p for p in parameters if p.location == "path"),
            query_parameters=tuple(p for p in parameters if p.location == "query"),
            # an empty requestBody mapping still declares a body
            has_body=isinstance(request_body, dict) or bool(request_body),
            body_required=body_meta.get("required") is True,
            body_description=_optional_str(body_meta.get("description")),
        )


def normalize_parameters(raw: Any) -> List[ParameterSpec]:
    """Keep the path and query parameters of a raw ``parameters`` list."""
    if not isinstance(raw, list):
        return []

    parameters: List[ParameterSpec] = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        location = entry.get("in")
        name = entry.get("name")
        if location not in _LOCATIONS:
            continue
        if not isinstance(name, str) or not name:
            continue

        schema = entry.get("schema")
        schema = schema if isinstance(schema, dict) else {}
        parameters.append(
            ParameterSpec(
                name=name,
                location=location,
                required=location == "path" or entry.get("required") is True,
                description=_optional_str(entry.get("description")),
                schema_type=_optional_str(schema.get("type")),
                schema_format=_optional_str(schema.get("format")),
            )
        )
    return parameters


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None
