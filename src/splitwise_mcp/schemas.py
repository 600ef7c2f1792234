"""Build per-operation input models from parameter metadata."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, create_model

from .models import OperationSpec, ParameterSpec

BODY_FIELD = "body"


def field_type_for(parameter: ParameterSpec) -> Any:
    schema_type = parameter.schema_type
    if schema_type == "integer":
        return int
    if schema_type == "number":
        return float
    if schema_type == "boolean":
        return bool
    if schema_type == "array":
        return List[str]
    return str


def describe_parameter(parameter: ParameterSpec) -> str:
    location_text = "Path parameter." if parameter.location == "path" else "Query parameter."
    description_text = f" {parameter.description}" if parameter.description else ""
    format_text = f" Format: {parameter.schema_format}." if parameter.schema_format else ""
    return f"{location_text}{description_text}{format_text}".strip()


def describe_body(operation: OperationSpec) -> str:
    return " ".join(["JSON request body.", operation.body_description or ""]).strip()


def build_input_model(operation: OperationSpec) -> type[BaseModel]:
    """Create the pydantic model validating one operation's arguments.

    Fields are keyed by the original parameter names through aliases, so names
    that are not Python identifiers still validate and show up unchanged in the
    JSON schema. A name declared twice keeps its last declaration.
    """
    declared: Dict[str, Tuple[Any, Any, str]] = {}

    for parameter in operation.parameters:
        field_type = field_type_for(parameter)
        description = describe_parameter(parameter)
        if parameter.required:
            declared[parameter.name] = (field_type, ..., description)
        else:
            declared[parameter.name] = (Optional[field_type], None, description)

    if operation.has_body:
        default = ... if operation.body_required else None
        declared[BODY_FIELD] = (Any, default, describe_body(operation))

    fields: Dict[str, Tuple[Any, Any]] = {}
    for index, (name, (field_type, default, description)) in enumerate(declared.items()):
        fields[f"arg_{index}"] = (
            field_type,
            Field(default, alias=name, description=description),
        )

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)
    model_name = f"{_sanitize_name(operation.tool_name)}Input"
    return create_model(model_name, __config__=model_config, **fields)


def input_schema(model: type[BaseModel]) -> Dict[str, Any]:
    return model.model_json_schema(by_alias=True)


def validate_arguments(model: type[BaseModel], arguments: Dict[str, Any]) -> Dict[str, Any]:
    """Validate and coerce ``arguments``; only keys the caller supplied come back."""
    return model.model_validate(arguments).model_dump(by_alias=True, exclude_unset=True)


def _sanitize_name(name: str) -> str:
    return "".join(ch if ch.isalnum() else "_" for ch in name)
