"""Internal models for operations and call results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

HTTP_METHODS: Tuple[str, ...] = ("get", "post", "put", "patch", "delete")

BODY_HINT = "Provide JSON request payload in `body`."


@dataclass(frozen=True)
class ParameterSpec:
    name: str
    location: str
    required: bool
    description: Optional[str] = None
    schema_type: Optional[str] = None
    schema_format: Optional[str] = None


@dataclass(frozen=True)
class OperationSpec:
    tool_name: str
    method: str
    api_path: str
    summary: str
    description: Optional[str] = None
    path_parameters: Tuple[ParameterSpec, ...] = ()
    query_parameters: Tuple[ParameterSpec, ...] = ()
    has_body: bool = False
    body_required: bool = False
    body_description: Optional[str] = None

    @property
    def parameters(self) -> Tuple[ParameterSpec, ...]:
        return self.path_parameters + self.query_parameters

    def tool_description(self) -> str:
        lines = [
            self.summary,
            f"HTTP {self.method.upper()} {self.api_path}",
            BODY_HINT if self.has_body else None,
            self.description,
        ]
        return "\n\n".join(line for line in lines if line)


@dataclass(frozen=True)
class OperationSummary:
    tool: str
    method: str
    path: str
    summary: str

    @classmethod
    def from_operation(cls, operation: OperationSpec) -> "OperationSummary":
        return cls(
            tool=operation.tool_name,
            method=operation.method.upper(),
            path=operation.api_path,
            summary=operation.summary,
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "tool": self.tool,
            "method": self.method,
            "path": self.path,
            "summary": self.summary,
        }


@dataclass(frozen=True)
class ApiCallResult:
    ok: bool
    status: int
    status_text: str
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    data: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "status": self.status,
            "statusText": self.status_text,
            "method": self.method,
            "url": self.url,
            "headers": dict(self.headers),
            "data": self.data,
        }
