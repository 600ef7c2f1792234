"""Execution layer turning validated tool arguments into Splitwise API calls."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union
from urllib.parse import parse_qsl, quote

import httpx

from .config import TOKEN_ENV_KEYS
from .models import ApiCallResult, OperationSpec
from .schemas import BODY_FIELD

logger = logging.getLogger(__name__)

_COMPACT = (",", ":")
# Same unreserved set as JavaScript's encodeURIComponent.
_PATH_SAFE = "!'()*"


class ExecutionError(Exception):
    pass


class ConfigurationError(ExecutionError):
    pass


class InputError(ExecutionError):
    pass


@dataclass(frozen=True)
class ObjectBody:
    value: Dict[str, Any]


@dataclass(frozen=True)
class JsonStringBody:
    text: str


@dataclass(frozen=True)
class FormStringBody:
    text: str


RequestBody = Union[ObjectBody, JsonStringBody, FormStringBody]


def resolve_access_token(
    env_keys: Sequence[str] = TOKEN_ENV_KEYS,
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    environ = os.environ if environ is None else environ
    for key in env_keys:
        value = (environ.get(key) or "").strip()
        if value:
            return value
    raise ConfigurationError(f"Missing Splitwise token. Set one of: {', '.join(env_keys)}.")


def build_resolved_path(operation: OperationSpec, args: Mapping[str, Any]) -> str:
    resolved = operation.api_path
    for parameter in operation.path_parameters:
        value = args.get(parameter.name)
        if value is None or value == "":
            raise InputError(f"Missing required path parameter: {parameter.name}")
        resolved = resolved.replace(
            f"{{{parameter.name}}}", quote(_stringify(value), safe=_PATH_SAFE), 1
        )
    return resolved


def build_query(operation: OperationSpec, args: Mapping[str, Any]) -> List[Tuple[str, str]]:
    query: List[Tuple[str, str]] = []
    for parameter in operation.query_parameters:
        value = args.get(parameter.name)
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            query.extend((parameter.name, _stringify(entry)) for entry in value)
        elif isinstance(value, dict):
            query.append((parameter.name, json.dumps(value, separators=_COMPACT)))
        else:
            query.append((parameter.name, _stringify(value)))
    return query


def classify_body(raw: Any) -> RequestBody:
    """Decide how a caller-supplied ``body`` should be read."""
    if isinstance(raw, dict):
        return ObjectBody(raw)
    if not isinstance(raw, str):
        raise InputError(
            "The `body` field must be an object. Do not send serialized `_json` payloads."
        )

    text = raw.strip()
    if not text:
        raise InputError("The `body` field cannot be an empty string. Provide an object.")
    if text.startswith("{") or text.startswith("["):
        return JsonStringBody(text)
    if "=" not in text:
        raise InputError(
            "String body must be a JSON object string or URL-encoded key/value pairs."
        )
    return FormStringBody(text)


def normalize_body(raw: Any) -> Dict[str, Any]:
    body = classify_body(raw)
    if isinstance(body, ObjectBody):
        return body.value
    if isinstance(body, FormStringBody):
        return parse_form_body(body.text)

    try:
        parsed = json.loads(body.text)
    except json.JSONDecodeError as exc:
        raise InputError(
            "Invalid JSON in string body. Provide an object or valid JSON object string. "
            f"{exc}"
        ) from exc
    if not isinstance(parsed, dict):
        raise InputError(
            "The `body` field must decode to a JSON object (not a primitive or array)."
        )
    return parsed


def parse_form_body(text: str) -> Dict[str, Any]:
    """Parse ``a=1&a=2&b=3`` into ``{"a": ["1", "2"], "b": "3"}``."""
    parsed: Dict[str, Any] = {}
    for key, value in parse_qsl(text, keep_blank_values=True):
        existing = parsed.get(key)
        if key not in parsed:
            parsed[key] = value
        elif isinstance(existing, list):
            existing.append(value)
        else:
            parsed[key] = [existing, value]
    return parsed


def parse_response_body(content_type: Optional[str], raw_text: str) -> Any:
    trimmed = raw_text.strip()
    if not trimmed:
        return None

    looks_like_json = trimmed.startswith("{") or trimmed.startswith("[")
    advertised_json = "application/json" in (content_type or "")
    if advertised_json or looks_like_json:
        try:
            return json.loads(trimmed)
        except ValueError:
            return raw_text
    return raw_text


class RequestDispatcher:
    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30,
        token_env_keys: Sequence[str] = TOKEN_ENV_KEYS,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.token_env_keys = tuple(token_env_keys)

    async def call(self, operation: OperationSpec, args: Mapping[str, Any]) -> ApiCallResult:
        access_token = resolve_access_token(self.token_env_keys)
        resolved_path = build_resolved_path(operation, args)
        url = httpx.URL(f"{self.base_url}{resolved_path}", params=build_query(operation, args))
        method = operation.method.upper()

        headers: Dict[str, str] = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        }
        content: Optional[str] = None

        if operation.has_body:
            body_supplied = BODY_FIELD in args
            if operation.body_required and not body_supplied:
                raise InputError("Missing required request body. Provide input field `body`.")
            if body_supplied:
                headers["Content-Type"] = "application/json"
                content = json.dumps(normalize_body(args[BODY_FIELD]), separators=_COMPACT)

        logger.debug("Dispatching %s %s tool=%s", method, url, operation.tool_name)
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            response = await client.request(method, url, headers=headers, content=content)

        return ApiCallResult(
            ok=response.is_success,
            status=response.status_code,
            status_text=response.reason_phrase,
            method=method,
            url=str(url),
            headers=dict(response.headers.items()),
            data=parse_response_body(response.headers.get("content-type"), response.text),
        )


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if value is None:
        return "null"
    return str(value)
