"""Shared fixtures for splitwise-mcp tests.

The ``spec_dir`` fixture writes a small Splitwise-style spec tree (an
index.yaml plus one YAML document per path) into a temporary directory. It
deliberately contains a missing document, a document that is not a mapping,
an index entry without a $ref, header and $ref parameters, and a parameter
declared both at path level and method level.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict

import pytest

from splitwise_mcp.config import TOKEN_ENV_KEYS
from splitwise_mcp.executors import RequestDispatcher
from splitwise_mcp.openapi import SpecLoader
from splitwise_mcp.tool_registry import OperationRegistry

BASE_URL = "https://splitwise.test/api/v3.0"
TEST_TOKEN = "test-token"


SPEC_FILES: Dict[str, str] = {
    "index.yaml": """\
/get_current_user:
  $ref: ./get_current_user.yaml
/get_user/{id}:
  $ref: ./get_user_{id}.yaml
/update_user/{id}:
  $ref: ./update_user_{id}.yaml
/get_expenses:
  $ref: ./get_expenses.yaml
/create_expense:
  $ref: ./create_expense.yaml
/missing:
  $ref: ./missing.yaml
/broken:
  $ref: ./broken.yaml
/not_a_ref: just-a-string
/get_notifications:
  $ref: get_notifications.yaml
/groups/{id}:
  $ref: ./groups_{id}.yaml
""",
    "get_current_user.yaml": """\
get:
  summary: Get information about the current user
  tags: [users]
""",
    "get_user_{id}.yaml": """\
parameters:
  - in: path
    name: id
    required: true
    schema:
      type: integer
get:
  summary: Get information about another user
""",
    "update_user_{id}.yaml": """\
parameters:
  - in: path
    name: id
    schema:
      type: integer
post:
  summary: Update a user
  requestBody:
    required: true
    description: Fields to change.
""",
    "get_expenses.yaml": """\
get:
  summary: List the current user's expenses
  parameters:
    - in: query
      name: group_id
      description: If provided, only expenses in that group will be returned.
      schema:
        type: integer
    - in: query
      name: dated_after
      schema:
        type: string
        format: date-time
    - in: query
      name: visible
      schema:
        type: boolean
    - in: query
      name: cost
      schema:
        type: number
    - in: query
      name: members
      schema:
        type: array
    - in: header
      name: X-Trace
      schema:
        type: string
    - $ref: '#/components/parameters/limit'
""",
    "create_expense.yaml": """\
post:
  summary: Create an expense
  description: Creates an expense. Splitwise validates the payload server side.
  requestBody:
    content:
      application/json: {}
""",
    "broken.yaml": """\
- just
- a list
""",
    "get_notifications.yaml": """\
get: {}
""",
    "groups_{id}.yaml": """\
parameters:
  - in: path
    name: id
    schema:
      type: integer
  - in: query
    name: filter
    description: Shared filter.
get:
  summary: Get a group
  parameters:
    - in: query
      name: filter
      description: Per-method filter.
      schema:
        type: integer
delete:
  summary: Delete a group
  requestBody: false
""",
}


def write_spec(target: Path, files: Dict[str, str]) -> Path:
    target.mkdir(parents=True, exist_ok=True)
    for name, text in files.items():
        (target / name).write_text(text, encoding="utf-8")
    return target


@pytest.fixture
def spec_dir(tmp_path: Path) -> Path:
    return write_spec(tmp_path / "paths", SPEC_FILES)


@pytest.fixture
def operations(spec_dir: Path):
    return SpecLoader(spec_dir).extract_operations()


@pytest.fixture
def registry(operations) -> OperationRegistry:
    return OperationRegistry(operations)


@pytest.fixture
def operation(registry):
    """Look up an operation by tool name."""
    def _get(tool_name: str):
        found = registry.get(tool_name)
        if found is None:
            pytest.fail(f"Operation {tool_name!r} not in registry")
        return found
    return _get


@pytest.fixture
def no_token_env(monkeypatch):
    for key in TOKEN_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def token_env(no_token_env, monkeypatch):
    monkeypatch.setenv("SPLITWISE_API_KEY", TEST_TOKEN)


@pytest.fixture
def dispatcher() -> RequestDispatcher:
    return RequestDispatcher(base_url=BASE_URL, timeout_seconds=5)
