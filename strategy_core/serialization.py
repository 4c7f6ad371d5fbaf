"""
Strategy Serialization

Canonical JSON for storage and for the strategy execution service.
Loading fails closed: a record is either fully valid or rejected.
"""

import json
from typing import Any, Mapping, Union

from pydantic import ValidationError as PydanticValidationError

from .exceptions import Issue, MalformedInput
from .models import StrategyDefinition
from .validation import INVALID, check_strategy, issues_from_pydantic


def serialize(strategy: StrategyDefinition) -> str:
    """Strategy -> canonical JSON string"""
    return json.dumps(strategy.to_payload())


def deserialize(payload: Union[str, bytes, bytearray, Mapping[str, Any]]) -> StrategyDefinition:
    """
    Canonical JSON (or an already-decoded dict) -> StrategyDefinition

    Raises:
        MalformedInput: invalid JSON, missing/mistyped fields, or a record
            that would not pass validation
    """
    if isinstance(payload, (bytes, bytearray)):
        try:
            payload = payload.decode('utf-8')
        except UnicodeDecodeError as e:
            raise MalformedInput(f"Strategy payload is not UTF-8: {e}") from e

    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise MalformedInput(f"Strategy payload is not valid JSON: {e.msg}") from e

    if not isinstance(payload, Mapping):
        raise MalformedInput(
            f"Strategy payload must be a JSON object, got {type(payload).__name__}",
            [Issue('', INVALID, "expected an object")],
        )

    try:
        strategy = StrategyDefinition.model_validate(dict(payload))
    except PydanticValidationError as e:
        issues = issues_from_pydantic(e)
        raise MalformedInput(f"Malformed strategy: {'; '.join(str(i) for i in issues)}", issues) from e

    issues = check_strategy(strategy)
    if issues:
        raise MalformedInput(f"Invalid stored strategy '{strategy.name}': {'; '.join(str(i) for i in issues)}", issues)
    return strategy
