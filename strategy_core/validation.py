"""
Strategy Validation

Two passes:
1. Structural: the draft must parse into the pydantic models.
2. Semantic: name, conditions and exit policy rules that the builder form
   enforces before a strategy can be saved or run.

Every problem is collected into an Issue list instead of stopping at the first.
"""

import logging
import math
from typing import Any, Iterable, List, Mapping, Sequence, Union

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from .drafts import normalize_condition, normalize_draft
from .exceptions import Issue, StrategyValidationError
from .indicators import lookup_indicator
from .models import Condition, IndicatorRef, NumberValue, StrategyDefinition

logger = logging.getLogger(__name__)

# Issue codes
MISSING = 'missing'
INVALID = 'invalid'
EMPTY_NAME = 'empty-name'
NO_CONDITIONS = 'no-conditions'
PARAM_MISSING = 'param-missing'
PARAM_NOT_POSITIVE = 'param-not-positive'
PARAM_NOT_INTEGER = 'param-not-integer'
PARAM_UNKNOWN = 'param-unknown'
CROSS_AGAINST_LITERAL = 'cross-against-literal'
EXIT_BRANCH_MISSING = 'exit-branch-missing'
EXIT_NOT_POSITIVE = 'exit-not-positive'

_CONDITIONS = TypeAdapter(List[Condition])


def _join_path(*parts: Any) -> str:
    path = ''
    for part in parts:
        if isinstance(part, int):
            path += f'[{part}]'
        elif part != '':
            path = f'{path}.{part}' if path else str(part)
    return path


def issues_from_pydantic(exc: PydanticValidationError, prefix: str = '') -> List[Issue]:
    """Convert pydantic errors into Issues"""
    issues = []
    for err in exc.errors():
        path = _join_path(prefix, *err['loc'])
        code = MISSING if err['type'] == 'missing' else INVALID
        issues.append(Issue(path=path, code=code, message=err['msg']))
    return issues


# ============================================================================
# Semantic rules
# ============================================================================

def check_indicator(ref: IndicatorRef, path: str) -> List[Issue]:
    """Every required param present, numeric, positive; periods are whole bar counts"""
    spec = lookup_indicator(ref.indicator)
    if spec is None:
        return [Issue(_join_path(path, 'indicator'), INVALID, f"unknown indicator '{ref.indicator}'")]

    issues = []
    for name in spec.required_params:
        param_path = _join_path(path, 'params', name)
        if name not in ref.params:
            issues.append(Issue(param_path, PARAM_MISSING, f"{spec.name} requires parameter '{name}'"))
            continue
        value = ref.params[name]
        if isinstance(value, bool) or not math.isfinite(value) or value <= 0:
            issues.append(Issue(param_path, PARAM_NOT_POSITIVE, f"{spec.name} '{name}' must be a positive number"))
        elif name in spec.integer_params and value != int(value):
            issues.append(Issue(param_path, PARAM_NOT_INTEGER, f"{spec.name} '{name}' must be a whole number of bars"))

    for name in ref.params:
        if name not in spec.required_params:
            issues.append(Issue(
                _join_path(path, 'params', name), PARAM_UNKNOWN,
                f"{spec.name} does not take parameter '{name}'",
            ))
    return issues


def check_condition(condition: Condition, path: str = '') -> List[Issue]:
    issues = []
    for side in ('subject', 'comparand'):
        ref = getattr(condition, side)
        if isinstance(ref, IndicatorRef):
            issues.extend(check_indicator(ref, _join_path(path, side)))

    # Crossing needs two series; a literal is a single bar value
    if condition.operator.is_crossing and isinstance(condition.comparand, NumberValue):
        issues.append(Issue(
            _join_path(path, 'operator'), CROSS_AGAINST_LITERAL,
            f"'{condition.operator.value}' needs a price or indicator comparand, not a number",
        ))
    return issues


def check_conditions(conditions: Sequence[Condition], path: str = 'conditions') -> List[Issue]:
    if not conditions:
        return [Issue(path, NO_CONDITIONS, "at least one condition is required")]
    issues = []
    for i, condition in enumerate(conditions):
        issues.extend(check_condition(condition, _join_path(path, i)))
    return issues


def check_strategy(strategy: StrategyDefinition) -> List[Issue]:
    """Semantic issues for an already-parsed strategy (empty list = valid)"""
    issues = []
    if not strategy.name.strip():
        issues.append(Issue('name', EMPTY_NAME, "strategy name is required"))

    issues.extend(check_conditions(strategy.conditions))

    exit_policy = strategy.exit
    branch_path = _join_path('exit', exit_policy.mode.value)
    active = exit_policy.active
    if active is None:
        issues.append(Issue(branch_path, EXIT_BRANCH_MISSING, f"{exit_policy.mode.value} stop settings are required"))
    elif active.value <= 0:
        issues.append(Issue(
            _join_path(branch_path, 'value'), EXIT_NOT_POSITIVE,
            f"{exit_policy.mode.value} stop magnitude must be positive",
        ))
    return issues


def _raw_checks(draft: Mapping[str, Any], seen: Iterable[str]) -> List[Issue]:
    """Name/conditions checks on an unparsed draft, so they are reported alongside structural errors"""
    seen = set(seen)
    issues = []
    name = draft.get('name')
    if isinstance(name, str) and not name.strip() and 'name' not in seen:
        issues.append(Issue('name', EMPTY_NAME, "strategy name is required"))
    conditions = draft.get('conditions')
    if isinstance(conditions, list) and not conditions and 'conditions' not in seen:
        issues.append(Issue('conditions', NO_CONDITIONS, "at least one condition is required"))
    return issues


# ============================================================================
# Public API
# ============================================================================

def validate_strategy(draft: Union[Mapping[str, Any], StrategyDefinition]) -> StrategyDefinition:
    """
    Validate a builder-edited draft

    Args:
        draft: Canonical strategy dict, builder-shaped dict, or a StrategyDefinition

    Returns:
        The validated StrategyDefinition

    Raises:
        StrategyValidationError: with every issue found
    """
    if isinstance(draft, StrategyDefinition):
        strategy = draft
    else:
        if not isinstance(draft, Mapping):
            raise StrategyValidationError([Issue('', INVALID, "strategy draft must be an object")])
        draft = normalize_draft(draft)
        try:
            strategy = StrategyDefinition.model_validate(draft)
        except PydanticValidationError as e:
            issues = issues_from_pydantic(e)
            issues.extend(_raw_checks(draft, (i.path for i in issues)))
            logger.debug(f"Draft failed structural validation: {len(issues)} issue(s)")
            raise StrategyValidationError(issues) from e

    issues = check_strategy(strategy)
    if issues:
        logger.debug(f"Strategy '{strategy.name}' rejected: {len(issues)} issue(s)")
        raise StrategyValidationError(issues)
    return strategy


def validate_conditions(conditions: Sequence[Any]) -> List[Condition]:
    """Validate a bare condition list (screener scans have no direction or exit)"""
    if not isinstance(conditions, (list, tuple)):
        raise StrategyValidationError([Issue('conditions', INVALID, "conditions must be a list")])
    rows = [normalize_condition(c) if isinstance(c, Mapping) else c for c in conditions]
    try:
        parsed = _CONDITIONS.validate_python(rows)
    except PydanticValidationError as e:
        raise StrategyValidationError(issues_from_pydantic(e, prefix='conditions')) from e

    issues = check_conditions(parsed)
    if issues:
        raise StrategyValidationError(issues)
    return parsed


def collect_issues(draft: Union[Mapping[str, Any], StrategyDefinition]) -> List[Issue]:
    """Issue list for a draft; empty means it would validate"""
    try:
        validate_strategy(draft)
    except StrategyValidationError as e:
        return e.issues
    return []
