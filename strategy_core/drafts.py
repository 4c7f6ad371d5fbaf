"""
Builder Draft Normalization

The strategy builder, screener and backtester forms edit strategies in their
own shape:

    {
        "name": "EMA Crossover",
        "strategyType": "buy",
        "entryConditions": [
            {"property": "Close", "operator": "greater_than", "valueType": "indicator",
             "valueProperty": "EMA", "valueParams": {"period": 20}, "candle": 0}
        ],
        "exitStrategy": {"type": "sl", "slValue": 2, "slUnit": "percent",
                         "tslValue": 1.5, "tslUnit": "percent"}
    }

normalize_draft() maps that onto the canonical StrategyDefinition shape.
Canonical drafts pass through untouched, so both can be validated the same way.
"""

from typing import Any, Dict, Mapping

from .models import (
    Condition,
    ExitMode,
    ExitPolicy,
    IndicatorRef,
    Operator,
    PriceField,
    PriceRef,
    StopSetting,
    StopUnit,
)

_PRICE_FIELDS = {f.value for f in PriceField}

_BUILDER_EXIT_MODES = {
    'sl': ExitMode.FIXED.value,
    'tsl': ExitMode.TRAILING.value,
}


def _series(name: Any, params: Any, offset: Any) -> Dict[str, Any]:
    """Builder dropdown value -> canonical series reference"""
    if isinstance(name, str) and name.strip().lower() in _PRICE_FIELDS:
        return {'field': name.strip().lower(), 'offset': offset}
    if isinstance(params, Mapping):
        params = dict(params)
    return {'indicator': name, 'params': params if params is not None else {}, 'offset': offset}


def is_builder_condition(row: Mapping[str, Any]) -> bool:
    return 'property' in row or 'valueType' in row


def normalize_condition(row: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Convert one builder condition row

    The row's candle selector applies to both sides. valueParams belong to the
    right-hand indicator; when the right-hand side is a number they carry the
    left-hand indicator's params instead (screener rows such as RSI(14) < 30).
    """
    if not is_builder_condition(row):
        return dict(row)

    offset = row.get('candle', 0)
    value_type = row.get('valueType', 'indicator')
    value_params = row.get('valueParams') or {}

    if value_type == 'number':
        subject = _series(row.get('property'), row.get('params') or value_params, offset)
        comparand: Any = {'value': row.get('valueProperty')}
    else:
        subject = _series(row.get('property'), row.get('params'), offset)
        comparand = _series(row.get('valueProperty'), value_params, offset)

    return {
        'subject': subject,
        'operator': row.get('operator'),
        'comparand': comparand,
    }


def is_builder_exit(exit_strategy: Mapping[str, Any]) -> bool:
    return 'type' in exit_strategy or 'slValue' in exit_strategy or 'tslValue' in exit_strategy


def normalize_exit(exit_strategy: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert the builder's stop-loss / trailing-stop radio group; both branches are kept"""
    if not is_builder_exit(exit_strategy):
        return dict(exit_strategy)

    kind = exit_strategy.get('type')
    mode = _BUILDER_EXIT_MODES.get(kind, kind)
    policy: Dict[str, Any] = {'mode': mode}
    for prefix, branch in (('sl', ExitMode.FIXED.value), ('tsl', ExitMode.TRAILING.value)):
        if f'{prefix}Value' in exit_strategy:
            policy[branch] = {
                'value': exit_strategy[f'{prefix}Value'],
                'unit': exit_strategy.get(f'{prefix}Unit', StopUnit.PERCENT.value),
            }
    return policy


def normalize_draft(draft: Mapping[str, Any]) -> Dict[str, Any]:
    """Map a builder-shaped draft onto the canonical shape (canonical keys win)"""
    result = dict(draft)

    if 'strategyType' in result:
        result.setdefault('direction', result.pop('strategyType'))
    if 'entryConditions' in result:
        result.setdefault('conditions', result.pop('entryConditions'))
    if 'exitStrategy' in result:
        result.setdefault('exit', result.pop('exitStrategy'))

    conditions = result.get('conditions')
    if isinstance(conditions, list):
        result['conditions'] = [
            normalize_condition(c) if isinstance(c, Mapping) else c for c in conditions
        ]

    exit_policy = result.get('exit')
    if isinstance(exit_policy, Mapping):
        result['exit'] = normalize_exit(exit_policy)

    return result


def default_condition() -> Condition:
    """Row the builder adds on 'Add Condition': latest close above EMA(20)"""
    return Condition(
        subject=PriceRef(field=PriceField.CLOSE, offset=0),
        operator=Operator.GREATER_THAN,
        comparand=IndicatorRef(indicator='EMA', params={'period': 20}, offset=0),
    )


def default_exit_policy() -> ExitPolicy:
    """Builder starting state: 2% fixed stop active, 1.5% trailing stop kept in reserve"""
    return ExitPolicy(
        mode=ExitMode.FIXED,
        fixed=StopSetting(value=2, unit=StopUnit.PERCENT),
        trailing=StopSetting(value=1.5, unit=StopUnit.PERCENT),
    )
