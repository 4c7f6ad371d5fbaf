"""
Pydantic Models for Strategy Definitions

Structural shape of a trading rule set: entry conditions + exit policy.
Semantic rules (required indicator params, positive magnitudes, ...) live in
validation.py so that every problem can be reported at once.

Wire format notes:
- Series references are a tagged union (price field / indicator / literal
  number). The `kind` tag may be omitted on input; it is inferred from the
  keys present and is not written back out.
- ExitPolicy is written as the active branch flattened next to `mode`
  ({"mode": "trailing", "value": 1.5, "unit": "percent"}), with the inactive
  branch kept under its own key when one is retained.
"""

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    Discriminator,
    Field,
    StrictFloat,
    StrictInt,
    Tag,
    field_validator,
    model_serializer,
    model_validator,
)

from .indicators import canonical_indicator_name


class PriceField(str, Enum):
    OPEN = 'open'
    HIGH = 'high'
    LOW = 'low'
    CLOSE = 'close'
    VOLUME = 'volume'


class Operator(str, Enum):
    GREATER_THAN = 'greater-than'
    LESS_THAN = 'less-than'
    EQUALS = 'equals'
    CROSSES_ABOVE = 'crosses-above'
    CROSSES_BELOW = 'crosses-below'

    @property
    def is_crossing(self) -> bool:
        return self in (Operator.CROSSES_ABOVE, Operator.CROSSES_BELOW)


_OPERATOR_SYMBOLS = {
    '>': Operator.GREATER_THAN,
    '<': Operator.LESS_THAN,
    '=': Operator.EQUALS,
    '==': Operator.EQUALS,
}


class Direction(str, Enum):
    BUY = 'buy'
    SELL = 'sell'


class ExitMode(str, Enum):
    FIXED = 'fixed'
    TRAILING = 'trailing'


class StopUnit(str, Enum):
    PERCENT = 'percent'
    POINTS = 'points'
    ATR = 'atr'


# ============================================================================
# Series references (condition subject / comparand)
# ============================================================================

class PriceRef(BaseModel):
    """Raw OHLCV field at a bar offset"""
    kind: Literal['price'] = Field('price', exclude=True)
    field: PriceField = Field(..., description="Price field (open/high/low/close/volume)")
    offset: int = Field(0, ge=0, description="Bars back from the latest bar (0 = latest)")

    @field_validator('field', mode='before')
    @classmethod
    def _lower_field(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class IndicatorRef(BaseModel):
    """Computed indicator series at a bar offset"""
    kind: Literal['indicator'] = Field('indicator', exclude=True)
    indicator: str = Field(..., description="Indicator name (e.g. 'EMA', 'RSI', 'Supertrend')")
    params: Dict[str, Union[StrictInt, StrictFloat]] = Field(
        default_factory=dict, description="Indicator parameters (e.g. {'period': 20})"
    )
    offset: int = Field(0, ge=0, description="Bars back from the latest bar (0 = latest)")

    @field_validator('indicator')
    @classmethod
    def _known_indicator(cls, v: str) -> str:
        return canonical_indicator_name(v)


class NumberValue(BaseModel):
    """Literal comparand"""
    kind: Literal['number'] = Field('number', exclude=True)
    value: float = Field(..., allow_inf_nan=False, description="Literal threshold")

    @model_validator(mode='before')
    @classmethod
    def _wrap_bare_number(cls, data: Any) -> Any:
        if isinstance(data, (int, float, str)) and not isinstance(data, bool):
            return {'value': data}
        return data


def _infer_kind(value: Any) -> Optional[str]:
    """Discriminator for series references; infers the tag when it is omitted"""
    if isinstance(value, BaseModel):
        return getattr(value, 'kind', None)
    if isinstance(value, dict):
        if value.get('kind') is not None:
            return value['kind']
        if 'indicator' in value:
            return 'indicator'
        if 'field' in value:
            return 'price'
        if 'value' in value:
            return 'number'
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return 'number'
    return None


SeriesRef = Annotated[
    Union[
        Annotated[PriceRef, Tag('price')],
        Annotated[IndicatorRef, Tag('indicator')],
    ],
    Discriminator(_infer_kind),
]

Comparand = Annotated[
    Union[
        Annotated[NumberValue, Tag('number')],
        Annotated[PriceRef, Tag('price')],
        Annotated[IndicatorRef, Tag('indicator')],
    ],
    Discriminator(_infer_kind),
]


class Condition(BaseModel):
    """Single comparison test; a strategy's conditions are AND-combined"""
    subject: SeriesRef = Field(..., description="Left-hand series")
    operator: Operator = Field(..., description="Comparison operator")
    comparand: Comparand = Field(..., description="Literal number or another series")

    @field_validator('operator', mode='before')
    @classmethod
    def _normalize_operator(cls, v):
        if isinstance(v, str):
            v = v.strip()
            if v in _OPERATOR_SYMBOLS:
                return _OPERATOR_SYMBOLS[v]
            return v.lower().replace('_', '-').replace(' ', '-')
        return v

    def indicator_refs(self) -> List[IndicatorRef]:
        return [ref for ref in (self.subject, self.comparand) if isinstance(ref, IndicatorRef)]


# ============================================================================
# Exit policy
# ============================================================================

class StopSetting(BaseModel):
    """Magnitude + unit of one exit branch"""
    value: float = Field(..., allow_inf_nan=False, description="Stop distance")
    unit: StopUnit = Field(..., description="percent, points or atr (ATR multiple)")

    @field_validator('unit', mode='before')
    @classmethod
    def _lower_unit(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class ExitPolicy(BaseModel):
    """Fixed or trailing stop-loss; only the branch selected by `mode` is applied"""
    mode: ExitMode = Field(..., description="Active branch")
    fixed: Optional[StopSetting] = Field(None, description="Fixed stop-loss branch")
    trailing: Optional[StopSetting] = Field(None, description="Trailing stop-loss branch")

    @model_validator(mode='before')
    @classmethod
    def _expand_shorthand(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not ('value' in data or 'unit' in data):
            return data
        data = dict(data)
        mode = data.get('mode')
        if isinstance(mode, str):
            mode = mode.strip().lower()
            data['mode'] = mode
        key = mode.value if isinstance(mode, ExitMode) else mode
        if key not in ('fixed', 'trailing'):
            return data
        if data.get(key) is not None:
            raise ValueError(f"give either value/unit or a '{key}' branch, not both")
        branch = {}
        for name in ('value', 'unit'):
            if name in data:
                branch[name] = data.pop(name)
        data[key] = branch
        return data

    @field_validator('mode', mode='before')
    @classmethod
    def _lower_mode(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @property
    def active(self) -> Optional[StopSetting]:
        return getattr(self, self.mode.value)

    @property
    def inactive_mode(self) -> ExitMode:
        return ExitMode.TRAILING if self.mode is ExitMode.FIXED else ExitMode.FIXED

    @model_serializer(mode='wrap')
    def _flatten_active(self, handler):
        data = handler(self)
        payload = {'mode': data['mode']}
        active = data.get(self.mode.value)
        if active is not None:
            payload.update(active)
        inactive_key = self.inactive_mode.value
        if data.get(inactive_key) is not None:
            payload[inactive_key] = data[inactive_key]
        return payload


# ============================================================================
# Strategy definition
# ============================================================================

class StrategyDefinition(BaseModel):
    """Saved, named combination of direction + entry conditions + exit policy"""
    id: Optional[int] = Field(None, description="Assigned by the store on creation")
    name: str = Field(..., description="Display name")
    direction: Direction = Field(..., description="buy or sell")
    conditions: List[Condition] = Field(..., description="Entry conditions (AND logic, order irrelevant)")
    exit: ExitPolicy = Field(..., description="Exit policy")

    @field_validator('name')
    @classmethod
    def _strip_name(cls, v: str) -> str:
        return v.strip()

    @field_validator('direction', mode='before')
    @classmethod
    def _lower_direction(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    def to_payload(self) -> Dict[str, Any]:
        """Canonical JSON-ready dict"""
        return self.model_dump(mode='json', exclude_none=True)
