"""
Indicator Catalog

Indicators a condition may reference, with the parameters each one needs
and the defaults the strategy builder starts from.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class IndicatorSpec:
    """Parameter contract for one indicator"""
    name: str
    description: str
    required_params: Tuple[str, ...]
    defaults: Dict[str, float] = field(default_factory=dict)
    # Params that must be whole numbers (bar counts)
    integer_params: Tuple[str, ...] = ('period',)


INDICATORS: Dict[str, IndicatorSpec] = {
    'SMA': IndicatorSpec(
        name='SMA',
        description='Simple Moving Average',
        required_params=('period',),
        defaults={'period': 20},
    ),
    'EMA': IndicatorSpec(
        name='EMA',
        description='Exponential Moving Average',
        required_params=('period',),
        defaults={'period': 20},
    ),
    'RSI': IndicatorSpec(
        name='RSI',
        description='Relative Strength Index',
        required_params=('period',),
        defaults={'period': 14},
    ),
    'Supertrend': IndicatorSpec(
        name='Supertrend',
        description='ATR band trend follower',
        required_params=('period', 'multiplier'),
        defaults={'period': 10, 'multiplier': 3},
    ),
    'ATR': IndicatorSpec(
        name='ATR',
        description='Average True Range',
        required_params=('period',),
        defaults={'period': 14},
    ),
}

_BY_LOWER = {key.lower(): spec for key, spec in INDICATORS.items()}


def lookup_indicator(name: str) -> Optional[IndicatorSpec]:
    """Case-insensitive catalog lookup"""
    if not isinstance(name, str):
        return None
    return _BY_LOWER.get(name.strip().lower())


def canonical_indicator_name(name: str) -> str:
    """Return the catalog spelling of an indicator name (e.g. 'supertrend' -> 'Supertrend')"""
    spec = lookup_indicator(name)
    if spec is None:
        raise ValueError(f"Unknown indicator: {name!r}. Supported: {', '.join(INDICATORS)}")
    return spec.name


def default_params(name: str) -> Dict[str, float]:
    """Builder defaults for an indicator's parameters"""
    return dict(INDICATORS[canonical_indicator_name(name)].defaults)
