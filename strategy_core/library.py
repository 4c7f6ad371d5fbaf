"""
Pre-built Strategy Library

Common strategies ready to use or clone in the builder:
- EMA Crossover (close above EMA 20)
- RSI Momentum (sell: close crosses below EMA 20 while RSI 14 < 70)
- Supertrend Trend (close crosses above Supertrend 10/3 on volume > 100k)
- Golden Cross (SMA 50 crosses above SMA 200)
"""

from typing import Any, Dict, List

from .models import StrategyDefinition
from .validation import validate_strategy

PREBUILT_DRAFTS: List[Dict[str, Any]] = [
    {
        'name': 'EMA Crossover',
        'direction': 'buy',
        'conditions': [
            {
                'subject': {'field': 'close', 'offset': 0},
                'operator': 'greater-than',
                'comparand': {'indicator': 'EMA', 'params': {'period': 20}, 'offset': 0},
            },
        ],
        'exit': {'mode': 'trailing', 'value': 1.5, 'unit': 'percent',
                 'fixed': {'value': 2, 'unit': 'percent'}},
    },
    {
        'name': 'RSI Momentum',
        'direction': 'sell',
        'conditions': [
            {
                'subject': {'indicator': 'RSI', 'params': {'period': 14}, 'offset': 0},
                'operator': 'less-than',
                'comparand': {'value': 70},
            },
            {
                'subject': {'field': 'close', 'offset': 0},
                'operator': 'crosses-below',
                'comparand': {'indicator': 'EMA', 'params': {'period': 20}, 'offset': 0},
            },
        ],
        'exit': {'mode': 'fixed', 'value': 2, 'unit': 'percent'},
    },
    {
        'name': 'Supertrend Trend',
        'direction': 'buy',
        'conditions': [
            {
                'subject': {'field': 'close', 'offset': 0},
                'operator': 'crosses-above',
                'comparand': {'indicator': 'Supertrend', 'params': {'period': 10, 'multiplier': 3}, 'offset': 0},
            },
            {
                'subject': {'field': 'volume', 'offset': 0},
                'operator': 'greater-than',
                'comparand': {'value': 100000},
            },
        ],
        'exit': {'mode': 'trailing', 'value': 2, 'unit': 'atr'},
    },
    {
        'name': 'Golden Cross',
        'direction': 'buy',
        'conditions': [
            {
                'subject': {'indicator': 'SMA', 'params': {'period': 50}, 'offset': 0},
                'operator': 'crosses-above',
                'comparand': {'indicator': 'SMA', 'params': {'period': 200}, 'offset': 0},
            },
        ],
        'exit': {'mode': 'fixed', 'value': 5, 'unit': 'percent'},
    },
]


def get_prebuilt_strategies() -> List[StrategyDefinition]:
    """Validated copies of the library strategies (no ids assigned)"""
    return [validate_strategy(draft) for draft in PREBUILT_DRAFTS]
