"""
Strategy Core - TradLyte strategy definitions

A pip-installable package containing:
- Strategy model (conditions, indicators, exit policy) using Pydantic
- Validation that reports every problem with its field path
- Canonical JSON serialization (loading fails closed)
- Builder draft normalization (the strategy builder's editing shape)
- Pre-built strategy library (EMA Crossover, RSI Momentum, etc.)
- Strategy stores (in-memory, SQLAlchemy)
- Client for the strategy execution service (POST /run_strategy)

Used by:
- Strategy Builder: create / edit / save strategies
- Paper Trading and Backtester: read saved strategies, run them remotely
"""

__version__ = "0.1.0"

from .exceptions import (
    Issue, StrategyError, StrategyValidationError, MalformedInput,
    NetworkError, StrategyNotFound
)
from .indicators import INDICATORS, IndicatorSpec, lookup_indicator
from .models import (
    PriceField, Operator, Direction, ExitMode, StopUnit,
    PriceRef, IndicatorRef, NumberValue, Condition,
    StopSetting, ExitPolicy, StrategyDefinition
)
from .validation import validate_strategy, validate_conditions, collect_issues
from .serialization import serialize, deserialize
from .drafts import normalize_draft, default_condition, default_exit_policy
from .library import PREBUILT_DRAFTS, get_prebuilt_strategies
from .store import StrategyStore, InMemoryStrategyStore
from .sql_store import SqlStrategyStore
from .client import StrategyServiceClient, build_run_request, run_strategy_sync

__all__ = [
    # Models
    'PriceField',
    'Operator',
    'Direction',
    'ExitMode',
    'StopUnit',
    'PriceRef',
    'IndicatorRef',
    'NumberValue',
    'Condition',
    'StopSetting',
    'ExitPolicy',
    'StrategyDefinition',
    # Indicators
    'INDICATORS',
    'IndicatorSpec',
    'lookup_indicator',
    # Operations
    'validate_strategy',
    'validate_conditions',
    'collect_issues',
    'serialize',
    'deserialize',
    'normalize_draft',
    'default_condition',
    'default_exit_policy',
    'PREBUILT_DRAFTS',
    'get_prebuilt_strategies',
    # Storage
    'StrategyStore',
    'InMemoryStrategyStore',
    'SqlStrategyStore',
    # Execution service
    'StrategyServiceClient',
    'build_run_request',
    'run_strategy_sync',
    # Errors
    'Issue',
    'StrategyError',
    'StrategyValidationError',
    'MalformedInput',
    'NetworkError',
    'StrategyNotFound',
]
