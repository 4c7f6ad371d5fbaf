"""
Strategy Store

Explicit store object for saved strategies. Whoever needs the collection
(builder, paper trading, backtester) is handed the store; nothing keeps its
own copy of the list.

Rules shared by every implementation:
- create() validates and assigns a fresh id (any id on the input is ignored)
- save() replaces a stored strategy wholesale; without an id it creates
- reads return copies, so callers can only change the store through save()
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .exceptions import StrategyNotFound
from .models import StrategyDefinition
from .validation import validate_strategy

logger = logging.getLogger(__name__)

Draft = Union[StrategyDefinition, Mapping[str, Any]]


class StrategyStore(ABC):
    """Read/write access points for saved strategies"""

    @abstractmethod
    def create(self, draft: Draft) -> StrategyDefinition:
        """Validate, assign an id, store; returns the stored copy"""

    @abstractmethod
    def get(self, strategy_id: int) -> StrategyDefinition:
        """Stored strategy by id (raises StrategyNotFound)"""

    @abstractmethod
    def list(self) -> List[StrategyDefinition]:
        """All stored strategies, oldest first"""

    @abstractmethod
    def replace(self, strategy: StrategyDefinition) -> StrategyDefinition:
        """Overwrite the stored strategy with the same id (raises StrategyNotFound)"""

    @abstractmethod
    def delete(self, strategy_id: int) -> None:
        """Remove a stored strategy (raises StrategyNotFound)"""

    def save(self, draft: Draft) -> StrategyDefinition:
        """Builder 'Save': update when the draft has an id, otherwise create"""
        strategy = validate_strategy(draft)
        if strategy.id is None:
            return self.create(strategy)
        return self.replace(strategy)

    def seed(self, strategies: Iterable[Draft]) -> List[StrategyDefinition]:
        return [self.create(s) for s in strategies]


class InMemoryStrategyStore(StrategyStore):
    """Process-local store (the builder's working collection)"""

    def __init__(self, strategies: Optional[Iterable[Draft]] = None):
        self._strategies: Dict[int, StrategyDefinition] = {}
        self._next_id = 1
        if strategies:
            self.seed(strategies)

    def create(self, draft: Draft) -> StrategyDefinition:
        strategy = validate_strategy(draft)
        stored = strategy.model_copy(update={'id': self._next_id}, deep=True)
        self._next_id += 1
        self._strategies[stored.id] = stored
        logger.info(f"Created strategy {stored.id} '{stored.name}'")
        return stored.model_copy(deep=True)

    def get(self, strategy_id: int) -> StrategyDefinition:
        try:
            return self._strategies[strategy_id].model_copy(deep=True)
        except KeyError:
            raise StrategyNotFound(strategy_id) from None

    def list(self) -> List[StrategyDefinition]:
        return [self._strategies[k].model_copy(deep=True) for k in sorted(self._strategies)]

    def replace(self, strategy: StrategyDefinition) -> StrategyDefinition:
        strategy = validate_strategy(strategy)
        if strategy.id not in self._strategies:
            raise StrategyNotFound(strategy.id)
        self._strategies[strategy.id] = strategy.model_copy(deep=True)
        logger.info(f"Saved strategy {strategy.id} '{strategy.name}'")
        return strategy.model_copy(deep=True)

    def delete(self, strategy_id: int) -> None:
        if self._strategies.pop(strategy_id, None) is None:
            raise StrategyNotFound(strategy_id)
        logger.info(f"Deleted strategy {strategy_id}")

    def __len__(self) -> int:
        return len(self._strategies)
