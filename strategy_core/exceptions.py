"""
Strategy Core Exceptions

ValidationError-style failures carry the full list of issues so the
builder form can show every problem at once.
"""

from dataclasses import dataclass
from typing import List, Optional


GENERIC_NETWORK_MESSAGE = "Failed to run strategy. Please try again later."


@dataclass(frozen=True)
class Issue:
    """One validation problem"""
    path: str
    code: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message


class StrategyError(Exception):
    """Base class for all strategy-core errors"""


class StrategyValidationError(StrategyError, ValueError):
    """Draft rejected; the form stays open with these issues"""

    def __init__(self, issues: List[Issue]):
        self.issues = list(issues)
        super().__init__("; ".join(str(i) for i in self.issues) or "Invalid strategy")


class MalformedInput(StrategyError, ValueError):
    """Serialized strategy could not be loaded (the record is rejected as a whole)"""

    def __init__(self, message: str, issues: Optional[List[Issue]] = None):
        self.issues = list(issues or [])
        super().__init__(message)


class NetworkError(StrategyError):
    """Strategy service call failed"""

    def __init__(self, user_message: str = GENERIC_NETWORK_MESSAGE, status: Optional[int] = None):
        self.user_message = user_message
        self.status = status
        super().__init__(user_message if status is None else f"HTTP {status}: {user_message}")


class StrategyNotFound(StrategyError, KeyError):
    """No strategy stored under this id"""

    def __init__(self, strategy_id: int):
        self.strategy_id = strategy_id
        super().__init__(strategy_id)

    def __str__(self) -> str:
        return f"Strategy {self.strategy_id} not found"
