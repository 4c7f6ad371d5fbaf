"""Shared fixtures for strategy_core tests."""

import copy

import pytest


EMA_CROSSOVER = {
    "name": "EMA Crossover",
    "direction": "buy",
    "conditions": [
        {
            "subject": {"field": "close", "offset": 0},
            "operator": "greater-than",
            "comparand": {"indicator": "EMA", "params": {"period": 20}, "offset": 0},
        }
    ],
    "exit": {"mode": "trailing", "value": 1.5, "unit": "percent"},
}


@pytest.fixture
def ema_crossover():
    """Canonical EMA Crossover strategy payload."""
    return copy.deepcopy(EMA_CROSSOVER)


@pytest.fixture
def builder_ema_crossover():
    """The same strategy as the builder form edits it."""
    return {
        "name": "EMA Crossover",
        "strategyType": "buy",
        "entryConditions": [
            {
                "property": "Close",
                "operator": "greater_than",
                "valueType": "indicator",
                "valueProperty": "EMA",
                "valueParams": {"period": 20},
                "candle": 0,
            }
        ],
        "exitStrategy": {"type": "tsl", "tslValue": 1.5, "tslUnit": "percent"},
    }


def make_condition(subject=None, operator="greater-than", comparand=None):
    """Canonical condition dict with close > EMA(20) defaults."""
    return {
        "subject": subject if subject is not None else {"field": "close", "offset": 0},
        "operator": operator,
        "comparand": comparand if comparand is not None else {
            "indicator": "EMA", "params": {"period": 20}, "offset": 0
        },
    }


def make_draft(conditions=None, exit=None, name="Test Strategy", direction="buy"):
    """Canonical strategy draft with one default condition and a 2% fixed stop."""
    return {
        "name": name,
        "direction": direction,
        "conditions": conditions if conditions is not None else [make_condition()],
        "exit": exit if exit is not None else {"mode": "fixed", "value": 2, "unit": "percent"},
    }
