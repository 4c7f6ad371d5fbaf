"""Unit tests for the pre-built strategy library."""

from strategy_core.library import PREBUILT_DRAFTS, get_prebuilt_strategies
from strategy_core.models import Direction, ExitMode
from strategy_core.validation import collect_issues


def test_every_draft_validates():
    for draft in PREBUILT_DRAFTS:
        assert collect_issues(draft) == [], draft["name"]


def test_names_unique():
    names = [s.name for s in get_prebuilt_strategies()]
    assert len(names) == len(set(names))


def test_seeded_strategies():
    by_name = {s.name: s for s in get_prebuilt_strategies()}

    ema = by_name["EMA Crossover"]
    assert ema.direction is Direction.BUY
    assert ema.exit.mode is ExitMode.TRAILING

    rsi = by_name["RSI Momentum"]
    assert rsi.direction is Direction.SELL
    assert rsi.conditions[0].subject.indicator == "RSI"


def test_no_ids_assigned():
    assert all(s.id is None for s in get_prebuilt_strategies())


def test_returns_fresh_copies():
    first = get_prebuilt_strategies()
    first[0].name = "Changed"
    assert get_prebuilt_strategies()[0].name == "EMA Crossover"
