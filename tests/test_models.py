"""Unit tests for the strategy pydantic models.

Covers series reference tag inference, operator spellings, the exit policy
shorthand and its flattened output.
"""

import pytest
from pydantic import ValidationError

from strategy_core.models import (
    Condition,
    Direction,
    ExitMode,
    ExitPolicy,
    IndicatorRef,
    NumberValue,
    Operator,
    PriceField,
    PriceRef,
    StopUnit,
    StrategyDefinition,
)

from conftest import make_condition


class TestSeriesReferences:
    def test_kind_inferred_from_keys(self):
        condition = Condition.model_validate(make_condition(comparand={"value": 30}))
        assert isinstance(condition.subject, PriceRef)
        assert isinstance(condition.comparand, NumberValue)
        assert condition.comparand.value == 30

    def test_explicit_kind_accepted(self):
        condition = Condition.model_validate(make_condition(
            subject={"kind": "indicator", "indicator": "RSI", "params": {"period": 14}},
            comparand={"kind": "number", "value": 70},
        ))
        assert isinstance(condition.subject, IndicatorRef)
        assert condition.subject.offset == 0

    def test_bare_number_comparand(self):
        condition = Condition.model_validate(make_condition(comparand=50))
        assert condition.comparand == NumberValue(value=50)

    def test_kind_not_written_out(self):
        condition = Condition.model_validate(make_condition())
        dumped = condition.model_dump(mode="json")
        assert "kind" not in dumped["subject"]
        assert "kind" not in dumped["comparand"]

    def test_indicator_name_canonicalized(self):
        ref = IndicatorRef(indicator="supertrend", params={"period": 10, "multiplier": 3})
        assert ref.indicator == "Supertrend"

    def test_unknown_indicator_rejected(self):
        with pytest.raises(ValidationError):
            IndicatorRef(indicator="MACD", params={"period": 12})

    def test_price_field_case_insensitive(self):
        assert PriceRef(field="Volume").field is PriceField.VOLUME

    def test_negative_offset_rejected(self):
        with pytest.raises(ValidationError):
            PriceRef(field="close", offset=-1)

    def test_subject_cannot_be_literal(self):
        with pytest.raises(ValidationError):
            Condition.model_validate(make_condition(subject={"value": 10}))

    def test_non_finite_literal_rejected(self):
        with pytest.raises(ValidationError):
            NumberValue(value=float("nan"))


class TestOperator:
    @pytest.mark.parametrize("raw,expected", [
        ("greater-than", Operator.GREATER_THAN),
        ("greater_than", Operator.GREATER_THAN),
        ("Less than", Operator.LESS_THAN),
        ("Crosses above", Operator.CROSSES_ABOVE),
        (">", Operator.GREATER_THAN),
        ("==", Operator.EQUALS),
    ])
    def test_spellings(self, raw, expected):
        assert Condition.model_validate(make_condition(operator=raw)).operator is expected

    def test_unknown_operator(self):
        with pytest.raises(ValidationError):
            Condition.model_validate(make_condition(operator="between"))

    def test_is_crossing(self):
        assert Operator.CROSSES_BELOW.is_crossing
        assert not Operator.EQUALS.is_crossing


class TestExitPolicy:
    def test_shorthand_fills_active_branch(self):
        policy = ExitPolicy.model_validate({"mode": "trailing", "value": 1.5, "unit": "percent"})
        assert policy.mode is ExitMode.TRAILING
        assert policy.trailing.value == 1.5
        assert policy.fixed is None
        assert policy.active is policy.trailing

    def test_shorthand_and_branch_conflict(self):
        with pytest.raises(ValidationError):
            ExitPolicy.model_validate({
                "mode": "fixed", "value": 2, "unit": "percent",
                "fixed": {"value": 3, "unit": "percent"},
            })

    def test_inactive_branch_retained(self):
        policy = ExitPolicy.model_validate({
            "mode": "fixed", "value": 2, "unit": "points",
            "trailing": {"value": 1, "unit": "atr"},
        })
        assert policy.inactive_mode is ExitMode.TRAILING
        assert policy.trailing.unit is StopUnit.ATR

    def test_dump_flattens_active_branch(self):
        policy = ExitPolicy.model_validate({
            "mode": "Fixed",
            "fixed": {"value": 2, "unit": "PERCENT"},
            "trailing": {"value": 1.5, "unit": "percent"},
        })
        assert policy.model_dump(mode="json") == {
            "mode": "fixed",
            "value": 2.0,
            "unit": "percent",
            "trailing": {"value": 1.5, "unit": "percent"},
        }

    def test_unknown_unit(self):
        with pytest.raises(ValidationError):
            ExitPolicy.model_validate({"mode": "fixed", "value": 2, "unit": "pips"})


class TestStrategyDefinition:
    def test_parses_example(self, ema_crossover):
        strategy = StrategyDefinition.model_validate(ema_crossover)
        assert strategy.id is None
        assert strategy.direction is Direction.BUY
        assert len(strategy.conditions) == 1

    def test_payload_omits_missing_id(self, ema_crossover):
        payload = StrategyDefinition.model_validate(ema_crossover).to_payload()
        assert "id" not in payload
        assert payload == ema_crossover

    def test_payload_keeps_id(self, ema_crossover):
        ema_crossover["id"] = 7
        assert StrategyDefinition.model_validate(ema_crossover).to_payload()["id"] == 7

    def test_name_stripped(self, ema_crossover):
        ema_crossover["name"] = "  EMA Crossover  "
        assert StrategyDefinition.model_validate(ema_crossover).name == "EMA Crossover"

    def test_bad_direction(self, ema_crossover):
        ema_crossover["direction"] = "hold"
        with pytest.raises(ValidationError):
            StrategyDefinition.model_validate(ema_crossover)
