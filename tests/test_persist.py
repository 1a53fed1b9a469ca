
import sys
import os
import json
from fractions import Fraction
from decimal import Decimal

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import npospredict.persist
import npospredict.component.arithmetic
import npospredict.component.tiebreak
from npospredict.evaluate.equalize import StakeEqualizer
from npospredict.evaluate.phragmen import SequentialPhragmen
from npospredict.evaluate.rank import SequentialPhragmenRanker, seq_phragmen

EVALUATORS = [
    SequentialPhragmen(),
    SequentialPhragmen(tie_breaker='lowest_id'),
    StakeEqualizer(iterations=4, tolerance=Fraction(1, 2)),
    SequentialPhragmenRanker(),
    SequentialPhragmenRanker(arithmetic='decimal', tolerance=Decimal('0.5')),
    npospredict.component.arithmetic.DecimalArithmetic(decimal_places=8),
]


@pytest.mark.parametrize('evaluator', EVALUATORS)
def test_evaluator_json(evaluator):
    dumped = json.dumps(evaluator.to_dict())
    restored = npospredict.persist.from_dict(json.loads(dumped))
    assert type(restored) is type(evaluator)
    assert restored.to_dict() == evaluator.to_dict()


def test_ranker_dict():
    assert SequentialPhragmenRanker().to_dict() == {
        'class': 'npospredict.evaluate.rank.SequentialPhragmenRanker',
        'iterations': 10,
        'arithmetic': {
            'class': 'npospredict.component.arithmetic.FractionArithmetic',
        },
        'tie_breaker': 'input_order',
        'tolerance': 0,
    }


def test_callable_tie_breaker():
    elector = SequentialPhragmen(
        tie_breaker=npospredict.component.tiebreak.lowest_id
    )
    serialized = elector.to_dict()
    assert serialized['tie_breaker'] == {
        'callable': 'npospredict.component.tiebreak.lowest_id'
    }
    restored = npospredict.persist.from_dict(serialized)
    assert restored.tie_breaker is npospredict.component.tiebreak.lowest_id


@pytest.mark.parametrize('value', [
    Fraction(2, 3), Decimal('0.33333333333333333333'), ('A', 1), 7, 'x',
])
def test_exact_values(value):
    serialized = npospredict.persist.serialize_value(value)
    restored = npospredict.persist.deserialize_value(
        json.loads(json.dumps(serialized))
    )
    assert restored == value
    assert type(restored) is type(value)


def test_results_serialize():
    nominators, ranking = seq_phragmen([
        {'nominatorId': 'n1', 'stake': '100', 'targets': ['A', 'B', 'C']},
    ], 3)
    dumped = json.dumps([info.to_dict() for info in ranking])
    assert json.loads(dumped)[0]['backed_stake'] == {
        'type': 'Fraction', 'value': '100/3'
    }
    assert nominators[0].to_dict()['weights']['A'] == {
        'type': 'Fraction', 'value': '100/3'
    }


@pytest.mark.parametrize('value', [[], {'no': 'class'}, {'class': '.x'}])
def test_invalid_object_defs(value):
    with pytest.raises(ValueError):
        npospredict.persist.from_dict(value)


def test_unserializable():
    with pytest.raises(ValueError):
        npospredict.persist.serialize_value(object())
