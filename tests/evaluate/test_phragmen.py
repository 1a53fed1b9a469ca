
import sys
import os
from fractions import Fraction
from decimal import Decimal

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))
import npospredict.graph
import npospredict.evaluate.phragmen
from npospredict.evaluate.phragmen import SequentialPhragmen
from npospredict.voter import InvalidInputError

DEFAULT = SequentialPhragmen()


def run(voters, count, arithmetic='fraction', **kwargs):
    graph = npospredict.graph.build(voters, arithmetic=arithmetic)
    elected = SequentialPhragmen(**kwargs).evaluate(graph, count)
    return elected, graph


def voter(nominator_id, stake, targets):
    return {'nominatorId': nominator_id, 'stake': stake, 'targets': targets}


def test_sentinel_value():
    assert npospredict.evaluate.phragmen.UNREACHABLE_SCORE == 1000


def test_approval_majority_wins():
    elected, graph = run([
        voter('n1', 100, ['A', 'B']),
        voter('n2', 50, ['B']),
    ], 1)
    assert elected == ['B']
    assert graph.candidate('B').backed_stake == 150
    assert graph.candidate('B').score == Fraction(1, 150)
    assert graph.candidate('A').score == Fraction(1, 100)
    assert not graph.candidate('A').elected


def test_loads():
    elected, graph = run([
        voter('n1', 100, ['A', 'B']),
        voter('n2', 50, ['A']),
    ], 2)
    assert elected == ['A', 'B']
    n1, n2 = graph.nominators
    assert n1.load == Fraction(1, 60)
    assert n2.load == Fraction(1, 150)
    assert [edge.load for edge in n1.edges] == [
        Fraction(1, 150), Fraction(1, 100)
    ]
    assert [edge.weight for edge in n1.edges] == [40, 60]
    assert n2.edges[0].weight == 50
    assert graph.candidate('A').backed_stake == 90
    assert graph.candidate('B').backed_stake == 60


def test_shared_voter_split():
    elected, graph = run([voter('n1', 100, ['A', 'B'])], 2)
    assert elected == ['A', 'B']
    assert graph.candidate('A').backed_stake == 50
    assert graph.candidate('B').backed_stake == 50


def test_tie_input_order():
    elected, graph = run([voter('n1', 100, ['B', 'A'])], 1)
    assert elected == ['B']


def test_tie_lowest_id():
    elected, graph = run(
        [voter('n1', 100, ['B', 'A'])], 1, tie_breaker='lowest_id'
    )
    assert elected == ['A']


def test_zero_approval_sentinel():
    elected, graph = run([
        voter('n1', 0, ['Z']),
        voter('n2', 100, ['A']),
    ], 2)
    assert elected == ['A', 'Z']
    assert graph.candidate('Z').score == 1000
    assert graph.candidate('Z').backed_stake == 0
    assert graph.candidate('A').backed_stake == 100


def test_zero_approval_loses():
    elected, graph = run([
        voter('n1', 0, ['Z']),
        voter('n2', 1, ['A']),
    ], 1)
    assert elected == ['A']
    assert graph.candidate('Z').score == 1000


def test_count_exceeds_candidates():
    elected, graph = run([voter('n1', 10, ['A', 'B'])], 5)
    assert elected == ['A', 'B']
    assert len(graph.elected()) == 2


def test_count_zero():
    elected, graph = run([voter('n1', 10, ['A', 'B'])], 0)
    assert elected == []
    for cand in graph.candidates:
        assert cand.score == 0
        assert cand.backed_stake == 0


def test_no_candidates():
    elected, graph = run([voter('n1', 10, [])], 3)
    assert elected == []
    assert len(graph) == 0


def test_unelected_edges_zero_weight():
    elected, graph = run([
        voter('n1', 100, ['A', 'B', 'C']),
        voter('n2', 80, ['B']),
    ], 1)
    assert elected == ['B']
    weights = [edge.weight for edge in graph.nominators[0].edges]
    assert weights == [0, 100, 0]


def test_decimal_scores():
    elected, graph = run([
        voter('n1', 3, ['A', 'B']),
        voter('n2', 1, ['B']),
    ], 2, arithmetic='decimal')
    assert elected == ['B', 'A']
    assert graph.candidate('B').score == Decimal('0.25')
    assert isinstance(graph.candidate('A').score, Decimal)


def test_negative_count():
    graph = npospredict.graph.build([voter('n1', 10, ['A'])])
    with pytest.raises(InvalidInputError):
        DEFAULT.evaluate(graph, -1)


def test_deterministic():
    voters = [
        voter('n1', 100, ['A', 'B', 'C']),
        voter('n2', 60, ['B', 'D']),
        voter('n3', 40, ['C', 'D']),
    ]
    assert run(voters, 3)[0] == run(voters, 3)[0]


def test_to_dict():
    assert SequentialPhragmen(tie_breaker='lowest_id').to_dict() == {
        'class': 'npospredict.evaluate.phragmen.SequentialPhragmen',
        'tie_breaker': 'lowest_id',
    }
