
import sys
import os

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))
import npospredict.voter
from npospredict.voter import InvalidInputError, Voter


def test_create_parses_string_stake():
    voter = Voter.create('n1', '1000000000000', ['A', 'B'])
    assert voter.stake == 1000000000000
    assert voter.targets == ('A', 'B')


def test_from_dict():
    voter = Voter.from_dict(
        {'nominatorId': 'n1', 'stake': 100, 'targets': ['A']}
    )
    assert voter == Voter('n1', 100, ('A',))


def test_from_dict_missing_targets():
    voter = Voter.from_dict({'nominatorId': 'n1', 'stake': '5'})
    assert voter.targets == ()


def test_from_dict_missing_stake():
    with pytest.raises(InvalidInputError):
        Voter.from_dict({'nominatorId': 'n1', 'targets': ['A']})


def test_to_dict():
    voter = Voter.create('n1', 7, ['A'])
    assert voter.to_dict() == {
        'nominatorId': 'n1', 'stake': '7', 'targets': ['A']
    }


def test_duplicate_targets_removed():
    voter = Voter.create('n1', 10, ['B', 'A', 'B', 'C', 'A'])
    assert voter.targets == ('B', 'A', 'C')


@pytest.mark.parametrize('stake', ['-5', -5, '1.5', 1.5, 'abc', '', None,
                                   True, '١٢'])
def test_invalid_stake(stake):
    with pytest.raises(InvalidInputError) as excinfo:
        Voter.create('n1', stake, ['A'])
    assert excinfo.value.nominator_id == 'n1'
    assert excinfo.value.value == stake


def test_zero_stake_accepted():
    assert Voter.create('n1', '0', ['A']).stake == 0


def test_invalid_stake_is_value_error():
    with pytest.raises(ValueError):
        npospredict.voter.parse_stake('x')


@pytest.mark.parametrize('targets', ['AB', ['A', 3], ['A', '']])
def test_invalid_targets(targets):
    with pytest.raises(InvalidInputError):
        Voter.create('n1', 10, targets)


@pytest.mark.parametrize('count', [-1, 1.0, '3', None, False])
def test_invalid_count(count):
    with pytest.raises(InvalidInputError):
        npospredict.voter.parse_count(count)


def test_normalize_voters_mixed():
    voters = npospredict.voter.normalize_voters([
        Voter('n1', 5, ('A', 'A')),
        {'nominatorId': 'n2', 'stake': '6', 'targets': ['B']},
    ])
    assert voters == [Voter('n1', 5, ('A',)), Voter('n2', 6, ('B',))]


def test_normalize_voters_revalidates():
    with pytest.raises(InvalidInputError):
        npospredict.voter.normalize_voters([Voter('n1', -5, ('A',))])


def test_normalize_voters_rejects_other():
    with pytest.raises(InvalidInputError):
        npospredict.voter.normalize_voters([('n1', 5, ['A'])])


def test_duplicate_targets_many():
    targets = [f'V{i % 50}' for i in range(5000)]
    voter = Voter.create('n1', 10, targets)
    assert voter.targets == tuple(f'V{i}' for i in range(50))
