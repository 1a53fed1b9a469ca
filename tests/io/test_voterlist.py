
import sys
import os
import io
import json

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))
import npospredict.io.voterlist
from npospredict.evaluate.rank import seq_phragmen
from npospredict.io.core import ParseError
from npospredict.io.voterlist import VoterListParseError, VoterListSetup
from npospredict.voter import Voter

VOTER_LIST = '''
{
    "count": 2,
    "voters": [
        {"nominatorId": "n1", "stake": "100", "targets": ["A", "B"]},
        {"nominatorId": "n2", "stake": 50, "targets": ["A"]},
        {"nominatorId": "n3", "stake": "0"}
    ]
}
'''


def test_loads():
    setup = npospredict.io.voterlist.loads(VOTER_LIST)
    assert setup == VoterListSetup(
        voters=[
            Voter('n1', 100, ('A', 'B')),
            Voter('n2', 50, ('A',)),
            Voter('n3', 0, ()),
        ],
        count=2,
    )


def test_load_file():
    setup = npospredict.io.voterlist.load(io.StringIO(VOTER_LIST))
    assert len(setup.voters) == 3


def test_count_optional():
    setup = npospredict.io.voterlist.loads('{"voters": []}')
    assert setup.count is None
    assert setup.voters == []


@pytest.mark.parametrize('text', [
    'not json',
    '[]',
    '{"count": 3}',
    '{"voters": {}}',
    '{"voters": [1]}',
    '{"voters": [{"nominatorId": "n1", "stake": "-3", "targets": ["A"]}]}',
    '{"voters": [{"nominatorId": "n1", "targets": ["A"]}]}',
    '{"count": -1, "voters": []}',
    '{"count": "2", "voters": []}',
])
def test_invalid(text):
    with pytest.raises(VoterListParseError if text != 'not json'
                       else ParseError):
        npospredict.io.voterlist.loads(text)


def test_parse_error_hierarchy():
    assert issubclass(VoterListParseError, ParseError)


def test_dumps_ranking():
    setup = npospredict.io.voterlist.loads(VOTER_LIST)
    _, ranking = seq_phragmen(setup.voters, setup.count)
    document = json.loads(
        npospredict.io.voterlist.dumps(ranking, count=setup.count)
    )
    assert document == {
        'count': 2,
        'validators': [
            {'validatorId': 'A', 'elected': True, 'backedStake': '75'},
            {'validatorId': 'B', 'elected': True, 'backedStake': '75'},
        ],
    }


def test_dump_ranking_file():
    _, ranking = seq_phragmen(
        [Voter.create('n1', 10, ['A'])], 1, arithmetic='decimal'
    )
    out = io.StringIO()
    npospredict.io.voterlist.dump(out, ranking)
    assert json.loads(out.getvalue()) == {
        'validators': [
            {'validatorId': 'A', 'elected': True, 'backedStake': '10'},
        ],
    }


def test_voters_document_reloads():
    setup = npospredict.io.voterlist.loads(VOTER_LIST)
    text = npospredict.io.voterlist.dumps_voters(setup.voters, count=2)
    assert npospredict.io.voterlist.loads(text) == setup
