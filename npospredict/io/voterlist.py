'''JSON voter lists and forecast documents.

The voter list is the input of the staking dashboard's forecast::

    {
        "count": 297,
        "voters": [
            {"nominatorId": "5Grw...", "stake": "1000000000000",
             "targets": ["5FHn...", "5Dfi..."]}
        ]
    }

The ``count`` (number of validator seats) is optional. Stakes are integers
in base units, given as JSON numbers or strings of decimal digits (chain
balances exceed the safe integer range of many JSON implementations).

The forecast document lists the ranked validators with their election flag
and backed stake rounded to whole base units, again as strings.
'''

import dataclasses
import logging
from typing import Any, Dict, List, Optional

import npospredict.io.core
from npospredict.component.arithmetic import round_half_up
from npospredict.evaluate.rank import ValidatorInfo
from npospredict.voter import InvalidInputError, Voter, parse_count

logger = logging.getLogger(__name__)


class VoterListParseError(npospredict.io.core.ParseError):
    pass


@dataclasses.dataclass
class VoterListSetup:
    """A container for data returnable from a voter list file."""
    voters: List[Voter]
    count: Optional[int] = None


def load_document(document: Any) -> VoterListSetup:
    if not isinstance(document, dict):
        raise VoterListParseError(
            f'voter list must be a JSON object, got {type(document).__name__}'
        )
    records = document.get('voters')
    if not isinstance(records, list):
        raise VoterListParseError('voter list must contain a "voters" array')
    voters = []
    for i, record in enumerate(records):
        if not isinstance(record, dict):
            raise VoterListParseError(f'voter {i} is not a JSON object')
        try:
            voters.append(Voter.from_dict(record))
        except InvalidInputError as err:
            raise VoterListParseError(f'voter {i}: {err}') from err
    count = document.get('count')
    if count is not None:
        try:
            count = parse_count(count)
        except InvalidInputError as err:
            raise VoterListParseError(str(err)) from err
    logger.debug('loaded %d voters, count %s', len(voters), count)
    return VoterListSetup(voters=voters, count=count)


load, loads = npospredict.io.core.loaders(load_document)


def dump_document(ranking: List[ValidatorInfo],
                  count: Optional[int] = None,
                  ) -> Dict[str, Any]:
    document = {}
    if count is not None:
        document['count'] = count
    document['validators'] = [
        {
            'validatorId': info.validator_id,
            'elected': info.elected,
            'backedStake': str(round_half_up(info.backed_stake)),
        }
        for info in ranking
    ]
    return document


dump, dumps = npospredict.io.core.dumpers(dump_document)


def voters_document(voters: List[Voter],
                    count: Optional[int] = None,
                    ) -> Dict[str, Any]:
    '''Create a voter list document from voters, e.g. assembled from chain.'''
    document = {}
    if count is not None:
        document['count'] = count
    document['voters'] = [voter.to_dict() for voter in voters]
    return document


dump_voters, dumps_voters = npospredict.io.core.dumpers(voters_document)
