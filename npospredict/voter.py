'''Voter records and their validation.

A voter (nominator) is the input unit of the election: an account that has
bonded some stake and approves a list of validator candidates (targets).
Voters come from an external data assembly step (see :mod:`npospredict.chain`
for the assembly from chain storage records) in a loose form - stakes are
often decimal strings of base-unit balances as returned by the chain
API - and are normalized into :class:`Voter` objects here.

Invalid voters raise :class:`InvalidInputError` before any numeric work is
done, so that a corrupted stake never propagates into election scores.
'''

import dataclasses
import logging
from typing import Any, Dict, Iterable, List, Tuple, Union

logger = logging.getLogger(__name__)


class InvalidInputError(ValueError):
    '''An election input violates its preconditions.

    :param value: The offending value.
    :param reason: Why the value is invalid.
    :param nominator_id: The voter the value belongs to, if known.
    '''
    def __init__(self, value: Any, reason: str, nominator_id: Any = None):
        self.value = value
        self.reason = reason
        self.nominator_id = nominator_id
        message = f'invalid input {value!r}: {reason}'
        if nominator_id is not None:
            message += f' (nominator {nominator_id})'
        super().__init__(message)


StakeType = Union[int, str]


@dataclasses.dataclass(frozen=True)
class Voter:
    '''A nominator with its bonded stake and approved candidates.

    :param nominator_id: Account identifier of the nominator.
    :param stake: Bonded stake in base units (non-negative).
    :param targets: Identifiers of approved candidates, distinct, in the
        order the nominator listed them.
    '''
    nominator_id: str
    stake: int
    targets: Tuple[str, ...] = ()

    @classmethod
    def create(cls,
               nominator_id: str,
               stake: StakeType,
               targets: Iterable[str] = (),
               ) -> 'Voter':
        '''Create a validated voter from loosely typed values.

        Stakes given as decimal strings are parsed, duplicate targets are
        removed keeping their first occurrence.

        :raises InvalidInputError: If the stake is not a non-negative integer
            or any of the targets is not a non-empty string.
        '''
        return cls(
            nominator_id,
            parse_stake(stake, nominator_id),
            unique_targets(targets, nominator_id),
        )

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> 'Voter':
        '''Create a voter from a record in the dashboard's camel case form.

        :param record: A dictionary with ``nominatorId``, ``stake`` and
            ``targets`` keys (``targets`` may be missing).
        '''
        try:
            nominator_id = record['nominatorId']
            stake = record['stake']
        except KeyError as err:
            raise InvalidInputError(
                record, f'missing voter field {err}'
            ) from err
        return cls.create(nominator_id, stake, record.get('targets') or ())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'nominatorId': self.nominator_id,
            'stake': str(self.stake),
            'targets': list(self.targets),
        }


def parse_stake(stake: StakeType, nominator_id: Any = None) -> int:
    '''Parse a base-unit stake into an integer.

    :param stake: An integer or a string of decimal digits.
    :raises InvalidInputError: If the stake is negative, fractional or not
        numeric at all.
    '''
    if isinstance(stake, bool):
        raise InvalidInputError(stake, 'stake must be an integer',
                                nominator_id)
    if isinstance(stake, int):
        value = stake
    elif isinstance(stake, str):
        text = stake.strip().replace('_', '')
        if not (text.isascii() and text.isdigit()):
            raise InvalidInputError(
                stake, 'stake must be a non-negative decimal integer',
                nominator_id
            )
        value = int(text)
    else:
        raise InvalidInputError(
            stake, f'stake must be int or str, not {type(stake).__name__}',
            nominator_id
        )
    if value < 0:
        raise InvalidInputError(stake, 'stake must not be negative',
                                nominator_id)
    return value


def unique_targets(targets: Iterable[str],
                   nominator_id: Any = None,
                   ) -> Tuple[str, ...]:
    '''Validate target identifiers and drop repeated ones.'''
    if isinstance(targets, str):
        raise InvalidInputError(
            targets, 'targets must be a sequence of identifiers', nominator_id
        )
    unique = []
    seen = set()
    for target in targets:
        if not isinstance(target, str) or not target:
            raise InvalidInputError(
                target, 'target must be a non-empty string', nominator_id
            )
        if target in seen:
            logger.debug('dropping repeated target %s of %s',
                         target, nominator_id)
        else:
            seen.add(target)
            unique.append(target)
    return tuple(unique)


def parse_count(count: Any) -> int:
    '''Validate the number of seats to fill.

    :raises InvalidInputError: If the count is not a non-negative integer.
    '''
    if isinstance(count, bool) or not isinstance(count, int):
        raise InvalidInputError(count, 'count must be an integer')
    if count < 0:
        raise InvalidInputError(count, 'count must not be negative')
    return count


def normalize_voters(voters: Iterable[Union[Voter, Dict[str, Any]]]
                     ) -> List[Voter]:
    '''Turn a voter list of records or voters into validated voters.

    :class:`Voter` instances built directly (bypassing :meth:`Voter.create`)
    are validated too.
    '''
    normalized = []
    for voter in voters:
        if isinstance(voter, Voter):
            normalized.append(Voter.create(
                voter.nominator_id, voter.stake, voter.targets
            ))
        elif isinstance(voter, dict):
            normalized.append(Voter.from_dict(voter))
        else:
            raise InvalidInputError(voter, 'voter must be a Voter or a dict')
    return normalized
