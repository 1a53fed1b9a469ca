'''Assembly of the voter list from chain staking records.

The election forecast needs the list of voters - every nominator with its
active bonded stake and its nominated validators, plus every validator voting
for itself with its own stake. This module builds that list from staking
records that have already been fetched from a chain node (fetching them is
the caller's business; nothing here does any I/O).

There are two sources:

-   While an election is ongoing, the chain holds a frozen snapshot of the
    voters and targets (:class:`ElectionSnapshot`); the forecast then uses
    the snapshot (:func:`voters_from_snapshot`).
-   Otherwise the voters are assembled from the current staking storage
    (:class:`ChainData`, :func:`voters_from_chain`): nominations are
    restricted to registered validators, and nominations submitted before
    the last slash of a validator are dropped because the chain requires
    nominators to renominate a slashed validator.

:func:`assemble_voters` chooses between them.
'''

import dataclasses
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from npospredict.voter import InvalidInputError, StakeType, Voter

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class Nominations:
    '''Nominations of a single nominator as stored on chain.

    :param targets: Nominated validator stashes.
    :param submitted_in: Era in which the nominations were submitted.
    '''
    targets: Sequence[str]
    submitted_in: int = 0


@dataclasses.dataclass
class ChainData:
    '''Staking storage records needed to assemble the voter list.

    :param controllers: Controller account of each bonded stash.
    :param ledgers: Active bonded balance of each controller, in base units.
    :param validators: Stashes of all registered validators.
    :param nominators: Nominations of each nominating stash.
    :param last_nonzero_slashes: Era of the last non-zero slash of each
        slashed validator stash.
    '''
    controllers: Dict[str, str]
    ledgers: Dict[str, StakeType]
    validators: Sequence[str]
    nominators: Dict[str, Nominations]
    last_nonzero_slashes: Dict[str, int] = dataclasses.field(
        default_factory=dict
    )

    def active_stake(self, stash: str) -> StakeType:
        '''Return the active bonded balance of a stash.

        :raises InvalidInputError: If the stash has no controller or the
            controller has no ledger.
        '''
        try:
            return self.ledgers[self.controllers[stash]]
        except KeyError as err:
            raise InvalidInputError(
                stash, f'no staking ledger found via {err}'
            ) from err


SnapshotVoter = Tuple[str, StakeType, Sequence[str]]
OwnNominations = Dict[str, Sequence[str]]


@dataclasses.dataclass
class ElectionSnapshot:
    '''Voters and targets frozen by the chain for an ongoing election.

    :param targets: Stashes of the validators standing for election.
    :param voters: Triples of nominator stash, stake and nominated targets.
    '''
    targets: Sequence[str]
    voters: Sequence[SnapshotVoter]


def voters_from_snapshot(snapshot: ElectionSnapshot) -> List[Voter]:
    '''Build the voter list from an election snapshot.

    Targets that are not standing for election are dropped, as are voters
    left with no targets.
    '''
    standing = set(snapshot.targets)
    voters = []
    for nominator_id, stake, targets in snapshot.voters:
        kept = [target for target in targets if target in standing]
        if kept:
            voters.append(Voter.create(nominator_id, stake, kept))
    logger.info('assembled %d voters from election snapshot', len(voters))
    return voters


def voters_from_chain(data: ChainData,
                      own_nominations: Optional[OwnNominations] = None,
                      ) -> List[Voter]:
    '''Build the voter list from staking storage.

    :param data: Staking records fetched from the chain.
    :param own_nominations: Pending nominations of the dashboard operator's
        own stashes. They replace the on-chain targets of those stashes so
        that the forecast shows the effect of the operator's changes.
    :raises InvalidInputError: If the stake of a voter cannot be found.
    '''
    replaced = {
        stash: targets
        for stash, targets in (own_nominations or {}).items()
        if targets
    }
    registered = set(data.validators)
    voters = []
    for stash, nominations in data.nominators.items():
        targets = replaced.get(stash, nominations.targets)
        kept = [
            target for target in targets
            if target in registered and nominations.submitted_in
            >= data.last_nonzero_slashes.get(target, 0)
        ]
        if kept:
            voters.append(
                Voter.create(stash, data.active_stake(stash), kept)
            )
    for stash in data.validators:
        voters.append(Voter.create(stash, data.active_stake(stash), [stash]))
    logger.info('assembled %d voters from staking storage', len(voters))
    return voters


def assemble_voters(data: ChainData,
                    own_nominations: Optional[OwnNominations] = None,
                    snapshot: Optional[ElectionSnapshot] = None,
                    ) -> List[Voter]:
    '''Build the voter list, preferring an ongoing election's snapshot.'''
    if snapshot is not None:
        return voters_from_snapshot(snapshot)
    else:
        return voters_from_chain(data, own_nominations)

