'''The bipartite approval graph of nominators and validator candidates.

The graph is an arena: candidates live in a list in the order of their first
appearance among the voters' targets, an index maps their identifiers to
positions, and nominator edges refer to candidates by that integer position.
All election working state (scores, loads, weights, backed stakes) is kept
in the arena objects and mutated in place by the evaluators, so a fresh graph
must be built for each election run.
'''

import logging
from typing import Any, Dict, Iterable, Iterator, List, Tuple, Union

import npospredict.component.arithmetic
from npospredict.component.arithmetic import Arithmetic, ExactNumber
from npospredict.voter import Voter, normalize_voters

logger = logging.getLogger(__name__)


class Candidate:
    '''A validator candidate approved by at least one voter.

    :param id: Identifier of the validator.
    :param approval_stake: Total stake of the voters approving it.
    '''
    __slots__ = ('id', 'approval_stake', 'backed_stake', 'elected', 'score')

    def __init__(self,
                 id: str,
                 approval_stake: ExactNumber,
                 zero: ExactNumber,
                 ):
        self.id = id
        self.approval_stake = approval_stake
        self.backed_stake = zero
        self.elected = False
        self.score = zero

    def __repr__(self) -> str:
        return (
            f'<Candidate({self.id},approval={self.approval_stake},'
            f'backed={self.backed_stake}'
            + (',elected' if self.elected else '') + ')>'
        )


class Edge:
    '''A nominator's approval of one candidate.

    :param candidate: Arena index of the approved candidate.
    '''
    __slots__ = ('candidate', 'load', 'weight')

    def __init__(self, candidate: int, zero: ExactNumber):
        self.candidate = candidate
        self.load = zero
        self.weight = zero

    def __repr__(self) -> str:
        return f'<Edge({self.candidate},weight={self.weight})>'


class Nominator:
    '''Working state of a single voter.

    :param nominator_id: Identifier of the voter.
    :param budget: The voter's stake, to be split among its edges.
    :param edges: One edge per target of the voter.
    '''
    __slots__ = ('nominator_id', 'budget', 'load', 'edges')

    def __init__(self,
                 nominator_id: str,
                 budget: ExactNumber,
                 edges: List[Edge],
                 zero: ExactNumber,
                 ):
        self.nominator_id = nominator_id
        self.budget = budget
        self.load = zero
        self.edges = edges

    def to_dict(self) -> Dict[str, Any]:
        return {
            'nominator_id': self.nominator_id,
            'budget': self.budget,
            'load': self.load,
            'edges': [
                {'candidate': edge.candidate, 'load': edge.load,
                 'weight': edge.weight}
                for edge in self.edges
            ],
        }

    def __repr__(self) -> str:
        return f'<Nominator({self.nominator_id},budget={self.budget})>'


class ElectionGraph:
    '''Arena of candidates and nominators for one election run.

    :param candidates: Candidates in order of first appearance.
    :param nominators: Nominators in voter list order.
    :param arithmetic: The number policy the values were created with.
    '''
    def __init__(self,
                 candidates: List[Candidate],
                 nominators: List[Nominator],
                 arithmetic: Arithmetic,
                 ):
        self.candidates = candidates
        self.nominators = nominators
        self.arithmetic = arithmetic
        self.index = {cand.id: i for i, cand in enumerate(candidates)}

    def __len__(self) -> int:
        return len(self.candidates)

    def candidate(self, candidate_id: str) -> Candidate:
        '''Return the candidate with the given identifier.

        :raises KeyError: If no voter approves such a candidate.
        '''
        return self.candidates[self.index[candidate_id]]

    def elected(self) -> List[int]:
        '''Return arena indices of all elected candidates.'''
        return [i for i, cand in enumerate(self.candidates) if cand.elected]

    def edges(self) -> Iterator[Tuple[Nominator, Edge]]:
        for nominator in self.nominators:
            for edge in nominator.edges:
                yield nominator, edge

    def edge_targets(self, nominator: Nominator) -> List[str]:
        return [self.candidates[edge.candidate].id for edge in nominator.edges]


def build(voters: Iterable[Union[Voter, Dict[str, Any]]],
          arithmetic: Union[str, Arithmetic] = 'fraction',
          ) -> ElectionGraph:
    '''Build the election graph from a voter list.

    Candidates are created for targets only; a voter with no targets yields
    a nominator without edges and no candidates.

    :param voters: Voters as :class:`Voter` objects or dashboard-style
        records (dictionaries with ``nominatorId``, ``stake`` and
        ``targets``).
    :param arithmetic: Number policy for all graph values.
    :raises InvalidInputError: If any voter is invalid.
    '''
    arithmetic = npospredict.component.arithmetic.construct(arithmetic)
    candidates = []
    index = {}
    nominators = []
    zero = arithmetic.zero()
    with arithmetic.context():
        for voter in normalize_voters(voters):
            stake = arithmetic.number(voter.stake)
            edges = []
            for target in voter.targets:
                if target in index:
                    cand = candidates[index[target]]
                    cand.approval_stake = cand.approval_stake + stake
                else:
                    index[target] = len(candidates)
                    candidates.append(Candidate(target, stake, zero))
                edges.append(Edge(index[target], zero))
            nominators.append(
                Nominator(voter.nominator_id, stake, edges, zero)
            )
    logger.debug('built graph of %d candidates, %d nominators',
                 len(candidates), len(nominators))
    return ElectionGraph(candidates, nominators, arithmetic)
