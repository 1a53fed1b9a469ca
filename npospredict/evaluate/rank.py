'''Election forecasts: the full sequential Phragmén pipeline and its result.

:class:`SequentialPhragmenRanker` builds the election graph from a voter
list, elects the validators (:mod:`npospredict.evaluate.phragmen`),
equalizes their backing (:mod:`npospredict.evaluate.equalize`) and ranks all
candidates. The ranking lists the elected validators first, by their backed
stake in descending order, followed by the unelected ones. Unelected
candidates have no backing; they are ordered by a synthetic backed stake of
``1 / score`` from the last election round, so that the candidates closest to
winning a seat come first.

:func:`predict` condenses the ranking into the form consumed by the staking
dashboard, a mapping of validators to whether they are elected and their
backed stake rounded to whole base units.
'''

import dataclasses
import logging
from typing import Any, Callable, Dict, Iterable, List, Tuple, Union
from numbers import Number

import npospredict.graph
import npospredict.persist
import npospredict.component.arithmetic
from npospredict.component.arithmetic import Arithmetic, ExactNumber
from npospredict.evaluate.equalize import StakeEqualizer
from npospredict.evaluate.phragmen import SequentialPhragmen
from npospredict.graph import ElectionGraph
from npospredict.persist import simple_serialization
from npospredict.voter import Voter, parse_count

logger = logging.getLogger(__name__)

ElectionPrediction = Dict[str, Tuple[bool, int]]

DEFAULT_ITERATIONS = 10


@dataclasses.dataclass
class ValidatorInfo:
    '''Forecast for a single validator candidate.

    For unelected candidates, ``backed_stake`` is the synthetic ordering
    value ``1 / score`` (zero if no election round took place).
    '''
    validator_id: str
    elected: bool
    backed_stake: ExactNumber
    score: ExactNumber

    def to_dict(self) -> Dict[str, Any]:
        return npospredict.persist.serialize_value(dataclasses.asdict(self))


@dataclasses.dataclass
class NominatorInfo:
    '''Final split of a nominator's stake among the validators it approves.'''
    nominator_id: str
    budget: ExactNumber
    weights: Dict[str, ExactNumber]

    def to_dict(self) -> Dict[str, Any]:
        return npospredict.persist.serialize_value(dataclasses.asdict(self))


@simple_serialization
class SequentialPhragmenRanker:
    '''Forecast an NPoS election by sequential Phragmén with equalization.

    :param iterations: Number of equalization iterations.
    :param arithmetic: Number policy, ``fraction`` for exact rationals or
        ``decimal`` to reproduce the dashboard's 20-decimal-place numbers
        (see :mod:`npospredict.component.arithmetic`).
    :param tie_breaker: Rule choosing among candidates tied at the minimal
        score (see :mod:`npospredict.component.tiebreak`).
    :param tolerance: Early stopping tolerance of the equalization.
    '''
    def __init__(self,
                 iterations: int = DEFAULT_ITERATIONS,
                 arithmetic: Union[str, Arithmetic] = 'fraction',
                 tie_breaker: Union[str, Callable] = 'input_order',
                 tolerance: Number = 0,
                 ):
        self.iterations = iterations
        self.arithmetic = npospredict.component.arithmetic.construct(
            arithmetic
        )
        self.tie_breaker = tie_breaker
        self.tolerance = tolerance
        self.elector = SequentialPhragmen(tie_breaker=tie_breaker)
        self.equalizer = StakeEqualizer(
            iterations=iterations, tolerance=tolerance
        )

    def evaluate(self,
                 voters: Iterable[Union[Voter, Dict[str, Any]]],
                 count: int,
                 ) -> Tuple[List[NominatorInfo], List[ValidatorInfo]]:
        '''Forecast the election.

        :param voters: Voters as :class:`npospredict.voter.Voter` objects or
            dashboard-style records.
        :param count: Number of validator seats to fill.
        :returns: A 2-tuple of the nominators' final stake splits (in voter
            order) and the ranking of all candidates.
        :raises InvalidInputError: If the voters or the count are invalid.
        '''
        graph = self.run(voters, count)
        return nominator_infos(graph), rank(graph)

    def run(self,
            voters: Iterable[Union[Voter, Dict[str, Any]]],
            count: int,
            ) -> ElectionGraph:
        '''Run the election and return the resulting graph.'''
        count = parse_count(count)
        graph = npospredict.graph.build(voters, arithmetic=self.arithmetic)
        logger.info('forecasting %d seats from %d voters, %d candidates',
                    count, len(graph.nominators), len(graph))
        self.elector.evaluate(graph, count)
        self.equalizer.evaluate(graph)
        return graph


def rank(graph: ElectionGraph) -> List[ValidatorInfo]:
    '''Rank the candidates of an evaluated election graph.

    Elected candidates come first; within both groups, candidates are sorted
    by backed stake in descending order, keeping the order of first
    appearance among equals.
    '''
    arithmetic = graph.arithmetic
    one = arithmetic.number(1)
    infos = []
    with arithmetic.context():
        for cand in graph.candidates:
            if cand.elected:
                backed = cand.backed_stake
            elif cand.score > 0:
                backed = arithmetic.divide(one, cand.score)
            else:
                backed = arithmetic.zero()
            infos.append(ValidatorInfo(
                validator_id=cand.id,
                elected=cand.elected,
                backed_stake=backed,
                score=cand.score,
            ))
        return sorted(
            infos, key=lambda info: (not info.elected, -info.backed_stake)
        )


def nominator_infos(graph: ElectionGraph) -> List[NominatorInfo]:
    '''Collect the final weights of the nominators' edges by validator.'''
    return [
        NominatorInfo(
            nominator_id=nominator.nominator_id,
            budget=nominator.budget,
            weights={
                graph.candidates[edge.candidate].id: edge.weight
                for edge in nominator.edges
            },
        )
        for nominator in graph.nominators
    ]


def seq_phragmen(voters: Iterable[Union[Voter, Dict[str, Any]]],
                 count: int,
                 **kwargs,
                 ) -> Tuple[List[NominatorInfo], List[ValidatorInfo]]:
    '''Forecast an election with a :class:`SequentialPhragmenRanker`.

    :param voters: Voters or dashboard-style voter records.
    :param count: Number of validator seats to fill.
    :param kwargs: Parameters of the ranker.
    '''
    return SequentialPhragmenRanker(**kwargs).evaluate(voters, count)


def predict(voters: Iterable[Union[Voter, Dict[str, Any]]],
            count: int,
            **kwargs,
            ) -> ElectionPrediction:
    '''Forecast which validators get elected and their backed stakes.

    :param voters: Voters or dashboard-style voter records.
    :param count: Number of validator seats to fill.
    :param kwargs: Parameters of the :class:`SequentialPhragmenRanker`.
    :returns: A mapping of validator identifiers to 2-tuples of their
        election flag and backed stake in whole base units (rounded half
        up), in ranking order.
    '''
    _, ranking = seq_phragmen(voters, count, **kwargs)
    return {
        info.validator_id: (
            info.elected,
            npospredict.component.arithmetic.round_half_up(info.backed_stake)
        )
        for info in ranking
    }
