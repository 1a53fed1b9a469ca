'''Sequential Phragmén election of validators.

The sequential Phragmén method [#wphrag]_ elects one candidate per round.
Every nominator carries a *load*, which starts at zero and becomes the score
of the last elected candidate it approves. In each round, the score of every
unelected candidate is computed as::

    score(c) = (1 + sum(load(n) * budget(n) for n approving c))
               / approval_stake(c)

and the candidate with the lowest score is elected, moving the load of all
its nominators up to its score. Lower scores thus favour candidates whose
approving stake is large and not yet loaded by earlier winners, which
approximates a proportional distribution of the seats.

After the last round, each nominator's budget is split among its elected
targets in proportion to the load increments recorded on the edges. These
weights are only a first approximation of the backing of the winners; see
:mod:`npospredict.evaluate.equalize` for their refinement.

.. [#wphrag] "Phragmen's voting rules", Wikipedia.
    https://en.wikipedia.org/wiki/Phragmen%27s_voting_rules
'''

import logging
from typing import Callable, List, Union

import npospredict.component.tiebreak
from npospredict.evaluate.core import GraphEvaluator, get_min_score
from npospredict.graph import ElectionGraph
from npospredict.persist import simple_serialization
from npospredict.voter import parse_count

logger = logging.getLogger(__name__)

UNREACHABLE_SCORE = 1000
'''Score of candidates whose approval stake is zero.

Such candidates can only be backed by zero-stake nominators. The score keeps
them comparable with the others while ranking them behind any candidate
with a positive approval stake.
'''


@simple_serialization
class SequentialPhragmen(GraphEvaluator):
    '''Elect validators by sequential Phragmén.

    :param tie_breaker: The rule to choose among candidates tied at the
        minimal score. The rules from :mod:`npospredict.component.tiebreak`
        can be referred to by their names as strings (``input_order``
        picks the candidate that appeared first in the voter list,
        ``lowest_id`` the one with the lowest identifier).
    '''
    def __init__(self,
                 tie_breaker: Union[str, Callable] = 'input_order',
                 ):
        self.tie_breaker = tie_breaker
        self._tie_breaker = npospredict.component.tiebreak.construct(
            tie_breaker
        )

    def evaluate(self, graph: ElectionGraph, count: int) -> List[str]:
        '''Elect count candidates and set the initial edge weights.

        The graph is modified in place: candidate scores, elected flags and
        backed stakes, nominator loads and edge loads and weights are set.

        :param graph: A freshly built election graph.
        :param count: Number of candidates to elect. If there are fewer
            candidates, all of them are elected.
        :returns: Identifiers of the elected candidates in the order of
            their election.
        '''
        count = parse_count(count)
        n_rounds = min(count, len(graph))
        arithmetic = graph.arithmetic
        candidates = graph.candidates
        winners = []
        with arithmetic.context():
            for round_i in range(n_rounds):
                winner_i = self._next_round(graph)
                winners.append(winner_i)
                logger.debug('round %d elected %s with score %s', round_i + 1,
                             candidates[winner_i].id,
                             candidates[winner_i].score)
            self._assign_weights(graph)
        logger.info('sequential phragmen elected %d of %d candidates',
                    len(winners), len(candidates))
        return [candidates[i].id for i in winners]

    def _next_round(self, graph: ElectionGraph) -> int:
        arithmetic = graph.arithmetic
        candidates = graph.candidates
        one = arithmetic.number(1)
        contestants = [
            i for i, cand in enumerate(candidates) if not cand.elected
        ]
        for i in contestants:
            cand = candidates[i]
            if cand.approval_stake > 0:
                cand.score = arithmetic.divide(one, cand.approval_stake)
            else:
                cand.score = arithmetic.number(UNREACHABLE_SCORE)
        for nominator in graph.nominators:
            for edge in nominator.edges:
                cand = candidates[edge.candidate]
                if not cand.elected and cand.approval_stake > 0:
                    cand.score = cand.score + arithmetic.divide(
                        nominator.load * nominator.budget,
                        cand.approval_stake
                    )
        winner_i = get_min_score(
            candidates, contestants, self._tie_breaker
        )
        winner = candidates[winner_i]
        winner.elected = True
        for nominator in graph.nominators:
            for edge in nominator.edges:
                if edge.candidate == winner_i:
                    edge.load = winner.score - nominator.load
                    nominator.load = winner.score
        return winner_i

    @staticmethod
    def _assign_weights(graph: ElectionGraph) -> None:
        arithmetic = graph.arithmetic
        candidates = graph.candidates
        zero = arithmetic.zero()
        for nominator, edge in graph.edges():
            cand = candidates[edge.candidate]
            if cand.elected and nominator.load != 0:
                edge.weight = arithmetic.divide_down(
                    edge.load, nominator.load
                ) * nominator.budget
            else:
                edge.weight = zero
            cand.backed_stake = cand.backed_stake + edge.weight
