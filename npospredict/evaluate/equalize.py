'''Equalization of backed stakes after a sequential Phragmén election.

The edge weights produced by the sequential Phragmén rounds
(:class:`npospredict.evaluate.phragmen.SequentialPhragmen`) follow the load
increments of the election rounds, which can leave the winners supported by
the same nominator with very uneven backing. The equalizer revisits every
nominator that supports more than one winner and redistributes its budget so
that its least backed winners are topped up to a common level, withdrawing
support from its most backed winners if needed.

One pass over all nominators is an iteration; the backing converges towards
a more even distribution with more iterations. The staking dashboard whose
forecasts this library reproduces runs exactly ten.
'''

import logging
from typing import List, Optional
from numbers import Number

from npospredict.evaluate.core import GraphEvaluator
from npospredict.component.arithmetic import ExactNumber
from npospredict.graph import Candidate, Edge, ElectionGraph, Nominator
from npospredict.persist import simple_serialization

logger = logging.getLogger(__name__)


@simple_serialization
class StakeEqualizer(GraphEvaluator):
    '''Rebalance nominator budgets among their elected targets.

    :param iterations: Maximum number of passes over all nominators.
    :param tolerance: Stop early once no nominator is more unbalanced than
        this. The imbalance of a nominator is the difference between the
        highest backing among the winners it currently supports and the
        lowest backing among all winners it approves, plus its unspent
        budget. Nominators below the tolerance are also skipped within an
        iteration. The default of zero never stops early.
    '''
    def __init__(self,
                 iterations: int = 10,
                 tolerance: Number = 0,
                 ):
        if iterations < 0:
            raise ValueError(f'iterations must be non-negative: {iterations}')
        if tolerance < 0:
            raise ValueError(f'tolerance must be non-negative: {tolerance}')
        self.iterations = iterations
        self.tolerance = tolerance

    def evaluate(self, graph: ElectionGraph) -> int:
        '''Equalize the backing of the elected candidates in place.

        :param graph: An election graph after the election rounds.
        :returns: The number of iterations performed.
        '''
        arithmetic = graph.arithmetic
        tolerance = arithmetic.number(self.tolerance)
        with arithmetic.context():
            for iteration in range(self.iterations):
                max_imbalance = arithmetic.zero()
                for nominator in graph.nominators:
                    imbalance = self.equalize_nominator(
                        nominator, graph, tolerance
                    )
                    if imbalance is not None and imbalance > max_imbalance:
                        max_imbalance = imbalance
                logger.debug('equalization iteration %d, max imbalance %s',
                             iteration + 1, max_imbalance)
                if max_imbalance < tolerance:
                    logger.info('equalization converged after %d iterations',
                                iteration + 1)
                    return iteration + 1
        return self.iterations

    def equalize_nominator(self,
                           nominator: Nominator,
                           graph: ElectionGraph,
                           tolerance: ExactNumber,
                           ) -> Optional[ExactNumber]:
        '''Redistribute the budget of a single nominator.

        Must run within the arithmetic context of the graph.

        :returns: The imbalance of the nominator before redistribution, or
            None if it supports fewer than two elected candidates (such
            nominators are left untouched).
        '''
        arithmetic = graph.arithmetic
        candidates = graph.candidates
        elected_edges = [
            edge for edge in nominator.edges
            if candidates[edge.candidate].elected
        ]
        if len(elected_edges) < 2:
            return None
        imbalance = _imbalance(nominator, elected_edges, candidates)
        if tolerance > 0 and imbalance < tolerance:
            return imbalance
        zero = arithmetic.zero()
        for edge in elected_edges:
            cand = candidates[edge.candidate]
            cand.backed_stake = cand.backed_stake - edge.weight
            edge.weight = zero
        elected_edges.sort(key=lambda e: candidates[e.candidate].backed_stake)
        # find how many of the least backed targets the budget can level
        cumulative = zero
        last_index = len(elected_edges) - 1
        for i, edge in enumerate(elected_edges):
            backed = candidates[edge.candidate].backed_stake
            if backed * i - cumulative > nominator.budget:
                last_index = i - 1
                break
            cumulative = cumulative + backed
        last_cand = candidates[elected_edges[last_index].candidate]
        last_stake = last_cand.backed_stake
        ways_to_split = last_index + 1
        excess = nominator.budget + cumulative - last_stake * ways_to_split
        share = arithmetic.divide_down(excess, ways_to_split)
        for edge in elected_edges[:ways_to_split]:
            cand = candidates[edge.candidate]
            edge.weight = share + last_stake - cand.backed_stake
            cand.backed_stake = cand.backed_stake + edge.weight
        return imbalance


def _imbalance(nominator: Nominator,
               elected_edges: List[Edge],
               candidates: List[Candidate],
               ) -> ExactNumber:
    supported = [
        candidates[edge.candidate].backed_stake
        for edge in elected_edges if edge.weight > 0
    ]
    if not supported:
        return nominator.budget
    committed = sum(
        (edge.weight for edge in elected_edges[1:]), elected_edges[0].weight
    )
    lowest = min(candidates[edge.candidate].backed_stake
                 for edge in elected_edges)
    return max(supported) - lowest + nominator.budget - committed
