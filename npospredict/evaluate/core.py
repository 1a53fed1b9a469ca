'''General election evaluator machinery.'''

import abc
from typing import Any, List, Sequence

from npospredict.graph import Candidate, ElectionGraph
from npospredict.component.tiebreak import TieBreakerType


class ElectionError(Exception):
    '''An election with a valid setup ended up in an unresolvable state.'''
    pass


class GraphEvaluator(metaclass=abc.ABCMeta):
    '''Evaluate an election graph in place.

    A root abstract base class for the election stages operating on an
    :class:`npospredict.graph.ElectionGraph`.
    '''
    @abc.abstractmethod
    def evaluate(self, graph: ElectionGraph, *args, **kwargs) -> Any:
        raise NotImplementedError


def get_min_score(candidates: Sequence[Candidate],
                  contestants: List[int],
                  tie_breaker: TieBreakerType,
                  ) -> int:
    '''Return the arena index of the contestant with the minimal score.

    :param candidates: The candidate arena.
    :param contestants: Arena indices of candidates that may win, ascending.
    :param tie_breaker: Rule choosing among contestants tied at the minimum.
    :raises ElectionError: If there are no contestants.
    '''
    if not contestants:
        raise ElectionError('no candidate left to elect')
    best_score = min(candidates[i].score for i in contestants)
    tied = [i for i in contestants if candidates[i].score == best_score]
    if len(tied) == 1:
        return tied[0]
    else:
        return tie_breaker(candidates, tied)
