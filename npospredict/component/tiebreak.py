'''Rules to pick one winner among candidates tied at the minimal score.

Sequential Phragmén elects a single candidate per round. When two or more
unelected candidates share the minimal score, the round needs a
deterministic rule to choose, otherwise the forecast would depend on
container iteration order. A rule is a callable taking the candidate arena
and the arena indices of the tied candidates (in ascending index order,
which is the order in which the candidates first appeared in the voter
list), returning the chosen index.

All supported rules are assembled in the ``TIE_BREAKERS`` dictionary keyed by
their name. ``get()`` retrieves from this dictionary by string key;
``construct()`` also accepts callables and passes them through.
'''

from typing import Callable, List, Sequence

import npospredict.component.core


TIE_BREAKERS = {}

tie_breaker_mark, get, construct = (
    npospredict.component.core.register_components(TIE_BREAKERS, 'tie breaker')
)

TieBreakerType = Callable[[Sequence, List[int]], int]


@tie_breaker_mark
def input_order(candidates: Sequence, tied: List[int]) -> int:
    '''Elect the tied candidate that first appeared in the voter list.

    This is what the staking dashboard does (it takes the first minimum in
    its candidate map, which is keyed in insertion order).
    '''
    return min(tied)


@tie_breaker_mark
def lowest_id(candidates: Sequence, tied: List[int]) -> int:
    '''Elect the tied candidate with the lexicographically lowest identifier.

    Independent of voter list ordering, so forecasts stay stable when the
    upstream data source reorders its records.
    '''
    return min(tied, key=lambda i: candidates[i].id)
