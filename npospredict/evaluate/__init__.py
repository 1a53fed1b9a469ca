'''Evaluate the forecast of an NPoS validator election.

The evaluation has three stages, each in its own module, operating in place
on an :class:`npospredict.graph.ElectionGraph`:

-   :mod:`phragmen` elects the validators by sequential Phragmén,
-   :mod:`equalize` rebalances the nominators' stake among the winners,
-   :mod:`rank` chains the stages and ranks all candidates by their backing.

None of the evaluators fetch any data; the voter list must be assembled
beforehand (see :mod:`npospredict.chain`).
'''

from npospredict.evaluate.core import *    # noqa
