"""npospredict - forecasts of Nominated Proof-of-Stake validator elections.

NPoS chains elect their validator set from the approval votes of nominators,
weighted by their bonded stake, and the official result is only computed
on-chain at the end of an era. This library reproduces the sequential
Phragmén method with stake equalization, as used by staking dashboards, to
show the likely outcome ahead of time:

-   Voter lists are validated by the ``voter`` module and can be assembled
    from fetched chain storage records by the ``chain`` module.
-   The ``graph`` module builds the nominator/candidate approval graph.
-   The ``evaluate`` subpackage runs the election
    (:mod:`~npospredict.evaluate.phragmen`), equalizes the backing of the
    winners (:mod:`~npospredict.evaluate.equalize`) and ranks the
    candidates (:mod:`~npospredict.evaluate.rank`), whose
    :func:`~npospredict.evaluate.rank.predict` is the main entry point.
-   Pluggable pieces (number policies, tie-breaking rules) live in the
    ``component`` subpackage and are referred to by name.
-   The ``io`` subpackage reads and writes voter lists and rankings as JSON,
    and ``python -m npospredict`` evaluates such files from the command line.

All computations are pure and exact; nothing is shared between runs.
"""
